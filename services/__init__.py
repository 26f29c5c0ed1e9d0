"""
Services Module

This module contains the session-level coordination for Routewise:
- Chat service: builds the pipeline from settings, keeps one orchestrator
  per session and turns failed turns into user-facing responses
"""

from .chat_service import (
    ChatService,
    ChatResponse,
    Pipeline,
    build_pipeline,
    process_user_message,
)

__all__ = [
    "ChatService",
    "ChatResponse",
    "Pipeline",
    "build_pipeline",
    "process_user_message",
]
