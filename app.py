"""
Routewise - Classifier-First Chat Assistant
Streamlit Web Application

Chat page over ChatService. Each browser session gets its own service
session id, and so its own conversation history.
"""

import logging
import time
from typing import Any, Dict

import streamlit as st

from ai import ConfigurationError
from config import APP_SUBTITLE, APP_TITLE, load_settings, setup_logging
from services import ChatResponse, ChatService

logger = logging.getLogger(__name__)

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================

st.set_page_config(
    page_title="Routewise",
    page_icon="🧭",
    layout="centered",
)


# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================

@st.cache_resource
def get_chat_service() -> ChatService:
    """One ChatService per server process; sessions are keyed by id."""
    settings = load_settings()
    setup_logging(settings.log_level)
    return ChatService(settings)


def initialize_session_state():
    """Initialize Streamlit session state variables."""

    if "session_id" not in st.session_state:
        st.session_state.session_id = f"session_{int(time.time() * 1000)}"

    if "messages" not in st.session_state:
        st.session_state.messages = []


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def render_chat_message(message: Dict[str, Any]):
    """Render a single chat message with its routing details."""
    avatar = "👤" if message["role"] == "user" else "🧭"

    with st.chat_message(message["role"], avatar=avatar):
        st.markdown(message["content"])

        metadata = message.get("metadata", {})
        if metadata.get("intent"):
            with st.expander("ℹ️ Message Details", expanded=False):
                st.caption(f"**Intent:** {metadata['intent']}")
                if metadata.get("intent_description"):
                    st.caption(metadata["intent_description"])
                if metadata.get("tools_used"):
                    st.caption(f"**Tools Used:** {', '.join(metadata['tools_used'])}")
                if metadata.get("fallback"):
                    st.caption(f"**Fallback:** {metadata['fallback']}")


def handle_user_input(service: ChatService, user_message: str):
    """Run one turn and record it for display."""
    st.session_state.messages.append({"role": "user", "content": user_message})

    with st.spinner("🤔 Thinking..."):
        response: ChatResponse = service.process_message(
            user_message=user_message,
            session_id=st.session_state.session_id,
        )

    st.session_state.messages.append({
        "role": "assistant",
        "content": response.message,
        "metadata": response.metadata,
    })


# ============================================================================
# SIDEBAR
# ============================================================================

def render_sidebar(service: ChatService):
    """Render sidebar with session info and controls."""

    with st.sidebar:
        with st.expander("📊 System Status", expanded=False):
            st.caption(f"**Response model:** {service.settings.response_config.model}")
            st.caption(f"**Classifier model:** {service.settings.classifier_config.model}")
            st.caption(f"**Search:** {service.settings.search_mode}")
            st.caption(f"**Session ID:** {st.session_state.session_id}")

            if st.button("🩺 Check Backend", use_container_width=True):
                status = service.get_status()
                st.caption(f"**Backend:** {status['backend']}")

        if st.button("🔄 Clear Conversation", use_container_width=True):
            service.reset_session(st.session_state.session_id)
            st.session_state.messages = []
            st.rerun()


# ============================================================================
# MAIN APP
# ============================================================================

def main():
    """Main application entry point."""
    try:
        service = get_chat_service()
    except ConfigurationError as e:
        st.error(f"❌ {e}")
        st.stop()

    initialize_session_state()
    render_sidebar(service)

    st.title(APP_TITLE)
    st.markdown(f"#### {APP_SUBTITLE}")

    for message in st.session_state.messages:
        render_chat_message(message)

    user_input = st.chat_input("Type your message here...", key="chat_input")

    if user_input:
        handle_user_input(service, user_input)
        st.rerun()


if __name__ == "__main__":
    main()
