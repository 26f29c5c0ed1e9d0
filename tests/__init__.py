"""
Routewise Test Suite

Unit tests for every pipeline stage plus the CLI and chat service.
Run tests with: pytest tests/
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
