"""
Utility functions for the codeinput package.
"""

import os


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/codeinput).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def preview(text: str, limit: int = 50) -> str:
    """Shorten query text for log lines."""
    return f"{text[:limit]}{'...' if len(text) > limit else ''}"
