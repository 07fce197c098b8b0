"""Textual widgets."""

from .code_input import CodeInput

__all__ = ["CodeInput"]
