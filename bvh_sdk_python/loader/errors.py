"""
Parse errors raised while reading BVH text.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a BVH grammar or data violation."""

    MISSING_KEYWORD = "missing_keyword"
    MALFORMED_DECLARATION = "malformed_declaration"
    MISSING_BRACE = "missing_brace"
    INVALID_OFFSET = "invalid_offset"
    MISSING_CHANNELS = "missing_channels"
    INVALID_CHANNELS = "invalid_channels"
    INVALID_HEADER = "invalid_header"
    INVALID_CHANNEL_TYPE = "invalid_channel_type"
    INVALID_CHANNEL_VALUE = "invalid_channel_value"
    UNEXPECTED_END = "unexpected_end"
    EXTRA_TOKENS = "extra_tokens"


class BvhParseError(ValueError):
    """
    Terminal BVH parse failure.

    Attributes:
        kind: ErrorKind describing what went wrong
        message: Human-readable description
        line_number: 1-based source line, or None when not tied to a line
    """

    def __init__(self, kind, message, line_number=None):
        self.kind = kind
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            super().__init__(f"line {line_number}: {message}")
        else:
            super().__init__(message)
