"""
Exception types raised by FlowTag.
"""


class FlowTagError(Exception):
    """Base class for FlowTag errors"""


class LookupTableError(FlowTagError, ValueError):
    """A lookup table row could not be parsed"""

    def __init__(self, message: str, line_number: int = 0):
        super().__init__(message)
        self.line_number = line_number


class ConfigError(FlowTagError, ValueError):
    """Configuration file is missing, unreadable or invalid"""
