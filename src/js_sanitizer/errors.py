"""Custom exception classes and error messages."""

ERROR_MSG_EMPTY_PATHS = "The list of paths is empty"
ERROR_MSG_NO_COMMON_ANCESTOR = "No common ancestor found"


class PathNotFoundError(Exception):
    """Raised when input paths are missing or share no common ancestor."""


class ConfigLoadError(Exception):
    """Raised when a configuration file cannot be loaded."""


class SourceParseError(Exception):
    """Raised when a source file cannot be handed to the parser."""


class DocblockSyntaxError(ValueError):
    """Raised when a comment claimed as a docblock is not a closed block comment."""
