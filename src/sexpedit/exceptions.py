# Custom exceptions for sexpedit

class SexpeditError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ReadError(SexpeditError):
    """Raised when text cannot be read into a lossless tree (unbalanced or unterminated)."""
    def __init__(self, message: str, position: int = -1):
        self.message = message
        self.position = position
        where = f" at offset {position}" if position >= 0 else ""
        super().__init__(f"Read error{where}: {message}")


class TransformRefused(SexpeditError):
    """
    Raised inside the transform engine when an operation's precondition is not met.

    The facade converts it into a no-op TransformResult carrying the reason,
    it never reaches the caller as an exception.
    """
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class BoundaryNotFound(TransformRefused):
    """Raised when a required containing structure (list, string, sibling) does not exist."""
    pass


class ConfigError(SexpeditError):
    """Raised for configuration-related problems."""
    pass


class DialectError(ConfigError):
    """Raised when a dialect name or file extension is not known."""
    def __init__(self, name: str, known: list = None):
        self.name = name
        self.known = known or []
        message = f"Unknown dialect '{name}'."
        if self.known:
            message += f" Known dialects: {', '.join(self.known)}"
        super().__init__(message)
