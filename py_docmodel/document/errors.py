from typing import Any, Optional, Sequence


class SchemaError(ValueError):
    """Raised while compiling a schema description, never while validating data."""

    def __init__(self, message: str, path: str, node: Any = None):
        super().__init__(message)
        self.path = path
        self.node = node


class ValidationError(ValueError):
    """Raised when a document does not match its compiled schema."""

    def __init__(self, message: str, path: str, expected: Optional[str] = None,
                 extra_keys: Sequence[str] = ()):
        super().__init__(message)
        self.path = path
        self.expected = expected
        self.extra_keys = tuple(extra_keys)
