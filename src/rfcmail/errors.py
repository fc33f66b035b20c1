from __future__ import annotations


class RfcMailError(Exception):
    """Base class for every error raised by rfcmail."""


class ConfigError(RfcMailError):
    pass


class ParseError(RfcMailError):
    """A parser could not consume its input."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return type(self) is type(other) and self.reason == other.reason

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.reason))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.reason!r})"


class ExplicitError(ParseError):
    """A specific token was expected and is absent."""


class UnknownError(ParseError):
    """No alternative matched, or an invariant was violated."""


class DuplicateHeaderError(ParseError):
    def __init__(self, name: str):
        super().__init__(f"There are too many {name} headers in this mail.")
        self.name = name


class MissingHeaderError(ParseError):
    def __init__(self, name: str):
        super().__init__(f"The {name} header is required.")
        self.name = name
