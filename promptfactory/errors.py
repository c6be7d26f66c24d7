"""Exception types raised by the hydrator, the message codec and the prompt wrappers."""

from __future__ import annotations


class PromptFactoryError(ValueError):
    """Base class for every error raised by promptfactory."""


# ---------------------------------------------------------------------------
# Hydration
# ---------------------------------------------------------------------------

class MissingVariableError(PromptFactoryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable {name!r} is not provided in the prompt arguments")


class EmptyPlaceholderError(PromptFactoryError):
    def __init__(self):
        super().__init__("Template contains {} with no variable name")


class UnusedArgumentError(PromptFactoryError):
    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Prompt arguments not used by the template: {names}")


class InvalidArgumentError(PromptFactoryError):
    def __init__(self, name: str, value: object):
        self.name = name
        super().__init__(
            f"Argument {name!r} must be a str, int, float or bool, "
            f"got {type(value).__name__}"
        )


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

class MissingDelimiterError(PromptFactoryError):
    def __init__(self, segment: int, delimiter: str):
        self.segment = segment
        self.delimiter = delimiter
        super().__init__(
            f"Missing role delimiter {delimiter!r} in segment {segment}"
        )


class EmptyFieldError(PromptFactoryError):
    def __init__(self, field: str, index: int):
        self.field = field
        self.index = index
        super().__init__(f"Message {index} has an empty {field}")


class DelimiterCollisionError(PromptFactoryError):
    def __init__(self, field: str, delimiter: str, index: int | None = None):
        self.field = field
        self.delimiter = delimiter
        self.index = index
        where = field if index is None else f"Message {index} {field}"
        super().__init__(f"{where} contains the delimiter {delimiter!r}")


class EncodingError(PromptFactoryError):
    """The JSON encoder rejected the messages; the cause is chained."""


class DecodingError(PromptFactoryError):
    """Input could not be parsed; the cause is chained when there is one."""


# ---------------------------------------------------------------------------
# Wrapper / persistence
# ---------------------------------------------------------------------------

class PromptStateError(PromptFactoryError):
    """A Prompt is missing its template or its arguments."""


class InvalidPromptFileError(PromptFactoryError):
    """A saved prompt document is missing required fields."""
