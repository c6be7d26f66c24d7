"""Data models shared by the hydrator, the codec and the prompt wrappers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

Scalar = Union[str, int, float, bool]
PromptArguments = dict[str, Scalar]


class SerializationFormat(str, Enum):
    JSON = "json"
    CUSTOM = "custom"


class PromptParser(str, Enum):
    F_STRING = "f-string"


@dataclass(frozen=True)
class Message:
    """One turn of a conversation."""

    role: str
    content: str
    name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name is not None:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        if not isinstance(data, Mapping):
            raise ValueError(f"Message must be a mapping, got {type(data).__name__}")
        role = data.get("role")
        content = data.get("content")
        name = data.get("name")
        if not isinstance(role, str) or not isinstance(content, str):
            raise ValueError(
                f"Message requires string 'role' and 'content', got {dict(data)!r}"
            )
        if name is not None and not isinstance(name, str):
            raise ValueError(f"Message 'name' must be a string, got {type(name).__name__}")
        return cls(role=role, content=content, name=name)


@dataclass(frozen=True)
class DelimiterSet:
    """Separators used by the custom message encoding."""

    line: str = "<&&pf-line&&>"  # between messages
    role: str = "=>>"            # between role/name prefix and content
    name: str = "$$"             # between role and name

    def __post_init__(self):
        for label in ("line", "role", "name"):
            value = getattr(self, label)
            if not isinstance(value, str) or not value:
                raise ValueError(f"{label} delimiter must be a non-empty string")

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.line, self.role, self.name)


DEFAULT_DELIMITERS = DelimiterSet()

# Used when a message list is flattened to one string for hydration.
# Must stay free of braces so the hydrator leaves them untouched.
HYDRATION_DELIMITERS = DelimiterSet(
    line="<&&pf-hydrate-line&&>",
    role="<&&pf-hydrate-role&&>",
    name="<&&pf-hydrate-name&&>",
)

# "role: content" lines, for showing a hydrated conversation as plain text.
CHAT_TRANSCRIPT_DELIMITERS = DelimiterSet(line="\n", role=": ", name=" ")
