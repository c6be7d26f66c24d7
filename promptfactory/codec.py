"""Message codec: message lists to and from a single string.

Two encodings:

* ``JSON``: a compact JSON array of ``{"role", "content", "name"?}`` objects.
  Lossless for any field contents.
* ``CUSTOM``: one ``role[$$name]=>>content`` segment per message, joined by
  the line delimiter. Delimiters inside field values are *not* escaped, so
  values must not contain them; ``strict=True`` checks this up front.

Neither encoding is self-describing: decode with the same format and
delimiters used to encode.
"""

from __future__ import annotations

import json
from typing import Iterable, Mapping, Optional, Sequence

from promptfactory.errors import (
    DecodingError,
    DelimiterCollisionError,
    EmptyFieldError,
    EncodingError,
    MissingDelimiterError,
)
from promptfactory.models import (
    DEFAULT_DELIMITERS,
    HYDRATION_DELIMITERS,
    DelimiterSet,
    Message,
    Scalar,
    SerializationFormat,
)
from promptfactory.template_engine import hydrate


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def check_delimiter_collisions(
    messages: Iterable[Message], delimiters: DelimiterSet = DEFAULT_DELIMITERS
) -> None:
    """Raise ``DelimiterCollisionError`` if any field contains a delimiter."""
    for index, msg in enumerate(messages):
        fields = [("role", msg.role), ("content", msg.content)]
        if msg.name is not None:
            fields.append(("name", msg.name))
        for field, value in fields:
            for delim in delimiters.as_tuple():
                if delim in value:
                    raise DelimiterCollisionError(field, delim, index)


def _check_non_empty(messages: Iterable[Message]) -> None:
    for index, msg in enumerate(messages):
        if not msg.role:
            raise EmptyFieldError("role", index)
        if not msg.content:
            raise EmptyFieldError("content", index)


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------

def _serialize_json(messages: Sequence[Message]) -> str:
    try:
        return json.dumps(
            [m.to_dict() for m in messages],
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Failed to encode messages as JSON: {exc}") from exc


def _serialize_custom(messages: Sequence[Message], delimiters: DelimiterSet) -> str:
    lines = []
    for msg in messages:
        if msg.name is not None:
            prefix = f"{msg.role}{delimiters.name}{msg.name}{delimiters.role}"
        else:
            prefix = f"{msg.role}{delimiters.role}"
        lines.append(f"{prefix}{msg.content}")
    return delimiters.line.join(lines)


def serialize_messages(
    messages: Sequence[Message],
    format: SerializationFormat = SerializationFormat.JSON,
    delimiters: Optional[DelimiterSet] = None,
    *,
    strict: bool = False,
) -> str:
    """Encode *messages* as one string.

    *delimiters* only matter for ``CUSTOM``; ``None`` means the defaults.
    With *strict*, custom encoding refuses messages that could not be
    decoded back (empty role/content or a delimiter inside a field).
    """
    format = SerializationFormat(format)
    if format is SerializationFormat.JSON:
        return _serialize_json(messages)

    delimiters = delimiters or DEFAULT_DELIMITERS
    if strict:
        _check_non_empty(messages)
        check_delimiter_collisions(messages, delimiters)
    return _serialize_custom(messages, delimiters)


# ---------------------------------------------------------------------------
# Deserialize
# ---------------------------------------------------------------------------

def _deserialize_json(text: str) -> list[Message]:
    try:
        raw = json.loads(text)
    except ValueError as exc:
        raise DecodingError(f"Failed to parse JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise DecodingError(f"Expected a JSON array of messages, got {type(raw).__name__}")
    messages = []
    for index, item in enumerate(raw):
        try:
            messages.append(Message.from_dict(item))
        except ValueError as exc:
            raise DecodingError(f"Invalid message at index {index}: {exc}") from exc
    return messages


def _parse_segment(segment: str, index: int, delimiters: DelimiterSet) -> Message:
    role_at = segment.find(delimiters.role)
    if role_at == -1:
        raise MissingDelimiterError(index, delimiters.role)

    content = segment[role_at + len(delimiters.role):]
    name_at = segment.find(delimiters.name)
    # The name delimiter only counts when it comes before the role delimiter;
    # otherwise its text stays in the content.
    if name_at != -1 and name_at < role_at:
        role = segment[:name_at]
        name: Optional[str] = segment[name_at + len(delimiters.name):role_at]
    else:
        role = segment[:role_at]
        name = None

    if not role:
        raise EmptyFieldError("role", index)
    if not content:
        raise EmptyFieldError("content", index)
    return Message(role=role, content=content, name=name)


def _deserialize_custom(text: str, delimiters: DelimiterSet) -> list[Message]:
    if text == "":
        return []
    return [
        _parse_segment(segment, index, delimiters)
        for index, segment in enumerate(text.split(delimiters.line))
    ]


def deserialize_messages(
    text: str,
    format: SerializationFormat = SerializationFormat.JSON,
    delimiters: Optional[DelimiterSet] = None,
) -> list[Message]:
    """Decode a string produced by ``serialize_messages``."""
    format = SerializationFormat(format)
    if format is SerializationFormat.JSON:
        return _deserialize_json(text)
    return _deserialize_custom(text, delimiters or DEFAULT_DELIMITERS)


# ---------------------------------------------------------------------------
# Hydrate a message list as one template
# ---------------------------------------------------------------------------

def hydrate_messages(
    messages: Sequence[Message],
    args: Mapping[str, Scalar],
    *,
    strict: bool = False,
    delimiters: DelimiterSet = HYDRATION_DELIMITERS,
) -> list[Message]:
    """Fill placeholders across a whole message list.

    The list is flattened with the custom encoding, hydrated as a single
    string and decoded again. A substituted value that contains one of the
    delimiters will split or merge messages on decode; *strict* rejects such
    values up front, and unused arguments as well.
    """
    for delim in delimiters.as_tuple():
        if "{" in delim or "}" in delim:
            raise ValueError(f"Hydration delimiter {delim!r} must not contain braces")

    if strict:
        check_delimiter_collisions(messages, delimiters)
        for key, value in args.items():
            if not isinstance(value, str):
                continue
            for delim in delimiters.as_tuple():
                if delim in value:
                    raise DelimiterCollisionError(f"Argument {key!r}", delim)

    flat = serialize_messages(messages, SerializationFormat.CUSTOM, delimiters)
    hydrated = hydrate(flat, args, strict=strict)
    return deserialize_messages(hydrated, SerializationFormat.CUSTOM, delimiters)
