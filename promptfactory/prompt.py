"""A named template plus the arguments used to hydrate it.

A template is either a plain string or a list of ``Message`` records; the
two are told apart by type alone (see ``template_kind``), and every
operation dispatches through ``hydrate_template``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from promptfactory.codec import hydrate_messages, serialize_messages
from promptfactory.errors import PromptStateError
from promptfactory.models import (
    CHAT_TRANSCRIPT_DELIMITERS,
    Message,
    PromptArguments,
    PromptParser,
    Scalar,
    SerializationFormat,
)
from promptfactory.template_engine import hydrate

logger = logging.getLogger(__name__)

Template = Union[str, list[Message]]

STRING = "string"
MESSAGES = "messages"


def template_kind(template: Optional[Template]) -> Optional[str]:
    if template is None:
        return None
    return STRING if isinstance(template, str) else MESSAGES


def coerce_template(template: Union[str, Sequence[Any]]) -> Template:
    """Accept a string, or a list of Message objects / message mappings."""
    if isinstance(template, str):
        return template
    if isinstance(template, Mapping) or not isinstance(template, Sequence):
        raise TypeError(
            f"Template must be a string or a list of messages, got {type(template).__name__}"
        )
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in template]


def hydrate_template(
    template: Template, args: Mapping[str, Scalar], *, strict: bool = False
) -> Union[str, list[Message]]:
    if template_kind(template) == STRING:
        return hydrate(template, args, strict=strict)
    return hydrate_messages(template, args, strict=strict)


@dataclass
class Prompt:
    """A named template and its arguments.

    Setting either half validates it against the other (when both are
    present) before storing, so a Prompt never holds a template that its
    arguments cannot hydrate.
    """

    name: str
    template: Optional[Template] = None
    arguments: Optional[PromptArguments] = None
    parser: PromptParser = PromptParser.F_STRING
    strict: bool = False  # reject arguments the template never uses

    def __post_init__(self):
        self.parser = PromptParser(self.parser)
        if self.template is not None:
            self.template = coerce_template(self.template)
        if self.arguments is not None:
            self.arguments = dict(self.arguments)
        if self.template is not None and self.arguments is not None:
            self._validate(self.template, self.arguments)

    @property
    def kind(self) -> Optional[str]:
        return template_kind(self.template)

    def _validate(self, template: Template, args: Mapping[str, Scalar]):
        return hydrate_template(template, args, strict=self.strict)

    # -- setters ------------------------------------------------------------

    def set_template(self, template: Union[str, Sequence[Any]]) -> None:
        template = coerce_template(template)
        if self.arguments is not None:
            self._validate(template, self.arguments)
        self.template = template
        logger.debug("Prompt %s: %s template set", self.name, self.kind)

    def set_arguments(self, args: Mapping[str, Scalar]) -> None:
        args = dict(args)
        if self.template is not None:
            self._validate(self.template, args)
        self.arguments = args
        logger.debug("Prompt %s: arguments set (%s)", self.name, sorted(args))

    def upsert_arguments(self, args: Mapping[str, Scalar]) -> None:
        """Merge *args* over the current arguments."""
        merged = dict(self.arguments or {})
        merged.update(args)
        self.set_arguments(merged)

    # -- hydration ----------------------------------------------------------

    def _require_ready(self) -> tuple[Template, PromptArguments]:
        if self.template is None:
            raise PromptStateError(f"Prompt {self.name!r}: template is not set")
        if self.arguments is None:
            raise PromptStateError(f"Prompt {self.name!r}: arguments are not set")
        return self.template, self.arguments

    def hydrate(self) -> Union[str, list[Message]]:
        """Hydrated string, or hydrated message list for message templates."""
        template, args = self._require_ready()
        return self._validate(template, args)

    def hydrate_as_string(self) -> str:
        """Hydrated text; message templates render as ``role: content`` lines."""
        result = self.hydrate()
        if isinstance(result, str):
            return result
        return serialize_messages(
            result, SerializationFormat.CUSTOM, CHAT_TRANSCRIPT_DELIMITERS
        )
