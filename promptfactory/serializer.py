"""Save and load prompts as JSON or YAML files.

On disk, field names are camelCase and the document carries a
``PromptFactory`` version marker::

    PromptFactory: "1"
    name: greeting
    promptTemplate: "Hello, {name}!"
    promptArguments: {name: Alice}
    parser: f-string

Message templates are stored under ``messagesTemplate`` as a list of
``{role, content, name?}`` mappings.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from promptfactory.casing import keys_to_camel_case, keys_to_snake_case
from promptfactory.errors import (
    DecodingError,
    InvalidPromptFileError,
    PromptFactoryError,
    PromptStateError,
)
from promptfactory.models import PromptParser
from promptfactory.prompt import MESSAGES, Prompt

logger = logging.getLogger(__name__)

FILE_VERSION = "1"
_VERSION_KEY = "PromptFactory"


class FileFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


def file_format_for(path: str | Path) -> FileFormat:
    """Pick a format from the file suffix; anything but .yaml/.yml is JSON."""
    if Path(path).suffix.lower() in (".yaml", ".yml"):
        return FileFormat.YAML
    return FileFormat.JSON


def prompt_to_dict(prompt: Prompt) -> dict[str, Any]:
    if prompt.arguments is None:
        raise PromptStateError(f"Prompt {prompt.name!r}: arguments are not set")
    if prompt.template is None:
        raise PromptStateError(f"Prompt {prompt.name!r}: template is not set")

    fields: dict[str, Any] = {"name": prompt.name}
    if prompt.kind == MESSAGES:
        fields["messages_template"] = [m.to_dict() for m in prompt.template]
    else:
        fields["prompt_template"] = prompt.template
    fields["prompt_arguments"] = dict(prompt.arguments)
    fields["parser"] = prompt.parser.value
    return {_VERSION_KEY: FILE_VERSION, **keys_to_camel_case(fields)}


def prompt_from_dict(data: Any) -> Prompt:
    if not isinstance(data, dict):
        raise InvalidPromptFileError(
            f"Prompt file must contain a mapping, got {type(data).__name__}"
        )
    data = dict(data)
    data.pop(_VERSION_KEY, None)
    fields = keys_to_snake_case(data)

    missing = [k for k in ("name", "prompt_arguments", "parser") if k not in fields]
    if "prompt_template" not in fields and "messages_template" not in fields:
        missing.append("prompt_template|messages_template")
    if missing:
        raise InvalidPromptFileError(f"Prompt file is missing fields: {missing}")

    try:
        parser = PromptParser(fields["parser"])
    except ValueError as exc:
        raise InvalidPromptFileError(f"Unsupported parser: {fields['parser']!r}") from exc

    # Messages win when both are present.
    template = fields.get("messages_template", fields.get("prompt_template"))
    try:
        return Prompt(
            name=fields["name"],
            template=template,
            arguments=fields["prompt_arguments"],
            parser=parser,
        )
    except PromptFactoryError:
        raise
    except (TypeError, ValueError) as exc:
        raise InvalidPromptFileError(f"Invalid prompt file content: {exc}") from exc


def save_prompt(
    path: str | Path, prompt: Prompt, format: Optional[FileFormat] = None
) -> None:
    """Write *prompt* to *path*; the format defaults to the file suffix."""
    format = FileFormat(format) if format else file_format_for(path)
    data = prompt_to_dict(prompt)
    if format is FileFormat.JSON:
        text = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    Path(path).write_text(text, encoding="utf-8")
    logger.info("Saved prompt %s to %s (%s)", prompt.name, path, format.value)


def load_prompt(path: str | Path, format: Optional[FileFormat] = None) -> Prompt:
    """Read a prompt written by ``save_prompt``."""
    format = FileFormat(format) if format else file_format_for(path)
    content = Path(path).read_text(encoding="utf-8")
    try:
        if format is FileFormat.JSON:
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as exc:
        raise DecodingError(f"Failed to parse {format.value.upper()} in {path}: {exc}") from exc

    prompt = prompt_from_dict(data)
    logger.debug("Loaded %s prompt %s from %s", prompt.kind, prompt.name, path)
    return prompt
