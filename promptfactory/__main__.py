"""CLI entry point: python -m promptfactory render|encode|decode ..."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from promptfactory.codec import deserialize_messages, hydrate_messages, serialize_messages
from promptfactory.config import CodecConfig, load_codec_config
from promptfactory.errors import PromptFactoryError
from promptfactory.models import Message, SerializationFormat

logger = logging.getLogger(__name__)


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def _read_structured(path: str):
    """Parse a YAML or JSON file (YAML is a superset, so one loader does both)."""
    with open(path) as f:
        return yaml.safe_load(f)


def _collect_arguments(args: argparse.Namespace) -> dict:
    merged: dict = {}
    if args.args_file:
        raw = _read_structured(args.args_file)
        if not isinstance(raw, dict):
            raise PromptFactoryError(
                f"{args.args_file}: arguments file must contain a mapping"
            )
        merged.update(raw)
    # --arg wins over --args-file
    merged.update(dict(args.arg or []))
    return merged


def _load_messages(path: str) -> list[Message]:
    raw = _read_structured(path)
    if not isinstance(raw, list):
        raise PromptFactoryError(f"{path}: expected a list of messages")
    return [Message.from_dict(item) for item in raw]


def _codec_settings(args: argparse.Namespace) -> CodecConfig:
    config = load_codec_config(args.config)
    if getattr(args, "format", None):
        config.format = SerializationFormat(args.format)
    if getattr(args, "strict", False):
        config.strict = True
    return config


def _print_messages(messages: list[Message]) -> None:
    print(json.dumps([m.to_dict() for m in messages], indent=2, ensure_ascii=False))


def cmd_render(args: argparse.Namespace) -> None:
    from promptfactory.prompt import MESSAGES
    from promptfactory.serializer import load_prompt
    from promptfactory.template_engine import hydrate, render_template

    values = _collect_arguments(args)

    if args.prompt:
        prompt = load_prompt(args.prompt)
        prompt.strict = args.strict
        if values:
            prompt.upsert_arguments(values)
        logger.debug("Rendering %s prompt %s", prompt.kind, prompt.name)
        if args.as_messages and prompt.kind == MESSAGES:
            _print_messages(prompt.hydrate())
        else:
            print(prompt.hydrate_as_string())
    elif args.messages_file:
        messages = _load_messages(args.messages_file)
        _print_messages(hydrate_messages(messages, values, strict=args.strict))
    elif args.template_file:
        print(render_template(args.template_file, values, strict=args.strict))
    else:
        print(hydrate(args.template, values, strict=args.strict))


def cmd_encode(args: argparse.Namespace) -> None:
    config = _codec_settings(args)
    messages = _load_messages(args.messages_file)
    print(serialize_messages(messages, config.format, config.delimiters, strict=config.strict))


def cmd_decode(args: argparse.Namespace) -> None:
    config = _codec_settings(args)
    if args.input == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.input).read_text(encoding="utf-8")
    # A trailing newline from an editor or `echo` is not part of the payload.
    if text.endswith("\n") and config.delimiters.line != "\n":
        text = text[:-1]
    _print_messages(deserialize_messages(text, config.format, config.delimiters))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptfactory",
        description="Hydrate prompt templates and encode/decode message lists",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--config", default=None,
                        help="Codec config YAML (default: $PROMPTFACTORY_CONFIG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # -- render --
    p_render = subparsers.add_parser("render", help="Hydrate a template")
    source = p_render.add_mutually_exclusive_group(required=True)
    source.add_argument("--template", default=None, help="Template string")
    source.add_argument("--template-file", default=None, help="Read the template from a file")
    source.add_argument("--messages-file", default=None,
                        help="YAML/JSON list of {role, content, name} to hydrate")
    source.add_argument("--prompt", default=None, help="Prompt file written by save_prompt")
    p_render.add_argument("--arg", action="append", type=_key_value, metavar="KEY=VALUE",
                          help="Template argument (repeatable)")
    p_render.add_argument("--args-file", default=None, help="YAML/JSON mapping of arguments")
    p_render.add_argument("--strict", action="store_true", default=False,
                          help="Fail on arguments the template does not use")
    p_render.add_argument("--as-messages", action="store_true", default=False,
                          help="Print hydrated message prompts as JSON instead of text")
    p_render.set_defaults(func=cmd_render)

    # -- encode --
    p_encode = subparsers.add_parser("encode", help="Serialize a message list")
    p_encode.add_argument("messages_file", help="YAML/JSON list of {role, content, name}")
    p_encode.add_argument("--format", default=None, choices=[f.value for f in SerializationFormat])
    p_encode.add_argument("--strict", action="store_true", default=False,
                          help="Refuse messages that contain a delimiter")
    p_encode.set_defaults(func=cmd_encode)

    # -- decode --
    p_decode = subparsers.add_parser("decode", help="Deserialize a message list")
    p_decode.add_argument("input", nargs="?", default="-", help="File to read (default: stdin)")
    p_decode.add_argument("--format", default=None, choices=[f.value for f in SerializationFormat])
    p_decode.set_defaults(func=cmd_decode)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        args.func(args)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
