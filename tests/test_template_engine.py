"""Tests for promptfactory.template_engine."""

import random
import string

import pytest

from promptfactory.errors import (
    EmptyPlaceholderError,
    InvalidArgumentError,
    MissingVariableError,
    UnusedArgumentError,
)
from promptfactory.template_engine import hydrate, placeholders, render_template


class TestHydrate:
    def test_basic_replacement(self):
        assert hydrate("Hello, {name}!", {"name": "Alice"}) == "Hello, Alice!"

    def test_multiple_replacements(self):
        result = hydrate("Hello, {name}! Welcome to {place}.", {"name": "Alice", "place": "Wonderland"})
        assert result == "Hello, Alice! Welcome to Wonderland."

    def test_repeated_placeholder(self):
        assert hydrate("{a}-{a}", {"a": "x"}) == "x-x"

    def test_no_placeholders(self):
        assert hydrate("This is a simple string.", {}) == "This is a simple string."

    def test_empty_template(self):
        assert hydrate("", {}) == ""

    def test_multiline(self):
        template = "line1={a}\nline2={b}"
        assert hydrate(template, {"a": "1", "b": "2"}) == "line1=1\nline2=2"

    def test_value_with_newline(self):
        assert hydrate("Hi, {name}!", {"name": "Jane\n"}) == "Hi, Jane\n!"

    def test_value_is_not_rescanned(self):
        assert hydrate("{a}", {"a": "{b}"}) == "{b}"


class TestEscapes:
    def test_escaped_pair(self):
        assert hydrate("{{}}", {}) == "{}"

    def test_escaped_brackets_in_text(self):
        result = hydrate("This is a test of {{}} escaped brackets.", {})
        assert result == "This is a test of {} escaped brackets."

    def test_double_escaped_brackets(self):
        result = hydrate("This is a test of {{{{}}}} escaped brackets.", {})
        assert result == "This is a test of {{}} escaped brackets."

    def test_escapes_with_variable(self):
        result = hydrate("This is a test of {name}'s {{}} escaped brackets.", {"name": "Bob"})
        assert result == "This is a test of Bob's {} escaped brackets."

    def test_escaped_word(self):
        result = hydrate("Nested {{brackets}} and {name}'s escaped {{bracket}}.", {"name": "Developer"})
        assert result == "Nested {brackets} and Developer's escaped {bracket}."

    def test_variable_wrapped_in_literal_braces(self):
        assert hydrate("Hello, {{{name}}}!", {"name": "John"}) == "Hello, {John}!"

    def test_dict_literal(self):
        result = hydrate("d = {{{key}: 1}}", {"key": '"x"'})
        assert result == 'd = {"x": 1}'

    def test_lone_closing_brace_is_literal(self):
        assert hydrate("a } b", {}) == "a } b"

    def test_unterminated_placeholder_is_literal(self):
        assert hydrate("tail {name", {}) == "tail {name"


class TestPlaceholderNames:
    def test_inner_open_brace_joins_name(self):
        assert hydrate("{a{b}", {"a{b": "v"}) == "v"

    def test_inner_open_brace_missing(self):
        with pytest.raises(MissingVariableError) as exc_info:
            hydrate("{a{b}", {"b": "v"})
        assert exc_info.value.name == "a{b"

    def test_name_may_contain_spaces(self):
        assert hydrate("{first name}", {"first name": "Ada"}) == "Ada"

    def test_placeholders_first_seen_order(self):
        assert placeholders("{b} {a} {b} {{c}}") == ["b", "a"]

    def test_placeholders_empty_raises(self):
        with pytest.raises(EmptyPlaceholderError):
            placeholders("x {} y")


class TestValidation:
    def test_empty_placeholder(self):
        with pytest.raises(EmptyPlaceholderError):
            hydrate("{}", {})

    def test_empty_placeholder_even_with_args(self):
        with pytest.raises(EmptyPlaceholderError):
            hydrate("This is a test of {} brackets.", {"x": "1"})

    def test_empty_placeholder_between_escapes(self):
        with pytest.raises(EmptyPlaceholderError):
            hydrate("This is a test of {{{}}} brackets.", {})

    def test_missing_variable(self):
        with pytest.raises(MissingVariableError, match="'x'") as exc_info:
            hydrate("Hi {x}", {})
        assert exc_info.value.name == "x"

    def test_first_missing_variable_reported(self):
        with pytest.raises(MissingVariableError) as exc_info:
            hydrate("Hello, {name}, your ID is {id}.", {"name": "Bob"})
        assert exc_info.value.name == "id"

    def test_extra_arguments_ignored(self):
        assert hydrate("Hello, {name}!", {"name": "Charlie", "age": 30}) == "Hello, Charlie!"

    def test_strict_rejects_extra_arguments(self):
        with pytest.raises(UnusedArgumentError) as exc_info:
            hydrate("Hello, {name}!", {"name": "Charlie", "age": 30, "city": "X"}, strict=True)
        assert exc_info.value.names == ["age", "city"]

    def test_strict_accepts_exact_arguments(self):
        assert hydrate("{a}{b}", {"a": "1", "b": "2"}, strict=True) == "12"

    def test_non_scalar_value(self):
        with pytest.raises(InvalidArgumentError):
            hydrate("{a}", {"a": ["x"]})

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            hydrate("{missing}", {})


class TestValueFormatting:
    def test_int(self):
        assert hydrate("port={port}", {"port": 8000}) == "port=8000"

    def test_float(self):
        assert hydrate("t={t}", {"t": 0.5}) == "t=0.5"

    def test_bools(self):
        assert hydrate("{a}/{b}", {"a": True, "b": False}) == "true/false"


def _random_template(rng: random.Random) -> tuple[str, dict]:
    pieces = []
    args = {}
    alphabet = string.ascii_letters + " .,!\n"
    for _ in range(rng.randint(0, 8)):
        choice = rng.randint(0, 3)
        if choice == 0:
            pieces.append("".join(rng.choice(alphabet) for _ in range(rng.randint(1, 6))))
        elif choice == 1:
            pieces.append(rng.choice(["{{", "}}"]))
        else:
            name = "".join(rng.choice(string.ascii_lowercase) for _ in range(rng.randint(1, 4)))
            args[name] = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 5)))
            pieces.append("{" + name + "}")
    return "".join(pieces), args


@pytest.mark.parametrize("seed", range(50))
def test_complete_arguments_always_hydrate(seed):
    """Every placeholder has an argument: hydration succeeds and leaves no placeholder text."""
    rng = random.Random(seed)
    template, args = _random_template(rng)
    result = hydrate(template, args)
    # Argument values are brace-free, so every brace left came from an escape.
    escapes = template.count("{{") + template.count("}}")
    assert result.count("{") + result.count("}") <= escapes


class TestRenderTemplate:
    def test_reads_file_and_replaces(self, tmp_path):
        path = tmp_path / "prompt.txt"
        path.write_text("model={model} gpu={gpu}")
        assert render_template(path, {"model": "llama", "gpu": "H100"}) == "model=llama gpu=H100"

    def test_double_braces_in_file(self, tmp_path):
        path = tmp_path / "prompt.py.tpl"
        path.write_text('env({{"KEY": "{value}"}})')
        assert render_template(str(path), {"value": "hello"}) == 'env({"KEY": "hello"})'

    def test_strict_passthrough(self, tmp_path):
        path = tmp_path / "prompt.txt"
        path.write_text("{a}")
        with pytest.raises(UnusedArgumentError):
            render_template(path, {"a": "1", "b": "2"}, strict=True)
