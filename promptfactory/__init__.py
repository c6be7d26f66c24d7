"""Prompt template hydration and message list encoding."""

from promptfactory.codec import (
    check_delimiter_collisions,
    deserialize_messages,
    hydrate_messages,
    serialize_messages,
)
from promptfactory.errors import (
    DecodingError,
    DelimiterCollisionError,
    EmptyFieldError,
    EmptyPlaceholderError,
    EncodingError,
    InvalidArgumentError,
    InvalidPromptFileError,
    MissingDelimiterError,
    MissingVariableError,
    PromptFactoryError,
    PromptStateError,
    UnusedArgumentError,
)
from promptfactory.models import (
    DEFAULT_DELIMITERS,
    HYDRATION_DELIMITERS,
    DelimiterSet,
    Message,
    PromptParser,
    SerializationFormat,
)
from promptfactory.prompt import Prompt, hydrate_template
from promptfactory.serializer import FileFormat, load_prompt, save_prompt
from promptfactory.template_engine import hydrate, placeholders, render_template

__version__ = "0.1.0"
