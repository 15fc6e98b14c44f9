"""Errors and warnings raised while reading pet configurations.

Every failure is a `DecodeError` carrying an optional `ErrorContext`.
The context tells where the failure happened (file, line, pet block,
field) and what failed (a YAML excerpt of the offending element), and
is rendered together with the message when the error is printed.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump
from yaml.error import MarkedYAMLError

from pet_sounds.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint
    from typing import Self

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails, ValidationError
    from yaml.nodes import Node

LOCATION_INDENT = ' ' * 4
EXCERPT_INDENT = ' ' * 8
EXCERPT_YAML_INDENT = 2

FORMAT_REPLACER = '<expression>'
FORMAT_FILENAME = '<unicode string>'

#: Block line parts, in display order.
BLOCK_PARTS = (
    ('block_num', 'block {}'),
    ('label', 'pet "{}"'),
    ('discriminator', 'type "{}"'),
    ('field', 'field "{}"'),
)


class ErrorContext(TypedDict, total=False):
    """Where and on what a decoding failure happened.

    Every key is optional. Line, column and block numbers are zero-based
    and displayed one-based.
    """

    #: Name of the configuration file.
    filename: str | None

    #: Line of the failure in the file.
    line_num: int | None
    #: Column of the failure in the file.
    column_num: int | None

    #: Position of the pet block in the document.
    block_num: int | None
    #: Identity label of the pet block.
    label: str | None
    #: Resolved type of the pet block.
    discriminator: str | None
    #: Attribute being decoded.
    field: str | None

    #: Exception that caused the failure.
    error: Exception | None

    #: Offending raw element, shown as a YAML excerpt.
    element: Any


class ErrorFormatter:
    """Renders decoding errors for humans.

    A rendered error is the message followed by indented lines telling
    where the failure is in the source text, which pet block it concerns
    and, when available, an excerpt of the offending YAML.

    Example:
        Unknown attribute 'color' for pet 'Ink' of type 'cat'
            in "pets.yaml"
            on block 1, pet "Ink", type "cat", field "color"
                 ...
                color: black
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Render a message with its context.

        Args:
            message: Error message.
            context: Optional failure context.

        Returns:
            The message, followed by the location and excerpt lines.
        """
        if not context:
            return message

        lines = [message, *cls.location_lines(context), *cls.excerpt_lines(context)]

        return linesep.join(lines).rstrip()

    @staticmethod
    def location_lines(context: ErrorContext) -> list[str]:
        """Describe the source position and the pet block of a failure."""
        position = f'in "{context.get('filename') or FORMAT_FILENAME}"'
        if (line_num := context.get('line_num')) is not None:
            position += f', line {line_num + 1}'
            if (column_num := context.get('column_num')) is not None:
                position += f', column {column_num + 1}'

        lines = [f'{LOCATION_INDENT}{position}']

        parts = []
        for key, template in BLOCK_PARTS:
            value = context.get(key)
            if value is None:
                continue
            parts.append(template.format(value + 1 if key == 'block_num' else value))

        if parts:
            lines.append(f'{LOCATION_INDENT}on {', '.join(parts)}')

        return lines

    @classmethod
    def excerpt_lines(cls, context: ErrorContext) -> list[str]:
        """Show the offending part of the document.

        YAML errors show the source snippet around their problem mark.
        Other errors show the offending element dumped back to YAML,
        with expressions masked.
        """
        error = context.get('error')
        if isinstance(error, MarkedYAMLError):
            mark = error.problem_mark
            snippet = mark.get_snippet(indent=0) if mark is not None else None
            return cls._indent((snippet or '').splitlines())

        if element := context.get('element'):
            dumped = dump(cls._mask(element), indent=EXCERPT_YAML_INDENT, sort_keys=False)
            return [f'{EXCERPT_INDENT} ...', *cls._indent(dumped.splitlines())]

        return []

    @classmethod
    def _mask(cls, value: Any) -> Any:  # noqa: ANN401
        """Replace expressions and other opaque objects by a placeholder."""
        if isinstance(value, MAPPINGS):
            return {key: cls._mask(item) for key, item in value.items()}

        if isinstance(value, SEQUENCES):
            return [cls._mask(item) for item in value]

        if value is None or isinstance(value, SCALARS):
            return value

        return FORMAT_REPLACER

    @staticmethod
    def _indent(lines: list[str]) -> list[str]:
        """Indent excerpt lines, dropping blank ones."""
        return [f'{EXCERPT_INDENT}{line}' for line in lines if line.strip()]


class PluginWarning(UserWarning):
    """Warning about a plugin that was skipped or shadows a definition.

    Emitted instead of `PluginError` when strict mode is off.
    """


class DecodeError(Exception, ErrorFormatter):
    """Base class of every pet-sounds error."""

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Error message, without location.
            context: Failure context.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Render the message with its context."""
        return self.format(self.message, self.context)

    def with_context(self, **values: Any) -> 'Self':  # noqa: ANN401
        """Copy the error with a wider context.

        Known values are kept, so the innermost location of a failure wins
        over the locations added while the error propagates.

        Args:
            **values: `ErrorContext` entries.

        Returns:
            A new error of the same type.
        """
        known = {
            key: value
            for key, value in (self.context or {}).items()
            if value is not None
        }

        return type(self)(self.message, context=ErrorContext(**{**values, **known}))  # type: ignore[typeddict-item]

    @classmethod
    def from_yaml_node(cls, message: str, node: 'Node',
                       error: Exception | None = None) -> 'Self':
        """Create an error located at a YAML node.

        Args:
            message: Error message.
            node: Offending node.
            error: Exception that caused the failure.

        Returns:
            The error.
        """
        mark = node.start_mark

        return cls(message, context=ErrorContext(
            filename=mark.name,
            line_num=mark.line,
            column_num=mark.column,
            error=error,
        ))


class PluginError(DecodeError):
    """Plugin failure on strict mode.

    Raised when an entry point does not load, does not provide a plugin,
    or provides a definition shadowing an existing one.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Error message.
            entrypoint: Entry point of the failing plugin, if any.
        """
        self.entrypoint = entrypoint

        super().__init__(message)

    def with_context(self, **values: Any) -> 'Self':  # noqa: ANN401, ARG002
        """Plugin errors carry no document location."""
        return self


class ReadError(DecodeError):
    """Error raised when a configuration file can not be read."""


class ParseError(DecodeError):
    """Error raised when the document text can not be parsed."""

    @classmethod
    def from_yaml_error(cls, error: MarkedYAMLError) -> 'Self':
        """Create a parse error from a PyYAML failure.

        Args:
            error: PyYAML scanner, parser or constructor error.

        Returns:
            The error, located at the problem mark when there is one.
        """
        context = ErrorContext(error=error)
        if (mark := error.problem_mark) is not None:
            context.update(filename=mark.name, line_num=mark.line, column_num=mark.column)

        message = 'Invalid YAML'
        if error.problem:
            message += f'{linesep}{LOCATION_INDENT}{error.problem}'

        return cls(message, context=context)


class SchemaError(DecodeError):
    """Error raised when a pet block does not match its schema.

    Used for a malformed generic block shape, a malformed discriminator,
    and for characteristics that miss a required field or carry a value
    of the wrong type.
    """

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            message: str = 'Validation error',
                            **values: Any) -> 'Self':  # noqa: ANN401
        """Create a schema error from a pydantic validation failure.

        The first issue that can be located in the data gives the message
        and narrows the excerpt to the failing key.

        Args:
            error: Validation failure.
            data: Validated mapping.
            message: Message used when no issue can be located.
            **values: `ErrorContext` entries.

        Returns:
            The error.
        """
        context = ErrorContext(error=error, element=data, **values)  # type: ignore[typeddict-item]

        if not isinstance(data, dict) or not data:
            return cls('Type validation error', context=context)

        for details in error.errors(include_url=False, include_input=False):
            if located := cls._locate(data, details):
                text, element = located
                return cls(text, context=ErrorContext({**context, 'element': element}))

        return cls(message, context=context)

    @staticmethod
    def _locate(data: dict[str, Any], details: 'ErrorDetails') -> tuple[str, Any] | None:
        """Find the failing part of validated data.

        Follows the issue location as deep as the data goes.

        Returns:
            The first line of the issue message suffixed with the failing
            key, and the smallest excerpt holding the failure; or `None`
            for an issue without message.
        """
        text = next(
            (line.strip() for line in (details.get('msg') or '').splitlines() if line.strip()),
            None,
        )
        if text is None:
            return None

        parent: Any = None
        key: int | str | None = None
        current: Any = data

        for step in details['loc']:
            in_mapping = isinstance(current, dict) and step in current
            in_sequence = (
                isinstance(current, (list, tuple))
                and isinstance(step, int)
                and 0 <= step < len(current)
            )
            if not in_mapping and not in_sequence:
                break
            parent, key, current = current, step, current[step]

        if parent is None:
            path = '.'.join(map(str, details['loc']))
            return (f'{text} ({path})' if path else text), data

        if isinstance(parent, dict):
            return f'{text} ({key})', {key: current}

        return text, [current]


class UnknownVariantError(SchemaError):
    """Error raised when a discriminator has no registered variant schema."""


class UnknownFieldError(SchemaError):
    """Error raised when characteristics carry an undeclared attribute."""


class EvaluationError(DecodeError):
    """Error raised when an attribute expression can not be evaluated.

    Covers undefined variables, unavailable functions, argument type
    mismatches and domain errors reported by functions.
    """


class ArityError(EvaluationError):
    """Error raised when a function is called with an invalid argument count."""
