"""Deferred expressions resolved against the evaluation context.

This module provides the two expression forms of the configuration
language:

- Variable lookup using dotted paths (`env.CAT_SOUND`)
- Function calls with (possibly deferred) arguments
"""

from typing import TYPE_CHECKING

from pet_sounds.errors import EvaluationError, SchemaError
from pet_sounds.names import VARIABLE_PATTERN

if TYPE_CHECKING:
    from collections.abc import Sequence

if TYPE_CHECKING:
    from pet_sounds.context import EvaluationContext
    from pet_sounds.values import RuntimeValue


class VariableLookup:
    """Resolver for dotted-path variable access.

    Resolves values from the namespaced variables of the evaluation
    context using a dot-separated path notation. Unlike a tolerant
    lookup, any missing segment is an evaluation error: an undefined
    variable must not silently become an empty value.
    """

    def __init__(self, path: str) -> None:
        """Initialize the resolver with a dotted path.

        Args:
            path: Dot-separated path. The first segment is a namespace,
                following segments are mapping keys.

        Raises:
            SchemaError: If the provided path is not valid.
        """
        self.path = path.strip().split('.')

        if not VARIABLE_PATTERN.match(self.path[0]) or not all(self.path):
            raise SchemaError('Invalid variable path')

    def __repr__(self) -> str:
        """String representation."""
        return f'VariableLookup({'.'.join(self.path)!r})'

    def __call__(self, context: 'EvaluationContext') -> 'RuntimeValue':
        """Resolve the variable path against a context."""
        return self.resolve(context.variables)

    def resolve(self, value: 'RuntimeValue') -> 'RuntimeValue':
        """Resolve the variable path against a value.

        Args:
            value: Root mapping of variables.

        Returns:
            The resolved value.

        Raises:
            EvaluationError: If a segment of the path is not defined.
        """
        for depth, key in enumerate(self.path, start=1):
            if not isinstance(value, dict) or key not in value:
                raise EvaluationError(
                    f'Undefined variable {'.'.join(self.path[:depth])!r}',
                )
            value = value[key]

        return value


class FunctionCall:
    """Deferred call of a function from the evaluation context.

    The function is looked up by name only when the call is resolved,
    so the function registry of the context decides which calls are
    allowed at that moment.
    """

    def __init__(self, name: str, args: 'Sequence[RuntimeValue]') -> None:
        """Initialize the call.

        Args:
            name: Function name.
            args: Call arguments, possibly deferred themselves.
        """
        self.name = name
        self.args = tuple(args)

    def __repr__(self) -> str:
        """String representation."""
        return f'FunctionCall({self.name!r}, {list(self.args)!r})'

    def __call__(self, context: 'EvaluationContext') -> 'RuntimeValue':
        """Resolve arguments and invoke the function."""
        return context.call(self.name, self.args)
