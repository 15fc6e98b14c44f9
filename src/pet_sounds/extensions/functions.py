"""Declarative function definitions for attribute expressions.

This module defines the declarative function model used by the evaluation
context. A function describes:
- its positional parameters and their types,
- an optional variadic parameter with a minimal count,
- the type of the value it returns,
- and the implementation callable.

Functions are declarative: argument checking and conversion are done
here, while the implementation only receives well-formed arguments and
the random source of the evaluation context.
"""

from collections.abc import Callable, Sequence
from random import Random
from typing import Any

from pydantic import Field, TypeAdapter, ValidationError

from pet_sounds.errors import ArityError, EvaluationError
from pet_sounds.models import DescribedMixin, SchemaModel
from pet_sounds.names import Variable  # noqa: TC001
from pet_sounds.values import RuntimeValue, Value

#: The implementation receives converted arguments (positional parameters
#: first, then variadic ones) and the random source of the context.
type FunctionRunner = Callable[[Sequence[Any], Random], Value]


class Parameter(DescribedMixin, SchemaModel):
    """Declarative function parameter."""

    name: Variable = Field(
        title='Parameter name',
        description='Name of the parameter, used in error messages.',
    )

    base: type[Any] = Field(
        default=str,
        title='Parameter type',
        description=(
            'Python type the argument is converted to before the call. '
            'Arguments that can not be converted fail the evaluation.'
        ),
    )

    def convert(self, value: RuntimeValue) -> Any:  # noqa: ANN401
        """Convert an argument to the parameter type.

        Args:
            value: Resolved argument value.

        Returns:
            The converted value.

        Raises:
            ValidationError: If the value can not be converted.
        """
        return TypeAdapter(self.base).validate_python(value)


class Function(DescribedMixin, SchemaModel):
    """Declarative function definition.

    A function is invoked by the evaluation context while resolving
    attribute expressions of the second decoding pass.
    """

    name: Variable = Field(
        title='Function name',
        description='Name of the function, also used as the YAML tag name.',
    )

    params: list[Parameter] = Field(
        default_factory=list,
        title='Positional parameters',
        description='Parameters that must always be provided, in order.',
    )

    var_param: Parameter | None = Field(
        default=None,
        title='Variadic parameter',
        description='Parameter accepting any number of trailing arguments.',
    )

    var_min: int = Field(
        default=0,
        ge=0,
        title='Minimal variadic count',
        description='Minimal number of arguments accepted by the variadic parameter.',
    )

    returns: type[Any] = Field(
        default=str,
        title='Return type',
        description='Type of the value returned by the implementation.',
    )

    impl: FunctionRunner = Field(
        title='Implementation',
        description='Callable implementing the function.',
    )

    def check_arity(self, args: Sequence[RuntimeValue]) -> None:
        """Check the number of call arguments.

        Args:
            args: Call arguments.

        Raises:
            ArityError: If too few or too many arguments are provided.
        """
        expected = len(self.params) + (self.var_min if self.var_param else 0)
        if len(args) < expected:
            if not self.params and expected == 1:
                raise ArityError(f'Function {self.name!r}: at least one argument required')
            raise ArityError(
                f'Function {self.name!r}: expected at least {expected} '
                f'arguments, got {len(args)}',
            )

        if self.var_param is None and len(args) > len(self.params):
            raise ArityError(
                f'Function {self.name!r}: expected {len(self.params)} '
                f'arguments, got {len(args)}',
            )

    def convert(self, args: Sequence[RuntimeValue]) -> list[Any]:
        """Convert call arguments to the declared parameter types.

        Args:
            args: Call arguments with a checked arity.

        Returns:
            Converted arguments.

        Raises:
            EvaluationError: If an argument has an unexpected type.
        """
        converted = []
        for position, value in enumerate(args):
            parameter = self.params[position] if position < len(self.params) else self.var_param
            if parameter is None:  # pragma: no cover
                raise ArityError(f'Function {self.name!r}: unexpected argument {position + 1}')
            try:
                converted.append(parameter.convert(value))
            except ValidationError as base:
                raise EvaluationError(
                    f'Function {self.name!r}: invalid value {value!r} '
                    f'for parameter {parameter.name!r}',
                ) from base

        return converted

    def __call__(self, args: Sequence[RuntimeValue], rng: Random) -> Value:
        """Invoke the function.

        Args:
            args: Resolved call arguments.
            rng: Random source of the evaluation context.

        Returns:
            The function result.

        Raises:
            ArityError: If the argument count is invalid, or if the
                implementation reports one.
            EvaluationError: If an argument or the result has an unexpected
                type, or if the implementation fails.
        """
        self.check_arity(args)

        try:
            result = self.impl(self.convert(args), rng)
        except EvaluationError:
            raise
        except Exception as base:
            raise EvaluationError(f'Function {self.name!r}: {base}') from base

        if not isinstance(result, self.returns):
            raise EvaluationError(
                f'Function {self.name!r}: returned {type(result).__name__}, '
                f'expected {self.returns.__name__}',
            )

        return result
