"""Value types of pet configurations.

Attribute values come out of the YAML loader in one of two states.
Plain YAML data is already resolved. Tagged expressions are deferred:
they are callables evaluated against an `EvaluationContext` by the
second decoding pass, possibly nested inside lists and mappings.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pet_sounds.context import EvaluationContext

#: YAML scalar of a resolved value.
type Scalar = str | int | float | bool

#: Resolved value, ready to be validated against a record field.
type Value = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | None

#: Anything produced by the loader or returned by a function, before
#: it is checked by `normalize`.
type RuntimeValue = Any

#: Callables receive the `EvaluationContext` as their only argument.
type DeferredCallable[T] = Callable[[Any], T]

#: Value that may hold expressions at any depth.
type Deferred[T] = T | DeferredCallable[T] | Sequence['Deferred[T]'] | Mapping[str, 'Deferred[T]']

MAPPINGS = (dict,)
SCALARS = (str, int, float, bool)
SEQUENCES = (list, tuple)


def _as_key(key: RuntimeValue) -> str:
    """Check that a mapping key is a string."""
    if isinstance(key, str):
        return key

    raise TypeError(f'Can not use {key!r} as mapping key')


def normalize(value: RuntimeValue, context: 'EvaluationContext | None' = None) -> Value:
    """Resolve a runtime value deeply into a `Value`.

    Expressions are called with the context, and their results are
    normalized in turn. Tuples become lists.

    Args:
        value: Loader output or function result.
        context: Context expressions are evaluated against.

    Returns:
        The resolved value.

    Raises:
        TypeError: On an object that is not YAML data, on a non-string
            mapping key, or on an expression met without a context.
    """
    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {_as_key(key): normalize(item, context) for key, item in value.items()}

    if isinstance(value, SEQUENCES):
        return [normalize(item, context) for item in value]

    if not callable(value):
        raise TypeError(f'{value!r} has unsupported type')

    if context is None:
        raise TypeError(f'Can not resolve {value!r} without context')

    return normalize(value(context), context)
