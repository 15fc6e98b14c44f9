"""Evaluation context for attribute expressions.

This module defines the immutable context that deferred expressions are
resolved against, and the builder that assembles it from an environment
snapshot and a function registry.
"""

import logging
from random import Random
from typing import TYPE_CHECKING, Any

from pydantic import Field

from pet_sounds.errors import EvaluationError
from pet_sounds.extensions import Function  # noqa: TC001
from pet_sounds.models import SchemaModel
from pet_sounds.names import VARIABLE_PATTERN
from pet_sounds.values import normalize

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

if TYPE_CHECKING:
    from pet_sounds.values import RuntimeValue, Value

logger = logging.getLogger(__name__)

#: Prefix of environment keys exposed as variables.
ENV_PREFIX = 'PET_'

#: Namespace under which environment variables are exposed.
ENV_NAMESPACE = 'env'


class EvaluationContext(SchemaModel):
    """Read-only bundle of variables and functions visible to expressions.

    The context is built once per decoding run and shared by every
    decoding call of that run. Only the random source carries state.
    """

    variables: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        title='Variables',
        description='Namespaced variables, for example `env.CAT_SOUND`.',
    )

    functions: dict[str, Function] = Field(
        default_factory=dict,
        title='Functions',
        description='Functions available to expressions, by name.',
    )

    rng: Random = Field(
        default_factory=Random,
        title='Random source',
        description='Random generator used by random selection functions.',
    )

    def resolve(self, value: 'RuntimeValue') -> 'Value':
        """Resolve a deferred value into a fully evaluated value.

        Args:
            value: A deferred value to resolve.

        Returns:
            A fully resolved value or `None`.

        Raises:
            EvaluationError: If an expression can not be evaluated.
        """
        try:
            return normalize(value, self)
        except TypeError as base:
            raise EvaluationError(f'Invalid value: {base}') from base

    def call(self, name: str, args: 'Sequence[RuntimeValue]') -> 'Value':
        """Call a function available in the context.

        Args:
            name: Function name.
            args: Unresolved call arguments.

        Returns:
            The function result.

        Raises:
            EvaluationError: If the function is not available or fails.
        """
        function = self.functions.get(name)
        if function is None:
            raise EvaluationError(f'Function {name!r} is not available')

        resolved = self.resolve(list(args))
        if not isinstance(resolved, list):  # pragma: no cover
            raise EvaluationError(f'Function {name!r}: invalid arguments')

        return function(resolved, self.rng)

    def without_functions(self) -> 'EvaluationContext':
        """Create a copy of the context exposing variables only.

        Used while resolving discriminators, before any function may run.
        """
        return self.model_copy(update={'functions': {}})


class ContextBuilder:
    """Builder of evaluation contexts from environment snapshots.

    Every key of the snapshot starting with the prefix is exposed, with
    the prefix stripped, under the namespace. Other keys are ignored.

    Example:
        >>> builder = ContextBuilder(prefix='PET_')
        >>> builder.build({'PET_CAT_SOUND': 'nyan'}).variables
        {'env': {'CAT_SOUND': 'nyan'}}
    """

    def __init__(self, functions: 'Mapping[str, Function] | None' = None, *,
                 prefix: str = ENV_PREFIX, namespace: str = ENV_NAMESPACE,
                 rng: Random | None = None) -> None:
        """Initialize the builder.

        Args:
            functions: Functions exposed to expressions.
            prefix: Prefix of environment keys exposed as variables.
            namespace: Variable namespace of the exposed keys.
            rng: Random source shared by built contexts. If not provided,
                each built context gets its own generator.

        Raises:
            ValueError: If the prefix is empty or the namespace is not
                a valid identifier.
        """
        if not prefix:
            raise ValueError('Variables prefix must not be empty')

        if not VARIABLE_PATTERN.match(namespace):
            raise ValueError(f'Invalid variables namespace {namespace!r}')

        self.functions = dict(functions or {})
        self.prefix = prefix
        self.namespace = namespace
        self.rng = rng

    def build(self, environ: 'Mapping[str, Any]') -> EvaluationContext:
        """Build an evaluation context from an environment snapshot.

        Args:
            environ: Snapshot of environment keys and values.

        Returns:
            A new immutable evaluation context.
        """
        variables = {
            key.removeprefix(self.prefix): value
            for key, value in environ.items()
            if key.startswith(self.prefix)
        }

        logger.debug('Exposing %d variables under %r', len(variables), self.namespace)

        return EvaluationContext(
            variables={self.namespace: variables},
            functions=self.functions,
            rng=self.rng if self.rng is not None else Random(),  # noqa: S311
        )
