"""Tests for variable lookups and deferred function calls."""

from random import Random
from typing import Any

import pytest

from pet_sounds.builtins.functions import select
from pet_sounds.builtins.lookups import FunctionCall, VariableLookup
from pet_sounds.context import EvaluationContext
from pet_sounds.errors import EvaluationError, SchemaError


@pytest.mark.parametrize('path, variables, expected', (
    pytest.param(
        'env.CAT_SOUND',
        {'env': {'CAT_SOUND': 'nyan'}},
        'nyan',
        id='namespaced variable',
    ),
    pytest.param(
        ' env.CAT_SOUND ',
        {'env': {'CAT_SOUND': 'nyan'}},
        'nyan',
        id='surrounding spaces',
    ),
    pytest.param(
        'env',
        {'env': {'CAT_SOUND': 'nyan'}},
        {'CAT_SOUND': 'nyan'},
        id='whole namespace',
    ),
    pytest.param(
        'env.EMPTY',
        {'env': {'EMPTY': ''}},
        '',
        id='empty value',
    ),
))
def test_defined_variable(path: str, variables: dict[str, Any], expected: Any) -> None:
    """Resolve a variable using a dotted path."""
    lookup = VariableLookup(path)

    assert lookup(EvaluationContext(variables=variables)) == expected


@pytest.mark.parametrize('path', (
    pytest.param('_env.CAT_SOUND', id='start with underscore'),
    pytest.param('0env.CAT_SOUND', id='start with digit'),
    pytest.param('env..CAT_SOUND', id='empty segment'),
    pytest.param('env.', id='trailing dot'),
    pytest.param('', id='empty path'),
))
def test_invalid_variable_path(path: str) -> None:
    """Reject invalid variable paths."""
    with pytest.raises(SchemaError, match=r'^Invalid variable path$'):
        VariableLookup(path)


@pytest.mark.parametrize('path, variables, missing', (
    pytest.param('env.DOG_BREED', {'env': {'CAT_SOUND': 'nyan'}}, 'env.DOG_BREED', id='missing key'),
    pytest.param('zoo.KEEPER', {'env': {}}, 'zoo', id='missing namespace'),
    pytest.param('env.CAT_SOUND.x', {'env': {'CAT_SOUND': 'nyan'}}, 'env.CAT_SOUND.x', id='scalar container'),
))
def test_undefined_variable(path: str, variables: dict[str, Any], missing: str) -> None:
    """Fail on undefined variables instead of resolving them to nothing."""
    lookup = VariableLookup(path)

    with pytest.raises(EvaluationError, match=rf"^Undefined variable '{missing}'$"):
        lookup(EvaluationContext(variables=variables))


def test_variable_lookup_repr() -> None:
    """Represent a lookup with its path."""
    assert repr(VariableLookup('env.CAT_SOUND')) == "VariableLookup('env.CAT_SOUND')"


def test_function_call(rng: Random) -> None:
    """Resolve call arguments before invoking the function."""
    context = EvaluationContext(
        variables={'env': {'BREED': 'Pug'}},
        functions={'select': select},
        rng=rng,
    )
    call = FunctionCall('select', [VariableLookup('env.BREED')])

    assert call(context) == 'Pug'
    assert repr(call) == "FunctionCall('select', [VariableLookup('env.BREED')])"


def test_function_call_argument_failure(rng: Random) -> None:
    """Propagate failures of call arguments."""
    context = EvaluationContext(functions={'select': select}, rng=rng)
    call = FunctionCall('select', [VariableLookup('env.BREED')])

    with pytest.raises(EvaluationError, match=r"^Undefined variable 'env'$"):
        call(context)


def test_function_call_unavailable() -> None:
    """Fail on calls of functions missing from the context."""
    call = FunctionCall('select', ['Pug'])

    with pytest.raises(EvaluationError, match=r"^Function 'select' is not available$"):
        call(EvaluationContext())
