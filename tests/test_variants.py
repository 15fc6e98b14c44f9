"""Tests for variant definitions and compiled variant schemas."""

from typing import Any

import pydantic
import pytest

from pet_sounds.builtins.variants import Cat, Dog, cat, dog
from pet_sounds.extensions import Attribute, FieldSpec, Schema, Variant
from pet_sounds.extensions.variants import zero_value
from pet_sounds.schema import Record

from tests.examples.variants import Fish, fish


@pytest.mark.parametrize('variant, record, attributes', (
    pytest.param(
        cat, Cat,
        {'sound': FieldSpec(name='sound', required=False, default='meow', zero='')},
        id='cat',
    ),
    pytest.param(
        dog, Dog,
        {'breed': FieldSpec(name='breed', required=False, default='mutt', zero='')},
        id='dog',
    ),
))
def test_builtin_variant(variant: Variant, record: type[Record],
                         attributes: dict[str, FieldSpec]) -> None:
    """Compile built-in variants into schemas."""
    schema = variant.build()

    assert schema.name == variant.name
    assert schema.record is record
    assert schema.attributes == attributes


def test_schema_variant() -> None:
    """Compile a variant declared with a schema."""
    schema = fish.build()

    assert issubclass(schema.record, Fish)
    assert schema.attributes == {
        'color': FieldSpec(name='color', required=False, default='gold', zero=''),
        'fins': FieldSpec(name='fins', required=True, zero=0),
    }

    record = schema.validate_record('Nemo', {'fins': 3})

    assert record.name == 'Nemo'
    assert record.color == 'gold'  # type: ignore[attr-defined]


def test_schema_variant_optional() -> None:
    """Compile optional attributes without a default as nullable."""
    variant = Variant(name='bird', record=Fish, fields=Schema({'song': Attribute(base=str)}))
    schema = variant.build()

    assert schema.attributes['song'] == FieldSpec(name='song', required=False, zero='')
    assert schema.validate_record('Tweety', {}).song is None  # type: ignore[attr-defined]


def test_schema_variant_reserved_field() -> None:
    """Reject attributes shadowing reserved record fields."""
    variant = Variant(name='bird', record=Fish, fields=Schema({'name': Attribute(base=str)}))

    with pytest.raises(ValueError, match=r'attribute `name` is not unique in schema'):
        variant.build()


class Mute(Record):
    """Record announcing itself but without a behavior."""

    def announce(self) -> None:
        """Print nothing."""


@pytest.mark.parametrize('variant, message', (
    pytest.param(
        Variant(name='bird', fields=Schema({'song': Attribute(base=str, default='tweet')})),
        r'^record `Record` does not implement `announce`$',
        id='schema only',
    ),
    pytest.param(
        Variant(name='bird'),
        r'^record `Record` does not implement `announce`$',
        id='base record',
    ),
    pytest.param(
        Variant(name='bird', record=Mute),
        r'^record `Mute` does not implement `act`$',
        id='missing behavior',
    ),
))
def test_variant_without_behaviors(variant: Variant, message: str) -> None:
    """Reject record classes not implementing the pet behaviors."""
    with pytest.raises(ValueError, match=message):
        variant.build()


def test_attribute_required_with_default() -> None:
    """Reject required attributes with a default value."""
    with pytest.raises(pydantic.ValidationError, match=r'specified both a default value and a required constraint'):
        Attribute(base=str, default='tweet', required=True)


@pytest.mark.parametrize('name', (
    pytest.param('sea-turtle', id='dashed'),
    pytest.param('Cat', id='capitalized'),
))
def test_variant_valid_name(name: str) -> None:
    """Accept dashed and capitalized discriminators."""
    assert Variant(name=name, record=Fish).build().name == name


@pytest.mark.parametrize('name', (
    pytest.param('', id='empty'),
    pytest.param('-cat', id='leading dash'),
    pytest.param('cat-', id='trailing dash'),
    pytest.param('big cat', id='space'),
))
def test_variant_invalid_name(name: str) -> None:
    """Reject malformed discriminators."""
    with pytest.raises(pydantic.ValidationError):
        Variant(name=name)


@pytest.mark.parametrize('annotation, expected', (
    pytest.param(str, '', id='string'),
    pytest.param(int, 0, id='integer'),
    pytest.param(bool, False, id='boolean'),
    pytest.param(str | None, '', id='optional string'),
    pytest.param(int | str, None, id='union'),
))
def test_zero_value(annotation: Any, expected: Any) -> None:
    """Get zero values of field annotations."""
    assert zero_value(annotation) == expected


@pytest.mark.parametrize('zero, value, expected', (
    pytest.param('', None, True, id='none'),
    pytest.param('', '', True, id='empty string'),
    pytest.param('', 'meow', False, id='non-empty string'),
    pytest.param(0, 0, True, id='zero'),
    pytest.param(0, False, False, id='false for integer'),
    pytest.param('', 0, False, id='zero for string'),
    pytest.param(None, '', False, id='no zero'),
))
def test_field_spec_is_zero(zero: Any, value: Any, expected: bool) -> None:
    """Detect values replaced by the default."""
    spec = FieldSpec(name='sound', required=False, zero=zero)

    assert spec.is_zero(value) is expected
