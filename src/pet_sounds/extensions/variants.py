"""Declarative variant definitions and variant schema construction.

A variant binds a discriminator value (the `type` of a pet block) to the
record model used to decode the block characteristics. Variants are
declarative and are compiled into a `VariantSchema` when registered:
the schema exposes the record model and a closed set of field
descriptors used by the second decoding pass.
"""

from contextlib import suppress
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import Field, create_model

from pet_sounds.models import DescribedMixin, SchemaModel
from pet_sounds.names import Discriminator, Label, Variable  # noqa: TC001
from pet_sounds.schema import Record
from pet_sounds.values import Value  # noqa: TC001

from .parameters import Schema

#: Fields of the base record never accepted from characteristics.
RESERVED_FIELDS = frozenset(Record.model_fields)

#: Behaviors every record class must implement.
BEHAVIORS = ('announce', 'act')


def zero_value(annotation: Any) -> Value:  # noqa: ANN401
    """Get the zero value of a field annotation.

    Optional annotations are unwrapped first. Only plain types that
    can be constructed without arguments have a zero value.

    Args:
        annotation: Field annotation.

    Returns:
        The zero value (for example, an empty string), or `None`.
    """
    candidates = [annotation]
    if get_origin(annotation) in (Union, UnionType):
        candidates = [
            item
            for item in get_args(annotation)
            if item is not NoneType
        ]

    if len(candidates) != 1 or not isinstance(candidates[0], type):
        return None

    with suppress(Exception):
        return candidates[0]()  # type: ignore[no-any-return]

    return None


class FieldSpec(SchemaModel):
    """Descriptor of a single characteristic of a variant."""

    name: Variable = Field(
        title='Field name',
        description='Name of the attribute in the characteristics body.',
    )

    required: bool = Field(
        title='Required flag',
        description='Whether the attribute must be present in the body.',
    )

    default: Value = Field(
        default=None,
        title='Default value',
        description='Value used when the attribute is omitted or resolves to the zero value.',
    )

    zero: Value = Field(
        default=None,
        title='Zero value',
        description='Zero value of the field type, replaced by the default.',
    )

    def is_zero(self, value: Value) -> bool:
        """Check whether a resolved value should be replaced by the default.

        Args:
            value: Resolved attribute value.

        Returns:
            True for `None` or for the zero value of the field type.
        """
        if value is None:
            return True

        return self.zero is not None and type(value) is type(self.zero) and value == self.zero


class VariantSchema(SchemaModel):
    """Compiled variant schema.

    Produced by `Variant.build` and stored in the variant registry.
    """

    name: Discriminator = Field(
        title='Pet type',
        description='Discriminator value selecting this schema.',
    )

    record: type[Record] = Field(
        title='Record model',
        description='Model instantiated with the resolved characteristics.',
    )

    attributes: dict[str, FieldSpec] = Field(
        default_factory=dict,
        title='Field descriptors',
        description='Closed set of characteristics accepted by the variant.',
    )

    def validate_record(self, label: Label, values: dict[str, Value]) -> Record:
        """Create a record from resolved characteristics.

        Args:
            label: Identity label of the pet block.
            values: Resolved characteristics.

        Returns:
            A validated record instance.

        Raises:
            ValidationError: If the values do not match the record model.
        """
        return self.record.model_validate({**values, 'name': label})


class Variant(DescribedMixin, SchemaModel):
    """Declarative variant definition.

    A variant is defined by a record class declaring its characteristics
    as model fields, optionally extended with a declarative schema of
    additional attributes.
    """

    name: Discriminator = Field(
        title='Pet type',
        description='Value of the `type` attribute selecting this variant.',
    )

    record: type[Record] = Field(
        default=Record,
        title='Record model',
        description='Base record class implementing pet behaviors.',
    )

    fields: Schema = Field(
        default_factory=Schema,
        title='Additional attributes',
        description='Declarative attributes added to the record model.',
    )

    def build_record(self) -> type[Record]:
        """Build the record model of the variant.

        Returns:
            The record class itself, or a dynamically created subclass
            with the declarative attributes when any are defined.

        Raises:
            ValueError: If the record class does not implement the pet
                behaviors, or if an attribute shadows a reserved field.
        """
        for behavior in BEHAVIORS:
            if getattr(self.record, behavior) is getattr(Record, behavior):
                raise ValueError(f'record `{self.record.__name__}` does not implement `{behavior}`')

        if not self.fields.root:
            return self.record

        return create_model(  # type: ignore[no-any-return]
            f'{self.name}_Record',
            __base__=self.record,
            **self.fields.build(reserved=RESERVED_FIELDS),
        )

    def build(self) -> VariantSchema:
        """Compile the variant into a schema used by the decoder.

        Returns:
            A variant schema with the record model and field descriptors.

        Raises:
            ValueError: If the record class does not implement the pet
                behaviors, or if an attribute shadows a reserved field.
        """
        record = self.build_record()

        attributes = {
            name: FieldSpec(
                name=name,
                required=info.is_required(),
                default=None if info.is_required() else info.get_default(call_default_factory=True),
                zero=zero_value(info.annotation),
            )
            for name, info in record.model_fields.items()
            if name not in RESERVED_FIELDS
        }

        return VariantSchema(name=self.name, record=record, attributes=attributes)


class VariantRegistry(dict[str, VariantSchema]):
    """Variant schema registry.

    A pure lookup table from pet type to compiled schema. Adding a pet
    type is adding an entry; the decoders never change.
    """

    def lookup(self, discriminator: str) -> VariantSchema | None:
        """Look up the schema registered for a pet type.

        Args:
            discriminator: Resolved pet type.

        Returns:
            The registered variant schema, or `None`.
        """
        return self.get(discriminator)
