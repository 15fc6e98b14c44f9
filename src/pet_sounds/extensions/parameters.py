"""Declarative characteristics of pet variants.

Plugins may contribute a pet type without writing a record class: an
`Attribute` describes one characteristic, a `Schema` maps characteristic
names to attributes, and both compile into pydantic field definitions
added to a generated record model (see `Variant.build_record`).
"""

from typing import Annotated, Any, Self

from pydantic import Field, RootModel, model_validator

from pet_sounds.models import DescribedMixin, SchemaModel
from pet_sounds.names import Variable
from pet_sounds.values import Value  # noqa: TC001


class Attribute(DescribedMixin, SchemaModel):
    """Declarative characteristic of a pet variant.

    An attribute is either required, or optional with a default. An
    optional attribute without a default is nullable.
    """

    base: type[Any] = Field(
        default=str,
        title='Base type',
        description='Type resolved values are validated against.',
    )

    default: Value = Field(
        default=None,
        title='Default value',
        description=(
            'Value of an optional attribute that is omitted, or that '
            'resolves to nothing or to the zero value of its type.'
        ),
    )

    required: bool = Field(
        default=False,
        title='Required flag',
        description='Whether every pet of the variant must set the attribute.',
    )

    @model_validator(mode='after')
    def check_default_required(self) -> Self:
        """Forbid a default on a required attribute.

        A required attribute never falls back to its default, so
        declaring one is a mistake in the plugin.

        Raises:
            ValueError: If both `default` and `required` are set.
        """
        if self.required and self.default is not None:
            raise ValueError('specified both a default value and a required constraint')

        return self

    def build(self) -> Any:  # noqa: ANN401
        """Compile the attribute into an annotated field type."""
        if self.required:
            return Annotated[self.base, Field(title=self.title, description=self.description)]

        field_type: Any = self.base if self.default is not None else self.base | None

        return Annotated[
            field_type, Field(
                default=self.default,
                title=self.title,
                description=self.description,
            ),
        ]


class Schema(RootModel[dict[Variable, Attribute]]):
    """Named attributes of a pet variant."""

    root: dict[Variable, Attribute] = Field(
        default_factory=dict,
        title='Attributes',
        description='Attribute definitions by characteristic name.',
    )

    def build(self, reserved: set[str] | frozenset[str] = frozenset()) -> dict[str, Any]:
        """Compile the schema into field definitions for `create_model`.

        Args:
            reserved: Names that attributes may not use, such as the
                fields of the base record.

        Returns:
            Annotated field types by name.

        Raises:
            ValueError: If an attribute uses a reserved name.
        """
        if clashes := sorted(set(self.root) & reserved):
            raise ValueError(f'attribute `{clashes[0]}` is not unique in schema')

        return {
            name: attribute.build()
            for name, attribute in self.root.items()
        }
