"""Declarative plugin definition.

This module defines the top-level declarative container used to describe
extensions provided by a pet-sounds plugin.

A plugin aggregates independent elements:
- variants (pet types with their record models),
- functions (callables usable in attribute expressions),
- and custom YAML instructions.

The plugin model itself is purely declarative. It is consumed by the
plugin loader during initialization to register all provided extensions.
"""

from pydantic import Field

from pet_sounds.models import SchemaModel
from pet_sounds.names import Variable  # noqa: TC001

from .functions import Function, FunctionRunner, Parameter
from .instructions import Instruction
from .parameters import Attribute, Schema
from .variants import FieldSpec, Variant, VariantRegistry, VariantSchema

__all__ = (
    'Attribute',
    'FieldSpec',
    'Function',
    'FunctionRunner',
    'Instruction',
    'Parameter',
    'Plugin',
    'Schema',
    'Variant',
    'VariantRegistry',
    'VariantSchema',
)


class Plugin(SchemaModel):
    """Declarative container for plugin extensions.

    All contained elements are optional, allowing plugins to provide
    partial extensions.
    """

    name: Variable = Field(
        title='Plugin namespace',
        description=(
            'Logical namespace of the plugin. '
            'Used for identification and diagnostics.'
        ),
    )

    variants: list[Variant] = Field(
        default_factory=list,
        title='Variants',
        description='Pet types provided by the plugin.',
    )

    functions: list[Function] = Field(
        default_factory=list,
        title='Functions',
        description='Functions made available to attribute expressions.',
    )

    instructions: list[Instruction] = Field(
        default_factory=list,
        title='Instructions',
        description='Custom YAML instruction definitions provided by the plugin.',
    )
