"""Declarative YAML tags.

An `Instruction` names a tag (`!var`, `!select`) and the constructor
turning the tagged node into a deferred expression. The parser compiles
every registered instruction into a `BaseInstruction` subclass and
attaches an instance of it to its YAML loader.
"""

from typing import Any, ClassVar

from pydantic import Field, create_model

from pet_sounds.models import SchemaModel
from pet_sounds.names import Variable  # noqa: TC001
from pet_sounds.schema import BaseInstruction, InstructionRunner, NodeType


class Instruction(SchemaModel):
    """Declarative YAML tag."""

    name: Variable = Field(
        title='Tag name',
        description='Name of the tag, without the leading `!`.',
    )

    node_type: NodeType = Field(
        default='scalar',
        title='Node type',
        description='Kind of node the tag is applied to.',
    )

    constructor: InstructionRunner = Field(
        title='YAML constructor',
        description='Callable turning the tagged node into a deferred value.',
    )

    def build(self) -> type[BaseInstruction]:
        """Compile the tag into a `BaseInstruction` subclass."""
        fields: dict[str, Any] = {
            'runner': (ClassVar[InstructionRunner], staticmethod(self.constructor)),
            'node_type': (ClassVar[NodeType], self.node_type),
        }

        return create_model(f'{self.name}_Instruction', __base__=BaseInstruction, **fields)
