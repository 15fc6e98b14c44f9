"""Compiled YAML tags.

A compiled instruction is a model class whose instances are registered
on the YAML loader as tag constructors. Calling the instance delegates
to the class-level `runner`.
"""

from collections.abc import Callable
from typing import ClassVar, Literal

from yaml import BaseLoader
from yaml.nodes import Node

from pet_sounds.models import SchemaModel
from pet_sounds.values import Deferred, RuntimeValue

#: Turns the tagged node into a value, usually a deferred expression.
type InstructionRunner = Callable[[BaseLoader, Node], Deferred[RuntimeValue]]

#: Kind of YAML node an instruction expects.
type NodeType = Literal['scalar', 'sequence']


class BaseInstruction(SchemaModel):
    """Base class of compiled YAML tags."""

    runner: ClassVar[InstructionRunner]

    node_type: ClassVar[NodeType]

    def __call__(self, loader: BaseLoader, node: Node) -> Deferred[RuntimeValue]:
        """Construct the value of a tagged node."""
        return type(self).runner(loader, node)
