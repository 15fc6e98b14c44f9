"""Built-in YAML instructions for deferred expressions.

Each instruction is implemented as a PyYAML constructor and produces
a deferred expression instead of an immediate value. Expressions are
evaluated later, against the evaluation context.
"""

from typing import TYPE_CHECKING

from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, ScalarNode

from pet_sounds.builtins.lookups import FunctionCall, VariableLookup
from pet_sounds.errors import ParseError
from pet_sounds.extensions import Instruction

if TYPE_CHECKING:
    from yaml import BaseLoader
    from yaml.nodes import Node

if TYPE_CHECKING:
    from pet_sounds.extensions import Function


def variable_constructor(loader: 'BaseLoader', node: 'ScalarNode') -> VariableLookup:
    """Construct a variable lookup instruction.

    This constructor is used for the `!var` instruction. It produces
    a deferred resolver that extracts a value from the evaluation
    context using a variable path.

    Args:
        loader: YAML loader instance.
        node: Scalar node containing a variable path.

    Returns:
        A `VariableLookup` bound to the parsed variable path.

    Raises:
        ParseError: If the node is not a scalar or the variable path is invalid.
    """
    try:
        return VariableLookup(path=loader.construct_scalar(node))

    except MarkedYAMLError as base:
        raise ParseError.from_yaml_error(base) from base

    except Exception as base:
        raise ParseError.from_yaml_node('Invalid variable path', node, base) from base


class FunctionConstructor:
    """YAML constructor for function calls.

    The tag is the function name and the node holds its arguments:
    a sequence of arguments, a single scalar argument, or nothing.

        breed: !select [Pug, Lab]
        breed: !select Pug
    """

    def __init__(self, name: str) -> None:
        """Initialize the constructor.

        Args:
            name: Name of the called function.
        """
        self.name = name

    def __call__(self, loader: 'BaseLoader', node: 'Node') -> FunctionCall:
        """Construct a deferred function call.

        Args:
            loader: YAML loader instance.
            node: Node containing call arguments.

        Returns:
            A `FunctionCall` bound to the function name and arguments.

        Raises:
            ParseError: If the node is a mapping or can not be constructed.
        """
        if isinstance(node, MappingNode):
            raise ParseError.from_yaml_node(
                f'Arguments of function {self.name!r} must be a sequence',
                node,
            )

        try:
            if isinstance(node, ScalarNode):
                value = loader.construct_scalar(node)
                return FunctionCall(self.name, [value] if value != '' else [])

            return FunctionCall(self.name, loader.construct_sequence(node, deep=True))

        except MarkedYAMLError as base:
            raise ParseError.from_yaml_error(base) from base


def function_instruction(function: 'Function') -> Instruction:
    """Create the instruction calling a function.

    Args:
        function: Declarative function definition.

    Returns:
        An instruction named after the function.
    """
    return Instruction(
        name=function.name,
        node_type='sequence',
        constructor=FunctionConstructor(function.name),
    )


#: Instruction for `!var <path>` expression (path must be in dot notation).
variable = Instruction(name='var', constructor=variable_constructor)
