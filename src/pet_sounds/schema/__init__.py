"""Declarative base-schema of pet configuration documents.

Defines immutable Pydantic models describing the generic shape of pet
blocks, the intermediate produced by the first decoding pass, the base
record produced by the second pass, and compiled YAML instructions.
"""

from .blocks import GenericBlock, PendingBlock
from .instructions import BaseInstruction, InstructionRunner, NodeType
from .records import Record

__all__ = (
    'BaseInstruction',
    'GenericBlock',
    'InstructionRunner',
    'NodeType',
    'PendingBlock',
    'Record',
)
