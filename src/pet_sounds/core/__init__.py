"""Core decoding runtime and YAML parser integration.

This module defines the core infrastructure for parsing and decoding
pet configuration documents.

It provides:
- safe loading and registration of builtin and plugin-based extensions;
- integration of all instructions into a YAML loader;
- the two-pass decoder turning documents into typed records.

The primary public entry point is `ConfigReader`, which prepares a YAML
loader and an evaluation context, then decodes files or texts into
ordered pet records.
"""

from .decoder import DocumentDecoder, GenericBlockDecoder, TypedBodyDecoder
from .parser import Document, DocumentParser, RawBlock
from .reader import ConfigReader, make_loader

__all__ = (
    'ConfigReader',
    'Document',
    'DocumentDecoder',
    'DocumentParser',
    'GenericBlockDecoder',
    'RawBlock',
    'TypedBodyDecoder',
    'make_loader',
)
