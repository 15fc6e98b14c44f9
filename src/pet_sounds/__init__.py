"""Polymorphic pet configuration decoder.

The `pet_sounds` package reads YAML documents describing pets and decodes
them into typed records.

Key features:
- polymorphic pet blocks whose characteristics schema depends on the
  pet type, resolved with a two-pass decoder;
- expressions in attribute values: variables taken from the environment
  and extensible functions such as random selection;
- closed, table-driven variant schemas with default filling;
- plugin-provided variants and functions discovered via entry points.
"""
