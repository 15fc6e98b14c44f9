"""Tests for document parsing and extension registration."""

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from pet_sounds.core import DocumentParser
from pet_sounds.errors import ParseError, PluginError, PluginWarning, SchemaError
from pet_sounds.extensions import Attribute, Plugin, Schema, Variant

from tests.examples.functions import shout
from tests.examples.plugins import example
from tests.examples.variants import fish

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockType
    from yaml import SafeLoader


@pytest.mark.parametrize('content, labels', (
    pytest.param(
        'pet: Ink\ntype: cat\n',
        ['Ink'],
        id='single block',
    ),
    pytest.param(
        '- pet: Ink\n  type: cat\n- pet: Swinney\n  type: dog\n',
        ['Ink', 'Swinney'],
        id='list of blocks',
    ),
    pytest.param(
        'pet: Ink\ntype: cat\n---\npet: Swinney\ntype: dog\n',
        ['Ink', 'Swinney'],
        id='stream of blocks',
    ),
    pytest.param(
        '- pet: Ink\n  type: cat\n---\n---\n- pet: Swinney\n  type: dog\n- pet: Rex\n  type: dog\n',
        ['Ink', 'Swinney', 'Rex'],
        id='stream of lists with empty document',
    ),
    pytest.param(
        '',
        [],
        id='empty stream',
    ),
    pytest.param(
        '- pet: Ink\n  type: cat\n- pet: Ink\n  type: cat\n',
        ['Ink', 'Ink'],
        id='duplicated labels',
    ),
))
def test_parse(content: str, labels: list[str], parser: DocumentParser) -> None:
    """Flatten documents into raw blocks in stream order."""
    document = parser.parse(content)

    assert [block['pet'] for block in document] == labels


def test_parse_invalid_yaml(parser: DocumentParser) -> None:
    """Report malformed YAML."""
    with pytest.raises(ParseError, match=r'^Invalid YAML') as error:
        parser.parse('pet: [Ink\ntype: cat\n')

    assert error.value.context is not None
    assert error.value.context.get('line_num') is not None


@pytest.mark.parametrize('content, block_num', (
    pytest.param('Ink\n', 0, id='scalar document'),
    pytest.param('- pet: Ink\n  type: cat\n- Swinney\n', 1, id='scalar in list'),
    pytest.param('- pet: Ink\n  type: cat\n---\n- [Swinney]\n', 1, id='sequence in stream'),
))
def test_parse_non_mapping_block(content: str, block_num: int,
                                 parser: DocumentParser) -> None:
    """Reject blocks that are not mappings."""
    with pytest.raises(SchemaError, match=r'^Pet block must be a mapping') as error:
        parser.parse(content)

    assert error.value.context is not None
    assert error.value.context.get('block_num') == block_num


def test_builtin_registry(parser: DocumentParser) -> None:
    """Register built-in variants, functions and instructions."""
    assert set(parser.variants) == {'cat', 'dog'}
    assert set(parser.functions) == {'select', 'random'}
    assert set(parser.instructions) == {'var', 'select', 'random'}

    assert parser.variants.lookup('cat') is parser.variants['cat']
    assert parser.variants.lookup('fish') is None


def test_plugin(patch_entrypoints: 'Callable[..., MockType]',
                loader: 'type[SafeLoader]') -> None:
    """Register extensions of an installed plugin."""
    patch_entrypoints(example)

    parser = DocumentParser(loader, strict=True)

    assert set(parser.variants) == {'cat', 'dog', 'fish'}
    assert 'shout' in parser.functions
    assert {'fmt', 'shout'} <= set(parser.instructions)


@pytest.mark.parametrize('strict', (
    pytest.param(False, id='warning'),
    pytest.param(True, id='strict'),
))
def test_plugin_variant_without_behaviors(strict: bool, patch_entrypoints: 'Callable[..., MockType]',
                                          loader: 'type[SafeLoader]') -> None:
    """Reject plugin variants whose records can not announce and act."""
    patch_entrypoints(Plugin(
        name='birds',
        variants=[Variant(name='bird', fields=Schema({'song': Attribute(default='tweet')}))],
    ))

    with pytest.raises(PluginError, match=r"^Variant 'tests.bird' from 'tests.plugins:test' is invalid: record `Record` does not implement `announce`"):
        DocumentParser(loader, strict=strict)


def test_plugin_load_failure(patch_entrypoints: 'Callable[..., MockType]',
                             loader: 'type[SafeLoader]') -> None:
    """Warn about plugins failing to load."""
    patch_entrypoints(example, raises=ImportError('broken'))

    with pytest.warns(PluginWarning, match=r'^Failed to load entrypoint'):
        parser = DocumentParser(loader)

    assert 'fish' not in parser.variants


def test_plugin_load_failure_strict(patch_entrypoints: 'Callable[..., MockType]',
                                    loader: 'type[SafeLoader]') -> None:
    """Raise on plugins failing to load on strict mode."""
    patch_entrypoints(example, raises=ImportError('broken'))

    with pytest.raises(PluginError, match=r'^Failed to load entrypoint'):
        DocumentParser(loader, strict=True)


def test_plugin_validation_failure(patch_entrypoints: 'Callable[..., MockType]',
                                   loader: 'type[SafeLoader]') -> None:
    """Warn about plugins failing to validate."""
    with pytest.raises(ValidationError) as error:
        Plugin(name='0invalid')

    patch_entrypoints(example, raises=error.value)

    with pytest.warns(PluginWarning, match=r'^Failed to validate entrypoint'):
        DocumentParser(loader)


@pytest.mark.parametrize('strict', (
    pytest.param(False, id='warning'),
    pytest.param(True, id='strict'),
))
def test_plugin_not_a_plugin(strict: bool, patch_entrypoints: 'Callable[..., MockType]',
                             loader: 'type[SafeLoader]') -> None:
    """Report entry points not providing a plugin."""
    patch_entrypoints(shout)

    if strict:
        with pytest.raises(PluginError, match=r'object is not a plugin$'):
            DocumentParser(loader, strict=True)
    else:
        with pytest.warns(PluginWarning, match=r'object is not a plugin$'):
            DocumentParser(loader)


def test_variant_shadowing(patch_entrypoints: 'Callable[..., MockType]',
                           loader: 'type[SafeLoader]') -> None:
    """Warn when a variant shadows an existing one and replace it."""
    patch_entrypoints()

    parser = DocumentParser(loader)
    cat = fish.model_copy(update={'name': 'cat'})

    with pytest.warns(PluginWarning, match=r'is shadowing an existing$'):
        parser.add_variant(cat)

    assert 'fins' in parser.variants['cat'].attributes


def test_variant_shadowing_strict(parser: DocumentParser) -> None:
    """Raise when a variant shadows an existing one on strict mode."""
    with pytest.raises(PluginError, match=r'is shadowing an existing$'):
        parser.add_variant(Variant(name='dog'))


@pytest.mark.parametrize('strict', (
    pytest.param(False, id='warning'),
    pytest.param(True, id='strict'),
))
def test_function_shadowing(strict: bool, patch_entrypoints: 'Callable[..., MockType]',
                            loader: 'type[SafeLoader]') -> None:
    """Report functions shadowing existing functions or instructions."""
    patch_entrypoints()

    parser = DocumentParser(loader, strict=strict)
    function = shout.model_copy(update={'name': 'var'})

    if strict:
        with pytest.raises(PluginError, match=r'is shadowing an existing$'):
            parser.add_function(function)
    else:
        with pytest.warns(PluginWarning, match=r'is shadowing an existing$'):
            parser.add_function(function)
