"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from random import Random
from typing import TYPE_CHECKING

import pytest
import yaml

from pet_sounds.context import ContextBuilder
from pet_sounds.core import DocumentDecoder, DocumentParser

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from pet_sounds.context import EvaluationContext
    from pet_sounds.extensions import Plugin
    from pet_sounds.schema import Record


@pytest.fixture
def loader() -> type[yaml.SafeLoader]:
    """Provide an isolated YAML SafeLoader class for tests.

    Creates a dedicated subclass of `yaml.SafeLoader` to ensure that
    YAML constructors registered during a test do not leak into other
    tests or affect global loader state.
    """
    class Loader(yaml.SafeLoader):
        pass

    return Loader


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of plugins in the `pet_sounds_plugins` entry point group.
    """
    def patch(*plugins: 'Plugin', raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled plugin configuration.

        Args:
            plugins: Plugin objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.
                Used to simulate plugin load failures.

        Returns:
            A mock patch object replacing `importlib.metadata.entry_points`.
        """
        entrypoints = []
        for plugin in plugins:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'pet_sounds_plugins'
            ep.name = 'tests'
            ep.value = 'tests.plugins:test'
            ep.load.return_value = plugin
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch


@pytest.fixture
def rng() -> Random:
    """Provide a seeded random source."""
    return Random(1234)  # noqa: S311


@pytest.fixture
def parser(patch_entrypoints: 'Callable[..., MockType]',
           loader: type[yaml.SafeLoader]) -> DocumentParser:
    """Provide a document parser without installed plugins."""
    patch_entrypoints()

    return DocumentParser(loader, strict=True)


@pytest.fixture
def make_context(parser: DocumentParser,
                 rng: Random) -> 'Callable[..., EvaluationContext]':
    """Provide a factory of evaluation contexts with parser functions."""
    def make(environ: dict[str, str] | None = None) -> 'EvaluationContext':
        builder = ContextBuilder(parser.functions, rng=rng)
        return builder.build(environ or {})

    return make


@pytest.fixture
def decode(parser: DocumentParser,
           make_context: 'Callable[..., EvaluationContext]') -> 'Callable[..., tuple[Record, ...]]':
    """Provide a helper decoding YAML text into records."""
    def run(content: str, environ: dict[str, str] | None = None) -> tuple['Record', ...]:
        document = parser.parse(content)
        return DocumentDecoder(parser.variants, make_context(environ)).decode(document)

    return run
