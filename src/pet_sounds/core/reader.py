"""High-level configuration reader.

Wires the parser, the evaluation context builder and the decoders
together to read pet records from a file or a text.
"""

import logging
from os import environ as os_environ
from pathlib import Path
from random import Random
from typing import TYPE_CHECKING

from yaml import SafeLoader

from pet_sounds.context import ContextBuilder
from pet_sounds.errors import DecodeError, ErrorContext, ReadError
from pet_sounds.settings import Settings

from .decoder import DocumentDecoder
from .parser import DocumentParser

if TYPE_CHECKING:
    from collections.abc import Mapping
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml import BaseLoader

if TYPE_CHECKING:
    from pet_sounds.schema import Record

logger = logging.getLogger(__name__)


def make_loader() -> type[SafeLoader]:
    """Create an isolated YAML loader class.

    Constructors registered on the returned class do not leak into
    `yaml.SafeLoader` itself.
    """
    class PetLoader(SafeLoader):
        pass

    return PetLoader


class ConfigReader:
    """Reader of pet configuration documents.

    Example:
        >>> reader = ConfigReader(Settings(seed=42))
        >>> pets = reader.decode('pet: Ink\\ntype: cat\\n', environ={})
        >>> pets[0].sound
        'meow'
    """

    def __init__(self, settings: Settings | None = None, *,
                 loader: type['BaseLoader'] | None = None,
                 rng: Random | None = None) -> None:
        """Initialize the reader.

        Args:
            settings: Runtime settings. Resolved from the environment
                when not provided.
            loader: YAML loader class to extend. An isolated `SafeLoader`
                subclass is used when not provided.
            rng: Random source of expressions. Seeded from settings when
                not provided and a seed is configured.

        Raises:
            PluginError: If a plugin can not be registered on strict mode.
        """
        self.settings = settings or Settings()

        if rng is None and self.settings.seed is not None:
            rng = Random(self.settings.seed)  # noqa: S311

        self.parser = DocumentParser(loader or make_loader(), strict=self.settings.strict)
        self.builder = ContextBuilder(
            self.parser.functions,
            prefix=self.settings.prefix,
            namespace=self.settings.namespace,
            rng=rng,
        )

    def decode(self, content: 'TextIOBase | str',
               environ: 'Mapping[str, str] | None' = None) -> tuple['Record', ...]:
        """Decode pet records from configuration text.

        Args:
            content: YAML content as a string or file-like object.
            environ: Environment snapshot. The process environment is
                used when not provided.

        Returns:
            Decoded records, in document order.

        Raises:
            DecodeError: If the document can not be parsed or decoded.
        """
        document = self.parser.parse(content)
        context = self.builder.build(os_environ if environ is None else environ)

        return DocumentDecoder(self.parser.variants, context).decode(document)

    def read(self, path: Path | str | None = None,
             environ: 'Mapping[str, str] | None' = None) -> tuple['Record', ...]:
        """Read pet records from a configuration file.

        Args:
            path: Path of the configuration file. The configured file
                is used when not provided.
            environ: Environment snapshot. The process environment is
                used when not provided.

        Returns:
            Decoded records, in document order.

        Raises:
            ReadError: If the file can not be read.
            DecodeError: If the document can not be parsed or decoded.
        """
        filename = Path(path) if path is not None else self.settings.file
        logger.debug('Reading pet configuration from %s', filename)

        try:
            with filename.open('rt', encoding='utf-8') as stream:
                return self.decode(stream, environ)

        except DecodeError as error:
            raise error.with_context(filename=str(filename)) from error

        except OSError as base:
            raise ReadError(
                f'Can not read pet configuration: {base.strerror or base}',
                context=ErrorContext(filename=str(filename)),
            ) from base
