"""Turning configuration text into raw pet blocks.

`DocumentParser` owns the extension registries (variants, functions,
tags) and binds every known tag to an isolated PyYAML loader. Parsing
a stream yields a `Document`: the raw pet blocks in stream order, with
expressions left as deferred values for the decoders.
"""

import logging
from typing import TYPE_CHECKING, Any

from yaml import add_constructor, load_all
from yaml.error import MarkedYAMLError

from pet_sounds.builtins import functions, instructions, variants
from pet_sounds.errors import DecodeError, ErrorContext, ParseError, SchemaError

from .loader import ExtensionsLoaderMixin

if TYPE_CHECKING:
    from io import TextIOBase

    from yaml import BaseLoader

logger = logging.getLogger(__name__)

#: Raw pet block, as produced by the YAML loader.
type RawBlock = dict[str, Any]

#: Ordered sequence of raw pet blocks.
type Document = tuple[RawBlock, ...]


class DocumentParser(ExtensionsLoaderMixin):
    """Parser of pet configuration streams.

    Holds the built-in and plugin-provided extensions, including the
    variant schema registry read by the second decoding pass, and the
    loader class their tags are bound to.
    """

    def __init__(self, loader: type['BaseLoader'],
                 strict: bool = False,
                 auto_attach: bool = True) -> None:
        """Register the extensions and bind their tags.

        Built-in tags, functions and variants are registered first, then
        the installed plugins, so plugins may shadow built-ins.

        Args:
            loader: Loader class receiving the tag constructors. It is
                mutated, so pass a class of its own.
            strict: Raise `PluginError` on plugin issues instead of
                warning about them.
            auto_attach: Bind the tags right away.
        """
        self.loader = loader
        self.strict_mode = strict

        self.clear_plugins()

        self.add_instruction(instructions.variable)

        self.add_function(functions.select)
        self.add_function(functions.random)

        self.add_variant(variants.cat)
        self.add_variant(variants.dog)

        self.load_plugins()

        if auto_attach:
            self.attach()

    def attach(self) -> None:
        """Bind a constructor for every registered tag to the loader.

        Calling it again rebinds every tag, so extensions added after
        initialization become available.
        """
        for name, instruction in self.instructions.items():
            add_constructor(f'!{name}', instruction(), Loader=self.loader)
            logger.debug('Attached tag !%s on %s nodes', name, instruction.node_type)

    def parse(self, content: 'TextIOBase | str') -> Document:
        """Parse a YAML stream into a document of raw pet blocks.

        The stream may contain multiple YAML documents. Each one is either
        a single pet block mapping or a sequence of pet block mappings.
        Empty documents are skipped. Blocks keep their stream order.

        Args:
            content: Text or text stream to parse.

        Returns:
            The ordered raw pet blocks.

        Raises:
            ParseError: If YAML parsing or an instruction fails.
            SchemaError: If a document is neither a block nor a list of blocks.
        """
        try:
            documents = list(load_all(content, Loader=self.loader))
        except MarkedYAMLError as base:
            raise ParseError.from_yaml_error(base) from base
        except DecodeError:
            raise
        except Exception as base:
            raise ParseError(f'Unreadable document: {base}') from base

        blocks: list[RawBlock] = []

        for document in documents:
            if document is None:
                continue

            items = document if isinstance(document, list) else [document]
            for item in items:
                if not isinstance(item, dict):
                    raise SchemaError(
                        'Pet block must be a mapping',
                        context=ErrorContext(block_num=len(blocks), element=item),
                    )
                blocks.append(item)

        logger.debug('Parsed %d pet blocks', len(blocks))

        return tuple(blocks)
