"""Extensions registration and plugin discovery.

This module defines a mixin holding the registries of variants,
functions and YAML instructions, and loading plugins exposed via Python
entry points into them.

Plugin problems are warnings by default: a broken plugin is skipped
and loading goes on. On strict mode they are errors.
"""

import logging
from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from pet_sounds.builtins.instructions import function_instruction
from pet_sounds.errors import PluginError, PluginWarning
from pet_sounds.extensions import Plugin, VariantRegistry

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

if TYPE_CHECKING:
    from pet_sounds.extensions import Function, Instruction, Variant
    from pet_sounds.schema import BaseInstruction

logger = logging.getLogger(__name__)

#: Entry point group of plugins.
PLUGINS_GROUP = 'pet_sounds_plugins'


class ExtensionsLoaderMixin:
    """Mixin defining extension registration and plugin loading.

    The `variants` registry is read by the second decoding pass.

    Attributes:
        strict_mode: If True, any registration issue raises an error.
            If False, issues are emitted as warnings and loading continues.
    """

    strict_mode: bool = False

    variants: VariantRegistry
    functions: dict[str, 'Function']
    instructions: dict[str, type['BaseInstruction']]

    def add_variant(self, variant: 'Variant',
                    entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a pet type.

        A variant with the name of a registered one replaces it.

        Args:
            variant: Declarative variant definition.
            entrypoint: Entry point of the providing plugin, if any.

        Raises:
            PluginError: If the variant schema can not be built, or if the
                variant shadows an existing one on strict mode.
        """
        origin = self.describe_origin(variant.name, entrypoint)

        if variant.name in self.variants:
            self.report_plugin_issue(f'Variant {origin} is shadowing an existing', entrypoint)

        try:
            self.variants[variant.name] = variant.build()
        except ValueError as base:
            raise PluginError(f'Variant {origin} is invalid: {base}', entrypoint=entrypoint) from base

        logger.debug('Registered variant %s', origin)

    def add_function(self, function: 'Function',
                     entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a function and the tag calling it.

        Functions share the tag namespace with instructions, so a function
        named after an instruction shadows it.

        Args:
            function: Declarative function definition.
            entrypoint: Entry point of the providing plugin, if any.

        Raises:
            PluginError: If the function shadows an existing function or
                instruction on strict mode.
        """
        origin = self.describe_origin(function.name, entrypoint)

        if function.name in self.functions or function.name in self.instructions:
            self.report_plugin_issue(f'Function {origin} is shadowing an existing', entrypoint)

        self.functions[function.name] = function
        self.instructions[function.name] = function_instruction(function).build()

        logger.debug('Registered function %s', origin)

    def add_instruction(self, instruction: 'Instruction',
                        entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a YAML tag.

        Args:
            instruction: Declarative instruction definition.
            entrypoint: Entry point of the providing plugin, if any.

        Raises:
            PluginError: If the instruction shadows an existing one on strict mode.
        """
        origin = self.describe_origin(instruction.name, entrypoint)

        if instruction.name in self.instructions:
            self.report_plugin_issue(f'Instruction {origin} is shadowing an existing', entrypoint)

        self.instructions[instruction.name] = instruction.build()

        logger.debug('Registered instruction %s', origin)

    @staticmethod
    def describe_origin(name: str, entrypoint: 'EntryPoint | None' = None) -> str:
        """Describe a definition and where it comes from, for messages."""
        if entrypoint is None:
            return f"'builtins.{name}'"

        return f"'{entrypoint.name}.{name}' from '{entrypoint.value}'"

    def report_plugin_issue(self, message: str,
                            entrypoint: 'EntryPoint | None' = None) -> None:
        """Warn about a plugin issue, or raise it on strict mode.

        Args:
            message: Issue description.
            entrypoint: Entry point of the plugin, if any.

        Raises:
            PluginError: On strict mode.
        """
        if self.strict_mode:
            raise PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=3)

    def _load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load a plugin entry point and register its extensions.

        Args:
            entrypoint: Entry point of the plugin.

        Raises:
            PluginError: If the plugin is broken on strict mode.
        """
        try:
            plugin = entrypoint.load()
        except ValidationError as base:
            self._skip_plugin(f'Failed to validate entrypoint {entrypoint.name!r}', entrypoint, base)
            return
        except Exception as base:
            self._skip_plugin(f'Failed to load entrypoint {entrypoint.name!r}', entrypoint, base)
            return

        if not isinstance(plugin, Plugin):
            self.report_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a plugin',
                entrypoint,
            )
            return

        logger.debug('Loading plugin %r from %r', plugin.name, entrypoint.value)

        for variant in plugin.variants:
            self.add_variant(variant, entrypoint)

        for function in plugin.functions:
            self.add_function(function, entrypoint)

        for instruction in plugin.instructions:
            self.add_instruction(instruction, entrypoint)

    def _skip_plugin(self, message: str, entrypoint: 'EntryPoint',
                     cause: Exception) -> None:
        """Report a plugin that can not be loaded, chaining the cause."""
        try:
            self.report_plugin_issue(message, entrypoint)
        except PluginError as error:
            raise error from cause

    def clear_plugins(self) -> None:
        """Forget every registered extension."""
        self.variants = VariantRegistry()
        self.functions = {}
        self.instructions = {}

    def load_plugins(self) -> None:
        """Register the extensions of every installed plugin.

        Plugins are discovered from the `pet_sounds_plugins` entry point group.

        Raises:
            PluginError: If a plugin is broken on strict mode.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=PLUGINS_GROUP):
            self._load_plugin(entrypoint)
