"""Two-pass, schema-directed decoding of pet documents.

The shape of a pet's characteristics depends on its type, which is only
known once the block is partially decoded. Decoding is therefore staged:

1. `GenericBlockDecoder` validates the fixed shape of every block and
   resolves its type, keeping the characteristics undecoded.
2. `TypedBodyDecoder` looks up the variant schema of the type and
   resolves the characteristics into a typed record.

`DocumentDecoder` runs both passes over a whole document. Any failure
aborts the run: either every block decodes or no record is returned.
"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from pet_sounds.errors import (
    DecodeError,
    ErrorContext,
    EvaluationError,
    SchemaError,
    UnknownFieldError,
    UnknownVariantError,
)
from pet_sounds.schema import GenericBlock, PendingBlock, Record

if TYPE_CHECKING:
    from pet_sounds.context import EvaluationContext
    from pet_sounds.extensions import VariantRegistry, VariantSchema
    from pet_sounds.values import Value

    from .parser import Document, RawBlock

logger = logging.getLogger(__name__)

#: Attribute holding the pet type in raw blocks.
DISCRIMINATOR_FIELD = 'type'


class GenericBlockDecoder:
    """First decoding pass.

    Validates the generic shape of pet blocks and resolves their type.
    The type is resolved against the variables of the context only:
    functions never run during this pass.
    """

    def __init__(self, context: 'EvaluationContext') -> None:
        """Initialize the decoder.

        Args:
            context: Evaluation context of the run.
        """
        self.context = context.without_functions()

    def decode(self, document: 'Document') -> tuple[PendingBlock, ...]:
        """Decode every block of a document into its generic shape.

        Args:
            document: Raw pet blocks.

        Returns:
            Pending blocks, in document order.

        Raises:
            SchemaError: If a block shape or type is malformed.
            EvaluationError: If the type expression can not be evaluated.
        """
        return tuple(
            self.decode_block(block, block_num)
            for block_num, block in enumerate(document)
        )

    def decode_block(self, block: 'RawBlock', block_num: int = 0) -> PendingBlock:
        """Decode a single block into its generic shape.

        Args:
            block: Raw pet block.
            block_num: Position of the block in the document.

        Returns:
            The pending block.

        Raises:
            SchemaError: If the block shape or type is malformed.
            EvaluationError: If the type expression can not be evaluated.
        """
        try:
            generic = GenericBlock.model_validate(block)
        except ValidationError as base:
            raise SchemaError.from_pydantic_error(
                base,
                data=block,
                message='Invalid pet block',
                block_num=block_num,
            ) from base

        try:
            discriminator = self.context.resolve(generic.discriminator)
        except DecodeError as base:
            raise base.with_context(
                block_num=block_num,
                label=generic.label,
                field=DISCRIMINATOR_FIELD,
            ) from base

        if not isinstance(discriminator, str) or not discriminator:
            raise SchemaError(
                f'Type of pet {generic.label!r} must be a non-empty string',
                context=ErrorContext(
                    block_num=block_num,
                    label=generic.label,
                    field=DISCRIMINATOR_FIELD,
                ),
            )

        return PendingBlock(
            label=generic.label,
            discriminator=discriminator,
            body=generic.body or {},
        )


class TypedBodyDecoder:
    """Second decoding pass.

    Resolves the characteristics of a pending block into the record
    model registered for its type. Variant schemas are closed: any
    undeclared attribute is an error. Optional fields resolving to
    nothing or to the zero value of their type get their default, so
    an explicitly empty value behaves exactly like an omitted one.
    """

    def __init__(self, variants: 'VariantRegistry',
                 context: 'EvaluationContext') -> None:
        """Initialize the decoder.

        Args:
            variants: Variant schema registry.
            context: Evaluation context of the run.
        """
        self.variants = variants
        self.context = context

    def decode(self, pending: PendingBlock, block_num: int | None = None) -> Record:
        """Decode a pending block with the schema registered for its type.

        Args:
            pending: Pending block from the first pass.
            block_num: Optional position of the block, for error messages.

        Returns:
            The decoded record.

        Raises:
            UnknownVariantError: If the type has no registered schema.
            UnknownFieldError: If an attribute is not declared by the schema.
            EvaluationError: If an attribute expression can not be evaluated.
            SchemaError: If a required attribute is missing or has a wrong type.
        """
        schema = self.variants.lookup(pending.discriminator)
        if schema is None:
            raise UnknownVariantError(
                f'Unknown type {pending.discriminator!r} of pet {pending.label!r}',
                context=ErrorContext(
                    block_num=block_num,
                    label=pending.label,
                    discriminator=pending.discriminator,
                ),
            )

        try:
            return self.decode_with(pending, schema)
        except DecodeError as base:
            raise base.with_context(block_num=block_num) from base

    def decode_with(self, pending: PendingBlock, schema: 'VariantSchema') -> Record:
        """Decode a pending block with a given schema.

        Args:
            pending: Pending block from the first pass.
            schema: Variant schema of the block type.

        Returns:
            The decoded record.

        Raises:
            UnknownFieldError: If an attribute is not declared by the schema.
            EvaluationError: If an attribute expression can not be evaluated.
            SchemaError: If a required attribute is missing or has a wrong type.
        """
        location = ErrorContext(label=pending.label, discriminator=pending.discriminator)

        for name in pending.body:
            if name not in schema.attributes:
                raise UnknownFieldError(
                    f'Unknown attribute {name!r} for pet {pending.label!r} '
                    f'of type {pending.discriminator!r}',
                    context=ErrorContext(**location, field=name, element=dict(pending.body)),
                )

        values: dict[str, Value] = {}
        for name, expression in pending.body.items():
            values[name] = self.evaluate(expression, location, name)

        for name, spec in schema.attributes.items():
            if not spec.required and name in values and spec.is_zero(values[name]):
                del values[name]

        try:
            return schema.validate_record(pending.label, values)
        except ValidationError as base:
            field = self._failed_field(base)
            raise SchemaError.from_pydantic_error(
                base,
                data=values,
                message=f'Invalid characteristics of pet {pending.label!r}',
                **location,
                field=field,
            ) from base

    def evaluate(self, expression: Any,  # noqa: ANN401
                 location: ErrorContext, field: str) -> 'Value':
        """Resolve an attribute expression.

        Args:
            expression: Raw or deferred attribute value.
            location: Location of the block.
            field: Attribute name.

        Returns:
            The resolved value.

        Raises:
            EvaluationError: If the expression can not be evaluated.
        """
        try:
            return self.context.resolve(expression)
        except EvaluationError as base:
            raise base.with_context(**location, field=field) from base

    @staticmethod
    def _failed_field(error: ValidationError) -> str | None:
        """Get the field name of the first validation issue."""
        for item in error.errors(include_url=False, include_input=False):
            if item['loc'] and isinstance(item['loc'][0], str):
                return item['loc'][0]

        return None


class DocumentDecoder:
    """Decoding orchestrator.

    Runs the first pass over every block, then the second pass over every
    pending block, preserving document order.
    """

    def __init__(self, variants: 'VariantRegistry',
                 context: 'EvaluationContext') -> None:
        """Initialize the orchestrator.

        Args:
            variants: Variant schema registry.
            context: Evaluation context shared by both passes.
        """
        self.generic = GenericBlockDecoder(context)
        self.typed = TypedBodyDecoder(variants, context)

    def decode(self, document: 'Document') -> tuple[Record, ...]:
        """Decode a whole document.

        Args:
            document: Raw pet blocks.

        Returns:
            Decoded records, in document order.

        Raises:
            DecodeError: On the first failure of any block.
        """
        pending = self.generic.decode(document)
        logger.debug('Resolved types of %d pet blocks', len(pending))

        records = tuple(
            self.typed.decode(block, block_num)
            for block_num, block in enumerate(pending)
        )
        logger.debug('Decoded %d pet records', len(records))

        return records
