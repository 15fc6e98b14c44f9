"""Generic pet block shapes used by the first decoding pass.

`GenericBlock` validates the fixed part of every pet block: its label,
its discriminator and the characteristics body kept undecoded.
`PendingBlock` is the tagged intermediate handed to the second pass once
the discriminator is resolved.
"""

from pydantic import Field

from pet_sounds.models import SchemaModel
from pet_sounds.names import Label  # noqa: TC001
from pet_sounds.values import Deferred, RuntimeValue  # noqa: TC001


class GenericBlock(SchemaModel):
    """Fixed shape shared by all pet blocks.

    Example:
        pet: Ink
        type: cat
        characteristics:
          sound: meow
    """

    label: Label = Field(
        validation_alias='pet',
        title='Pet name',
        description='Identity label of the pet.',
    )

    discriminator: Deferred[str] = Field(
        validation_alias='type',
        title='Pet type',
        description=(
            'Type of the pet, selecting the schema of the characteristics. '
            'May be an expression resolved against the evaluation context.'
        ),
    )

    body: dict[str, RuntimeValue] | None = Field(
        default=None,
        validation_alias='characteristics',
        title='Characteristics',
        description=(
            'Attributes specific to the pet type. '
            'Kept undecoded until the pet type is known.'
        ),
    )


class PendingBlock(SchemaModel):
    """Pet block with a resolved discriminator and a deferred body."""

    label: Label = Field(
        title='Pet name',
        description='Identity label of the pet.',
    )

    discriminator: str = Field(
        title='Pet type',
        description='Resolved type of the pet.',
    )

    body: dict[str, RuntimeValue] = Field(
        default_factory=dict,
        title='Characteristics',
        description='Undecoded attributes, resolved by the second pass.',
    )
