"""Base record model for decoded pet blocks.

A record is the result of the second decoding pass: the identity label
of a pet block together with the characteristics declared by its
variant. Records are consumed by callers through two capabilities,
`announce` and `act`.
"""

from pydantic import Field

from pet_sounds.models import SchemaModel
from pet_sounds.names import Label  # noqa: TC001


class Record(SchemaModel):
    """Base class for decoded pet records.

    Subclasses declare the characteristics of one variant as regular
    model fields. Fields with a default are optional in configuration.
    The `name` field is filled from the block label and is never part
    of the characteristics.
    """

    name: Label = Field(
        title='Pet name',
        description='Identity label of the decoded pet block.',
    )

    def announce(self) -> None:
        """Emit the characteristic sound of the pet."""
        raise NotImplementedError

    def act(self) -> None:
        """Emit the characteristic behavior of the pet."""
        raise NotImplementedError
