"""Name primitive types and validation rules.

This module defines base name patterns and strongly-typed aliases used
to validate variable paths, function names, discriminators and labels.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for all identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for variable identifiers
VARIABLE_PATTERN = regexp(
    rf'^(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)

#: Compiled pattern for discriminator values ("cat", "sea-turtle").
DISCRIMINATOR_PATTERN = regexp(
    rf'^{_NAME_PATTERN}(-[a-zA-Z\d]+)*$',
    flags=ASCII,
)


Variable = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Variable identifier',
        description=(
            'Name of a variable, a function or a record field. '
            'Identifiers must start with a letter and may contain '
            'letters, digits, or underscores. '
            'Names are restricted to ASCII characters.'
        ),
        examples=[
            'sound',
            'breed',
            'select',
        ],
    ),
]

Discriminator = Annotated[
    str, Field(
        pattern=DISCRIMINATOR_PATTERN.pattern,
        title='Pet type',
        description=(
            'Value of the `type` attribute selecting the variant schema '
            'used to decode the characteristics of a pet block. '
            'Words may be joined with dashes.'
        ),
        examples=[
            'cat',
            'dog',
        ],
    ),
]

Label = Annotated[
    str, Field(
        min_length=1,
        title='Pet name',
        description=(
            'Identity label of a pet block. '
            'Labels are not required to be unique within a document.'
        ),
        examples=[
            'Ink',
            'Swinney',
        ],
    ),
]
