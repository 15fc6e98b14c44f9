"""Shared pydantic bases.

Everything decoded or declared by pet-sounds is a frozen model, so
records, blocks and contexts can be passed around without copies.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Frozen model rejecting unknown fields.

    Unknown fields are errors rather than being dropped, so that a
    misspelled key in a configuration or a plugin never goes unnoticed.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Optional human-readable title and description of a definition."""

    title: str | None = Field(
        default=None,
        title='Title',
        description='Short name shown to humans.',
    )

    description: str | None = Field(
        default=None,
        title='Description',
        description='Longer explanation shown to humans.',
    )


class SettingsModel(BaseSettings):
    """Frozen settings model.

    Unrelated variables sharing the environment prefix are ignored.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
