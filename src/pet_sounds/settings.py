"""Runtime settings of the pet-sounds reader.

Settings are resolved from `PETSOUNDS_*` environment variables and may be
overridden by explicit values (for example, command-line options).
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from pet_sounds.context import ENV_NAMESPACE, ENV_PREFIX
from pet_sounds.models import SettingsModel
from pet_sounds.names import Variable  # noqa: TC001

DEFAULT_FILENAME = 'pets.yaml'


class Settings(SettingsModel):
    """Settings of a configuration reading run."""

    model_config = SettingsConfigDict(env_prefix='PETSOUNDS_')

    file: Path = Field(
        default=Path(DEFAULT_FILENAME),
        title='Configuration file',
        description='Path of the pet configuration file to read.',
    )

    prefix: str = Field(
        default=ENV_PREFIX,
        min_length=1,
        title='Variables prefix',
        description='Prefix of environment keys exposed to expressions.',
    )

    namespace: Variable = Field(
        default=ENV_NAMESPACE,
        title='Variables namespace',
        description='Namespace of exposed environment keys, as in `env.CAT_SOUND`.',
    )

    seed: int | None = Field(
        default=None,
        title='Random seed',
        description='Seed of the random source, for reproducible selections.',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description='Raise errors instead of warnings on plugin issues.',
    )
