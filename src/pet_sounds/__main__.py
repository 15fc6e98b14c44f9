"""Command-line interface of pet-sounds.

Reads a pet configuration file and lets every pet announce itself and
act, in document order.
"""

from logging import DEBUG, basicConfig
from pathlib import Path

from click import Context, echo, option, pass_context
from click import Path as PathParam
from click import command
from pydantic import ValidationError

from pet_sounds.core import ConfigReader
from pet_sounds.errors import DecodeError
from pet_sounds.settings import Settings

InputFilepath = PathParam(
    dir_okay=False,
    path_type=Path,
)


@command(
    name='pet-sounds',
    help='Read pets from a configuration file and let them speak and act.',
)
@option(
    '-f', '--file', 'filename',
    type=InputFilepath,
    default=None,
    help='The file to read pet configuration from (default: pets.yaml).',
)
@option(
    '--seed',
    type=int,
    default=None,
    help='Seed of the random source used by random functions.',
)
@option(
    '--strict/--no-strict',
    default=None,
    help='Fail on plugin issues instead of warning.',
)
@option(
    '-v', '--verbose',
    is_flag=True,
    default=False,
    help='Enable debug logging.',
)
@pass_context
def cli(ctx: Context, filename: Path | None, seed: int | None,
        strict: bool | None, verbose: bool) -> None:
    """Read pets and print their sounds and behaviors."""
    if verbose:
        basicConfig(level=DEBUG)

    overrides = {
        key: value
        for key, value in (('file', filename), ('seed', seed), ('strict', strict))
        if value is not None
    }

    try:
        pets = ConfigReader(Settings(**overrides)).read()
    except ValidationError as error:
        echo(f'pet-sounds error: Invalid settings: {error}', err=True)
        ctx.exit(1)
    except DecodeError as error:
        echo(f'pet-sounds error: {error}', err=True)
        ctx.exit(1)

    for pet in pets:
        pet.announce()
        pet.act()


if __name__ == '__main__':
    cli()
