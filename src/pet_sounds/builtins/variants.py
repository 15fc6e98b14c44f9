"""Built-in pet variants.

Each variant binds a pet type to a record model declaring the
characteristics of that type:

    pet: Ink
    type: cat
    characteristics:
      sound: nyan

    pet: Swinney
    type: dog
    characteristics:
      breed: Dachshund
"""

from click import echo
from pydantic import Field

from pet_sounds.extensions import Variant
from pet_sounds.schema import Record

DEFAULT_CAT_SOUND = 'meow'
DEFAULT_DOG_BREED = 'mutt'


class Cat(Record):
    """Cat record, with an optional sound."""

    sound: str = Field(
        default=DEFAULT_CAT_SOUND,
        title='Sound',
        description='Sound the cat makes.',
    )

    def announce(self) -> None:
        """Print the cat sound."""
        echo(f'{self.name} {self.sound}')

    def act(self) -> None:
        """Print the cat behavior."""
        echo(f'{self.name} snoozes')


class Dog(Record):
    """Dog record, with an optional breed."""

    breed: str = Field(
        default=DEFAULT_DOG_BREED,
        title='Breed',
        description='Breed of the dog.',
    )

    def announce(self) -> None:
        """Print the dog sound."""
        echo(f'{self.name} the {self.breed} barks')

    def act(self) -> None:
        """Print the dog behavior."""
        echo(f'{self.name} the {self.breed} plays')


#: Variant for `type: cat` pets.
cat = Variant(name='cat', record=Cat, title='Cat')

#: Variant for `type: dog` pets.
dog = Variant(name='dog', record=Dog, title='Dog')
