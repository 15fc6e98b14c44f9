"""Built-in functions for attribute expressions.

Functions are pure apart from the random source they receive from the
evaluation context. They are exposed in YAML as tags named after the
function, taking a sequence of arguments:

    breed: !select [Pug, Lab]
    breed: !random [2, ' & ', Pug, Lab, Beagle]
"""

from typing import TYPE_CHECKING

from pet_sounds.errors import ArityError
from pet_sounds.extensions import Function, Parameter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from random import Random


def select_impl(args: 'Sequence[str]', rng: 'Random') -> str:
    """Pick one candidate uniformly at random.

    Args:
        args: Candidates, at least one.
        rng: Random source.

    Returns:
        The picked candidate.

    Raises:
        ArityError: If there are no candidates.
    """
    if not args:
        raise ArityError('at least one argument required')

    return rng.choice(list(args))


def random_impl(args: 'Sequence[int | str]', rng: 'Random') -> str:
    """Pick `count` distinct candidates and join them with a separator.

    Candidates are drawn without replacement and joined in draw order,
    for example `random(3, ', ', 'a', 'b', 'c')` may give `'c, a, b'`.

    Args:
        args: Count, separator, then candidates.
        rng: Random source.

    Returns:
        The joined candidates.

    Raises:
        ArityError: If more candidates are requested than available.
    """
    count, separator, *candidates = args
    if not isinstance(count, int) or not isinstance(separator, str):  # pragma: no cover
        raise TypeError('invalid count or separator')

    if count < 0 or count > len(candidates):
        raise ArityError(
            f'unable to select {count} random elements '
            f'from list of length {len(candidates)}',
        )

    return separator.join(rng.sample(candidates, count))


#: Function for `!select [<candidate>, ...]` expression.
select = Function(
    name='select',
    title='Random selection',
    description='Pick one of the candidates uniformly at random.',
    var_param=Parameter(name='candidates', base=str),
    var_min=1,
    returns=str,
    impl=select_impl,
)

#: Function for `!random [<count>, <separator>, <candidate>, ...]` expression.
random = Function(
    name='random',
    title='Random sample',
    description=(
        'Pick `count` distinct candidates without replacement and '
        'join them with `separator` in draw order.'
    ),
    params=[
        Parameter(name='count', base=int),
        Parameter(name='separator', base=str),
    ],
    var_param=Parameter(name='candidates', base=str),
    returns=str,
    impl=random_impl,
)
