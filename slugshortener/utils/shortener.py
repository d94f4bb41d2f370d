"""Slug encoding utility

This module maps non-negative integers onto compact Base62 slugs and
validates caller-supplied slugs against the same alphabet.

Functions:
    encode(number):
        Encode a non-negative integer into a Base62 slug.
    is_valid_slug(slug):
        Check that a slug only uses the Base62 alphabet and fits the length limit.
    generate_slug(rng, id_space):
        Draw a random identifier below `id_space` and encode it.

Example:
    >>> from slugshortener.utils import encode
    >>> encode(0)
    'a'
    >>> encode(62)
    'ab'
"""

import re
import string
from random import Random

from slugshortener.utils.constants import MAX_SLUG_LENGTH


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits

# Every identifier below this bound encodes to at most MAX_SLUG_LENGTH symbols
MAX_ID_SPACE = BASE**MAX_SLUG_LENGTH

_SLUG_PATTERN = re.compile(rf'[a-zA-Z0-9]{{1,{MAX_SLUG_LENGTH}}}')


def encode(number: int) -> str:
    """Encode a non-negative integer into a Base62 slug.

    Symbols are emitted least-significant first by repeated division by the
    alphabet size. The mapping is injective, so distinct numbers always yield
    distinct slugs; lexicographic order is not preserved.

    Args:
        number (int):
            Non-negative integer identifier.

    Returns:
        str: Non-empty Base62 string. Zero encodes to the alphabet's first symbol.

    Raises:
        TypeError: If `number` is not an integer.
        ValueError: If `number` is negative.

    Example:
        >>> encode(125)
        'bc'
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError(f'Number must be of type integer (given type: {type(number)}).')
    if number < 0:
        raise ValueError(f'Number must be a non-negative integer (given value: {number}).')

    if number == 0:
        return ALPHABET[0]

    symbols = []
    while number > 0:
        number, remainder = divmod(number, BASE)
        symbols.append(ALPHABET[remainder])
    return ''.join(symbols)


def is_valid_slug(slug: object) -> bool:
    """Return True if `slug` is 1 to 10 symbols of [a-zA-Z0-9]."""
    return isinstance(slug, str) and _SLUG_PATTERN.fullmatch(slug) is not None


def generate_slug(rng: Random, id_space: int) -> str:
    """Draw a uniformly random identifier in [0, id_space) and encode it.

    Args:
        rng (Random):
            Source of randomness (``secrets.SystemRandom()`` in production).
        id_space (int):
            Exclusive upper bound of the identifier space. Must not exceed
            ``MAX_ID_SPACE`` so slugs stay within the length limit.

    Returns:
        str: Generated slug candidate.
    """
    if not 0 < id_space <= MAX_ID_SPACE:
        raise ValueError(f'Identifier space must be in (0, {MAX_ID_SPACE}] (given value: {id_space}).')
    return encode(rng.randrange(id_space))
