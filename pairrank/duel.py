"""
Duels between two candidates

Copyright © 2025 Hauke Dämpfling (haukex@zero-g.net)

Permission to use, copy, modify, and/or distribute this software for any
purpose with or without fee is hereby granted, provided that the above
copyright notice and this permission notice appear in all copies.

THE SOFTWARE IS PROVIDED “AS IS” AND THE AUTHOR DISCLAIMS ALL WARRANTIES
WITH REGARD TO THIS SOFTWARE INCLUDING ALL IMPLIED WARRANTIES OF
MERCHANTABILITY AND FITNESS. IN NO EVENT SHALL THE AUTHOR BE LIABLE FOR
ANY SPECIAL, DIRECT, INDIRECT, OR CONSEQUENTIAL DAMAGES OR ANY DAMAGES
WHATSOEVER RESULTING FROM LOSS OF USE, DATA OR PROFITS, WHETHER IN AN
ACTION OF CONTRACT, NEGLIGENCE OR OTHER TORTIOUS ACTION, ARISING OUT OF
OR IN CONNECTION WITH THE USE OR PERFORMANCE OF THIS SOFTWARE.
"""
from typing import TypeVar, Generic, Any
from enum import Enum

#: A type of object that can take part in a :class:`Duel`. Must be hashable and have sensible
#: support for the equality operators.
T = TypeVar('T')

class DuelWinner(Enum):
    """Which side of a :class:`Duel` won, relative to the order in which the duel was declared."""
    A = 'A'
    B = 'B'

class Duel(Generic[T]):
    """An unordered pair of two candidates to be compared.

    Equality is symmetric, ``Duel(x, y) == Duel(y, x)``, and so is the hash, but the declared order
    is kept so that a :class:`DuelWinner` can refer to one side of it.
    """
    __slots__ = ('_a', '_b')

    def __init__(self, a :T, b :T):
        self._a = a
        self._b = b

    @property
    def a(self) -> T:
        return self._a

    @property
    def b(self) -> T:
        return self._b

    def winner(self, side :DuelWinner) -> T:
        return self._a if side is DuelWinner.A else self._b

    def loser(self, side :DuelWinner) -> T:
        return self._b if side is DuelWinner.A else self._a

    def __eq__(self, other :Any) -> bool:
        if not isinstance(other, Duel):
            return NotImplemented
        return ( self._a == other._a and self._b == other._b ) or ( self._a == other._b and self._b == other._a )

    def __hash__(self) -> int:
        return hash(frozenset((self._a, self._b)))

    def __repr__(self) -> str:
        return f"Duel({self._a!r}, {self._b!r})"
