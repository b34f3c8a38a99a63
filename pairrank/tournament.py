"""
Tournament: Merge-Insertion Sort with Transitive Inference
==========================================================

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
import logging
from collections.abc import Sequence, Callable, Awaitable
from typing import Generic, Optional, Literal, Any
from enum import Enum
from .duel import T, Duel, DuelWinner
from .sorter import MergeInsertionSorter, RandomSource
from .errors import TournamentStateError

logger = logging.getLogger(__name__)

class Matchup(Enum):
    """What is known about how one candidate compares to another."""
    UNKNOWN = 0
    PREFERRED = 1
    NOT_PREFERRED = -1

class Tournament(Generic[T]):
    """Ranks candidates with a :class:`~pairrank.sorter.MergeInsertionSorter`, asking only the duels
    whose outcome can't already be inferred.

    Whenever a winner is declared, every candidate already known to be preferred over the winner (and the
    winner itself) is recorded as preferred over every candidate the loser is known to be preferred over (and
    the loser itself). This keeps the matchup matrix transitively closed, so when the sorter asks for a
    comparison that follows from earlier answers, the tournament answers it without asking.

    Call :meth:`next_query` and :meth:`declare_winner` in turn until :attr:`is_complete`, then
    :meth:`get_ranking`.

    :param candidates: The distinct, hashable candidates to rank. Their order only determines their indices.
    :param rng: Random source passed to the sorter.
    """

    def __init__(self, candidates :Sequence[T], rng :Optional[RandomSource] = None):
        self._setup(candidates)
        n = len(self._candidates)
        self._matrix :list[list[Matchup]] = [ [Matchup.UNKNOWN]*n for _ in range(n) ]
        self._knowledge :int = 0
        self._round :int = 1
        self._active :Optional[Duel[T]] = None
        self._sorter = MergeInsertionSorter(n, rng)

    def _setup(self, candidates :Sequence[T]) -> None:
        if len(candidates)<1:
            raise ValueError("must rank one or more candidates")
        self._candidates :tuple[T, ...] = tuple(candidates)
        self._index :dict[T, int] = { c: i for i,c in enumerate(self._candidates) }
        if len(self._index) != len(self._candidates):
            raise ValueError('candidates may not contain duplicates')

    @property
    def candidates(self) -> tuple[T, ...]:
        return self._candidates

    @property
    def round(self) -> int:
        """The current round; a round is one :meth:`next_query` plus :meth:`declare_winner`."""
        return self._round

    @property
    def active_duel(self) -> Optional[Duel[T]]:
        """The duel returned by :meth:`next_query` that is still waiting for :meth:`declare_winner`."""
        return self._active

    @property
    def knowledge(self) -> int:
        """The number of pairs of candidates whose order is known."""
        return self._knowledge

    @property
    def total_knowledge(self) -> int:
        n = len(self._candidates)
        return n*(n-1)//2

    @property
    def is_complete(self) -> bool:
        return self._sorter.is_complete

    def current_progress(self) -> float:
        """The fraction of pairs of candidates whose order is known, from 0 to 1."""
        total = self.total_knowledge
        return self._knowledge / total if total else 1.0

    def preference(self, a :T, b :T) -> Matchup:
        """What is known about candidate ``a`` compared to candidate ``b``."""
        return self._matrix[self._index[a]][self._index[b]]

    def _answer_known(self) -> Optional[Duel[int]]:
        # Feed the sorter the answers to all comparisons that are already known,
        # returns the first one that isn't, or None if sorting completed.
        while not self._sorter.is_complete:
            duel = self._sorter.current_comparison()
            known = self._matrix[duel.a][duel.b]
            if known is Matchup.UNKNOWN:
                return duel
            logger.debug("already known: %r vs %r", self._candidates[duel.a], self._candidates[duel.b])
            self._sorter.declare_winner(DuelWinner.A if known is Matchup.PREFERRED else DuelWinner.B)
        return None

    def next_query(self) -> Duel[T]:
        """Returns the next duel that needs to be answered by :meth:`declare_winner`.

        :raises TournamentStateError: If a duel is already active or the tournament is complete.
        """
        if self._active is not None:
            raise TournamentStateError("declare_winner() must be called before querying the next duel")
        duel = self._answer_known()
        if duel is None:
            raise TournamentStateError("the tournament is complete, there are no more duels")
        self._active = Duel(self._candidates[duel.a], self._candidates[duel.b])
        return self._active

    def cancel_query(self) -> None:
        """Forgets the active duel without answering it, e.g. in order to save the tournament.
        The next call to :meth:`next_query` returns the same duel."""
        self._active = None

    def declare_winner(self, winner :DuelWinner) -> None:
        """Declares the winner of the active duel.

        :param winner: Which side of the duel returned by :meth:`next_query` is preferred.
        :raises TournamentStateError: If there is no active duel.
        """
        if self._active is None:
            raise TournamentStateError("next_query() must be called before declaring the winner of a duel")
        winner_idx = self._index[self._active.winner(winner)]
        loser_idx = self._index[self._active.loser(winner)]
        n = len(self._candidates)
        # Everything preferred over the winner beats everything the loser is preferred over.
        winners = [winner_idx] + [ k for k in range(n) if self._matrix[k][winner_idx] is Matchup.PREFERRED ]
        losers = [loser_idx] + [ k for k in range(n) if self._matrix[loser_idx][k] is Matchup.PREFERRED ]
        for w in winners:
            for l in losers:
                if self._matrix[w][l] is Matchup.UNKNOWN:
                    if w!=winner_idx or l!=loser_idx:
                        logger.debug("inferring %r beats %r", self._candidates[w], self._candidates[l])
                    self._matrix[w][l] = Matchup.PREFERRED
                    self._matrix[l][w] = Matchup.NOT_PREFERRED
                    self._knowledge += 1
        self._sorter.declare_winner(winner)
        self._active = None
        self._round += 1
        self._answer_known()

    def get_ranking(self) -> list[T]:
        """Returns a new list of the candidates, best first.

        :raises TournamentStateError: If the tournament is not complete yet.
        """
        if not self._sorter.is_complete:
            raise TournamentStateError("cannot form a full ranking with incomplete knowledge, answer all duels first")
        return [ self._candidates[i] for i in self._sorter.final_sorting() ]

    def to_dict(self) -> dict[str, Any]:
        """Returns the state of the tournament as a JSON-compatible dict, provided the candidates are.

        :raises TournamentStateError: If a duel is active, see :meth:`cancel_query`.
        """
        if self._active is not None:
            raise TournamentStateError("cannot save the tournament while a duel is active")
        return {
            'round': self._round,
            'n': len(self._candidates),
            'knowledge': self._knowledge,
            'candidates': list(self._candidates),
            'matrix': [ [ m.value for m in row ] for row in self._matrix ],
            'sorter': self._sorter.to_dict(),
        }

    @classmethod
    def from_dict(cls, data :dict[str, Any], rng :Optional[RandomSource] = None) -> 'Tournament[Any]':
        """Restores a tournament from the output of :meth:`to_dict`.

        :raises ValueError: If the data is inconsistent.
        :raises KeyError: If a field is missing.
        """
        self = cls.__new__(cls)
        self._setup(data['candidates'])
        n = len(self._candidates)
        if int(data['n']) != n:
            raise ValueError(f"expected {data['n']} candidates, got {n}")
        self._matrix = [ [ Matchup(m) for m in row ] for row in data['matrix'] ]
        if len(self._matrix) != n or any( len(row) != n for row in self._matrix ):
            raise ValueError("matchup matrix has the wrong size")
        known = 0
        for i in range(n):
            for j in range(i+1, n):
                if self._matrix[i][j].value != -self._matrix[j][i].value:
                    raise ValueError(f"matchup matrix is inconsistent at {i},{j}")
                if self._matrix[i][j] is not Matchup.UNKNOWN:
                    known += 1
        self._knowledge = int(data['knowledge'])
        if self._knowledge != known:
            raise ValueError(f"knowledge is {self._knowledge} but the matrix has {known} known pairs")
        self._round = int(data['round'])
        self._active = None
        self._sorter = MergeInsertionSorter.from_dict(data['sorter'], rng)
        if self._sorter.n != n:
            raise ValueError("sorter and tournament disagree on the number of candidates")
        return self

#: A user-supplied async function to compare two items.
#: The single argument is a tuple of the two items to be compared; they are never equal.
#: Must return 0 if the first item is ranked higher, or 1 if the second item is ranked higher.
Comparator = Callable[[tuple[T, T]], Awaitable[Literal[0, 1]]]

async def merge_insertion_sort(array :Sequence[T], comparator :Comparator, *, rng :Optional[RandomSource] = None) -> list[T]:
    """Merge-Insertion Sort (Ford-Johnson algorithm) with async comparison.

    Runs a :class:`Tournament`, so the same pair of items is never compared twice, and comparisons whose
    result follows from earlier ones are skipped.

    :param array: Array to sort. **Duplicate items are not allowed**, and items must be hashable.
    :param comparator: Async comparison function as described in :data:`Comparator`.
    :param rng: Random source for the order of comparisons.
    :return: A new list of the items in ascending order.
    """
    if len(array)<1:
        return []
    if len(array) != len(set(array)):
        raise ValueError('array may not contain duplicate items')
    tournament = Tournament(array, rng)
    while not tournament.is_complete:
        duel = tournament.next_query()
        # the larger item wins the duel
        tournament.declare_winner( DuelWinner.B if await comparator((duel.a, duel.b)) else DuelWinner.A )
    rv = tournament.get_ranking()
    rv.reverse()
    return rv
