"""
Online Merge-Insertion Sort
===========================

A turn-based version of the Ford-Johnson algorithm: instead of calling a comparator, the sorter
exposes the one comparison it needs next (:meth:`MergeInsertionSorter.current_comparison`) and
advances when told who won it (:meth:`MergeInsertionSorter.declare_winner`). The recursion of the
classical algorithm is replaced by an explicit stack of layers, so a sort can be suspended and
saved between any two comparisons.

The items being sorted are the indices ``0 .. n-1``, the sorted sequence is "best first": the
winner of a duel is ranked before the loser.

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
import random
import logging
from collections import deque
from collections.abc import Generator, Sequence
from typing import Optional, Protocol, Any
from math import exp, floor, ceil, log2
from enum import Enum
from .duel import Duel, DuelWinner
from .errors import TournamentStateError

logger = logging.getLogger(__name__)

#: Partner of the leftover item of a layer with an odd number of items.
UNPAIRED = -1

class RandomSource(Protocol):
    """The parts of :class:`random.Random` the sorter uses. Inject a seeded instance for a reproducible duel order."""
    def random(self) -> float: ...
    def shuffle(self, x :list[Any]) -> None: ...

# Helper that generates the zero-based upper bounds of the blocks for reverse_jacobsthal.
def _block_bounds() -> Generator[int, None, None]:
    # <https://oeis.org/A014113>: the group sizes are a(0) = 0 and if n>=1, a(n) = 2^n - a(n-1),
    # i.e. 2, 2, 6, 10, 22, ... Their running sums starting from zero are 0, 2, 4, 10, 20, 42, ...,
    # which are the Jacobsthal numbers <https://oeis.org/A001045> 1, 3, 5, 11, 21, 43, ... minus one.
    bound :int = 0
    yield bound
    prev :int = 0
    i :int = 1
    while True:
        cur :int = 2**i - prev
        bound += cur
        yield bound
        prev = cur
        i += 1

def reverse_jacobsthal(count :int) -> list[int]:
    """Returns the order in which to insert the pending items ``b₁ .. bₙ`` (as zero-based positions) of one layer.

    The positions are grouped into blocks ending at the Jacobsthal numbers, and within each block
    they are listed from the highest position down, so the result starts ``0, 2, 1, 4, 3, 10, 9, 8, 7, 6, 5, 20, ...``.
    The last block is cut short at ``count-1``.

    :param count: The number of items to insert.
    :return: A permutation of ``range(count)``.
    """
    rv :list[int] = []
    prev :int = -1
    for bound in _block_bounds():
        if prev >= count-1:
            break
        rv.extend(range(min(bound, count-1), prev, -1))
        prev = bound
    return rv

# Draws the offset of the partner of the first remaining item when pairing a layer.
# Knuth's method for a Poisson-distributed number, except that the final draw is counted too,
# so the result is always at least one (the neighbor).
def _pairing_offset(rng :RandomSource, lam :float = 1.0) -> int:
    limit = exp(-lam)
    p :float = 1.0
    k :int = 0
    while True:
        k += 1
        p *= rng.random()
        if p <= limit:
            return k

def make_pairs(layer :Sequence[int], rng :RandomSource) -> tuple[dict[int, int], deque[Duel[int]]]:
    """Pairs up the items of one layer.

    :param layer: The distinct items to pair.
    :param rng: The random source for the choice of partners and the order of the duels.
    :return: A pairing map, in which each item maps to its partner and vice versa (a leftover item is
        paired with :data:`UNPAIRED`), and a queue with one :class:`Duel` for each pair. The leftover
        item does not get a duel.
    """
    pool = list(layer)
    pairing :dict[int, int] = {}
    while len(pool) > 1:
        first = pool[0]
        second = pool.pop( min(_pairing_offset(rng), len(pool)-1) )
        pool.pop(0)
        pairing[first] = second
        pairing[second] = first
    if pool:
        pairing[pool[0]] = UNPAIRED
        pairing[UNPAIRED] = pool[0]
    keys = [ k for k,v in pairing.items() if k!=UNPAIRED and v!=UNPAIRED ]
    rng.shuffle(keys)
    duels :deque[Duel[int]] = deque()
    seen :set[int] = set()
    for k in keys:
        if k not in seen:
            duels.append(Duel(k, pairing[k]))
            seen.update((k, pairing[k]))
    return pairing, duels

class State(Enum):
    """States of a :class:`MergeInsertionSorter`, which only ever move forward in this order."""
    SPLITTING = 'splitting'
    MERGING = 'merging'
    COMPLETED = 'completed'

def _pairing_to_list(pairing :dict[int, int]) -> list[list[int]]:
    return [ [k, v] for k,v in pairing.items() ]

def _pairing_from_list(items :Sequence[Sequence[int]]) -> dict[int, int]:
    return { int(k): int(v) for k,v in items }

class MergeInsertionSorter:
    """Online Merge-Insertion sort of the indices ``0 .. n-1``.

    While *splitting*, the items of the current layer are paired up, and each duel sends its winner on to
    the next, half as large, layer, while the loser is set aside. What was set aside and how the layer was
    paired is pushed on the layer stack. Once a layer has only one item left, the sorter starts *merging*:
    going back up the layer stack, it inserts the set-aside items of each layer into the sorted sequence
    with binary search, in the order given by :func:`reverse_jacobsthal`.

    An example with seven items, where ``a`` is best and ``g`` is worst::

        splitting  layer 1:  duels (g b) (e f) (a c)   to sort: b e a   set aside: g f c d (d unpaired)
                   layer 2:  duels (b e)               to sort: b       set aside: e a     (a unpaired)
        merging    layer 2:  e is known to be after b, then a is searched for in b e
                             sorted: a b e
                   layer 1:  f is known to be after e, c and g are searched for after their partners, d everywhere
                             sorted: a b c d e f g

    :param n: The number of items to sort, at least one.
    :param rng: Random source for pairing, a new :class:`random.Random` if not given.
    """

    def __init__(self, n :int, rng :Optional[RandomSource] = None):
        if n<1:
            raise ValueError("must sort one or more items")
        self._n = n
        self._rng :RandomSource = random.Random() if rng is None else rng
        self._state = State.SPLITTING
        # While splitting: the winners of the current layer. While merging: the sorted sequence.
        self._sorted :list[int] = []
        # Items of the current layer that are not (yet) part of the sorted sequence.
        self._set_aside :list[int] = []
        # Frames of (set-aside items, pairing map) of the layers above the current one.
        self._layers :list[tuple[list[int], dict[int, int]]] = []
        self._pairing :dict[int, int] = {}
        self._duels :deque[Duel[int]] = deque()
        self._queue :deque[int] = deque()
        # Binary search cursor: the item being inserted and the range of sorted positions it is compared with.
        self._target :Optional[int] = None
        self._lower :int = 0
        self._upper :int = 0
        self._middle :int = 0
        self._duel :Optional[Duel[int]] = None
        self._final :Optional[list[int]] = None
        if n==1:
            self._sorted.append(0)
            self._complete()
        else:
            self._pair_layer(list(range(n)))
            self._duel = self._duels.popleft()

    @property
    def n(self) -> int:
        return self._n

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is State.COMPLETED

    def current_comparison(self) -> Duel[int]:
        """Returns the duel that needs to be answered next.

        :raises TournamentStateError: If sorting is complete.
        """
        if self._state is State.COMPLETED or self._duel is None:
            raise TournamentStateError("there are no more comparisons to be made")
        return self._duel

    def declare_winner(self, winner :DuelWinner) -> None:
        """Answers the duel returned by :meth:`current_comparison` and advances to the next one.

        :param winner: Which side of the duel is ranked higher.
        :raises TournamentStateError: If sorting is complete.
        """
        if self._state is State.SPLITTING:
            self._split(winner)
        elif self._state is State.MERGING:
            self._insert(winner)
        else:
            raise TournamentStateError("sorting is finished, there are no winners to declare")

    def final_sorting(self) -> list[int]:
        """Returns a copy of the sorted indices, best first.

        :raises TournamentStateError: If sorting is not yet complete, see :attr:`is_complete`.
        """
        if self._state is not State.COMPLETED or self._final is None:
            raise TournamentStateError("not finished sorting, check is_complete first")
        return list(self._final)

    def _pair_layer(self, to_sort :Sequence[int]) -> None:
        self._pairing, self._duels = make_pairs(to_sort, self._rng)
        self._sorted = []
        self._set_aside = [ self._pairing[UNPAIRED] ] if UNPAIRED in self._pairing else []

    def _split(self, winner :DuelWinner) -> None:
        assert self._duel is not None
        self._sorted.append(self._duel.winner(winner))
        self._set_aside.append(self._duel.loser(winner))
        if self._duels:
            self._duel = self._duels.popleft()
        elif len(self._sorted) > 1:
            # Move down a layer: the winners of this layer get paired up amongst themselves.
            self._layers.append((self._set_aside, self._pairing))
            self._pair_layer(self._sorted)
            self._duel = self._duels.popleft()
            logger.debug("split into layer %d with %d duels", len(self._layers)+1, len(self._duels)+1)
        else:
            self._state = State.MERGING
            logger.debug("splitting finished after %d layers, merging", len(self._layers)+1)
            self._schedule_insertions()
            self._advance()

    def _schedule_insertions(self) -> None:
        # The sorted sequence holds the winners of the current layer. Their partners are the pending items,
        # labeled b₁ .. bₖ starting from the *end* of the sorted sequence (its worst item), because that is the
        # order in which the ranges each of them has to be searched in grow. The leftover item, if any, has no
        # partner to limit its search and is treated as the last pending item bₖ₊₁.
        pending = [ self._pairing[item] for item in reversed(self._sorted) ]
        if UNPAIRED in self._pairing:
            pending.append(self._pairing[UNPAIRED])
        assert sorted(pending) == sorted(self._set_aside)
        self._queue = deque( pending[i] for i in reverse_jacobsthal(len(pending)) )

    def _advance(self) -> None:
        # Start the next insertion, moving up the layer stack when the queue is empty. Insertions that don't
        # need a comparison (when the partner is the last item of the sorted sequence) are done right away.
        while True:
            if not self._queue:
                if not self._layers:
                    self._complete()
                    return
                self._set_aside, self._pairing = self._layers.pop()
                self._schedule_insertions()
                logger.debug("merging layer %d, %d items to insert", len(self._layers)+1, len(self._queue))
            target = self._queue.popleft()
            self._set_aside.remove(target)
            partner = self._pairing[target]
            self._target = target
            # The partner won against the target, so the target can only be ranked after it.
            self._lower = 0 if partner==UNPAIRED else self._sorted.index(partner) + 1
            self._upper = len(self._sorted) - 1
            if self._lower <= self._upper:
                self._probe()
                return
            self._sorted.insert(self._lower, target)

    def _probe(self) -> None:
        assert self._target is not None
        self._middle = (self._lower + self._upper + 1) // 2
        self._duel = Duel(self._target, self._sorted[self._middle])

    def _insert(self, winner :DuelWinner) -> None:
        assert self._target is not None
        if winner is DuelWinner.A:
            # target is ranked before the item at middle
            self._upper = self._middle - 1
        else:
            self._lower = self._middle + 1
        if self._lower <= self._upper:
            self._probe()
            return
        self._sorted.insert(self._lower, self._target)
        self._target = None
        self._advance()

    def _complete(self) -> None:
        self._state = State.COMPLETED
        self._duel = None
        self._target = None
        self._final = self._sorted
        logger.debug("sorting of %d items complete", self._n)

    def to_dict(self) -> dict[str, Any]:
        """Returns the complete state of the sorter as a JSON-compatible dict, see :meth:`from_dict`.

        If the random source is a :class:`random.Random`, its state is included, so that a restored
        sorter continues with the same duels."""
        return {
            'n': self._n,
            'state': self._state.value,
            'sorted': list(self._sorted),
            'set_aside': list(self._set_aside),
            'layers': [ { 'set_aside': list(s), 'pairing': _pairing_to_list(p) } for s,p in self._layers ],
            'pairing': _pairing_to_list(self._pairing),
            'duels': [ [d.a, d.b] for d in self._duels ],
            'queue': list(self._queue),
            'cursor': None if self._target is None else {
                'target': self._target, 'lower': self._lower, 'upper': self._upper, 'middle': self._middle },
            'duel': None if self._duel is None else [self._duel.a, self._duel.b],
            'final': None if self._final is None else list(self._final),
            'rng': self._rng.getstate() if isinstance(self._rng, random.Random) else None,
        }

    @classmethod
    def from_dict(cls, data :dict[str, Any], rng :Optional[RandomSource] = None) -> 'MergeInsertionSorter':
        """Restores a sorter from the output of :meth:`to_dict`.

        :param data: The saved state.
        :param rng: Random source for the rest of the sort. If not given, a new :class:`random.Random` is
            created, and seeded with the saved state if there is one.
        :raises ValueError: If the data is inconsistent.
        :raises KeyError: If a field is missing.
        """
        self = cls.__new__(cls)
        self._n = int(data['n'])
        if self._n<1:
            raise ValueError("must sort one or more items")
        self._state = State(data['state'])
        self._sorted = [ int(i) for i in data['sorted'] ]
        self._set_aside = [ int(i) for i in data['set_aside'] ]
        self._layers = [ ( [ int(i) for i in f['set_aside'] ], _pairing_from_list(f['pairing']) ) for f in data['layers'] ]
        self._pairing = _pairing_from_list(data['pairing'])
        self._duels = deque( Duel(int(a), int(b)) for a,b in data['duels'] )
        self._queue = deque( int(i) for i in data['queue'] )
        cursor = data['cursor']
        if cursor is None:
            self._target, self._lower, self._upper, self._middle = None, 0, 0, 0
        else:
            self._target = int(cursor['target'])
            self._lower, self._upper, self._middle = int(cursor['lower']), int(cursor['upper']), int(cursor['middle'])
        self._duel = None if data['duel'] is None else Duel(int(data['duel'][0]), int(data['duel'][1]))
        self._final = None if data['final'] is None else [ int(i) for i in data['final'] ]
        if rng is None:
            self._rng = random.Random()
            if data.get('rng') is not None:
                version, internal, gauss = data['rng']
                self._rng.setstate((version, tuple(internal), gauss))
        else:
            self._rng = rng
        self._check()
        return self

    def _check(self) -> None:
        # Consistency of restored state, raises ValueError.
        if ( self._state is State.COMPLETED ) != ( self._final is not None and self._duel is None ):
            raise ValueError(f"inconsistent state {self._state.value!r}")
        if self._final is not None:
            if sorted(self._final) != list(range(self._n)):
                raise ValueError("final sorting is not a permutation of the items")
            return
        # Each layer's items are the ones its pairing covers, and the next layer holds the ones not set aside.
        expect = set(range(self._n))
        for set_aside, pairing in self._layers + [(self._set_aside, self._pairing)]:
            items = { k for k in pairing if k!=UNPAIRED }
            if items != expect or any( k==v or pairing.get(v) != k for k,v in pairing.items() ):
                raise ValueError("layer pairing doesn't match the items of the layer")
            if not set(set_aside) <= items:
                raise ValueError("set-aside item is not part of its layer")
            expect = items - set(set_aside)
        if self._duel is None:
            raise ValueError("no current comparison")
        if self._state is State.SPLITTING:
            if self._target is not None or self._queue:
                raise ValueError("splitting with pending insertions")
            duels = [self._duel, *self._duels]
            if any( self._pairing.get(d.a) != d.b for d in duels ):
                raise ValueError("duel between items that are not paired")
            in_play = self._sorted + self._set_aside + [ i for d in duels for i in (d.a, d.b) ]
        else:
            if self._target is None or not 0 <= self._lower <= self._middle <= self._upper < len(self._sorted):
                raise ValueError("merging without a valid insertion cursor")
            if self._duel.a != self._target or self._duel.b != self._sorted[self._middle]:
                raise ValueError("current comparison doesn't match the insertion cursor")
            if sorted(self._queue) != sorted(self._set_aside):
                raise ValueError("insertion queue doesn't match the set-aside items")
            in_play = self._sorted + self._set_aside + [self._target]
        if len(in_play) != len(set(in_play)) or set(in_play) != { k for k in self._pairing if k!=UNPAIRED }:
            raise ValueError("items of the current layer are missing or duplicated")

def merge_insertion_max_comparisons(n :int) -> int:
    """Returns the maximum number of comparisons that merge-insertion sort needs depending on the input length.

    :param n: The number of items in the list to be sorted.
    :return: The expected maximum number of comparisons.
    """
    if n<0:
        raise ValueError("must specify zero or more items")
    # Formula from https://en.wikipedia.org/wiki/Merge-insertion_sort (the sum version should work too)
    return n*ceil(log2(3*n/4)) - floor((2**floor(log2(6*n)))/3) + floor(log2(6*n)/2) if n else 0
