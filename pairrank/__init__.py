"""
pairrank: Ranking by Merge-Insertion Sort
=========================================

The Ford-Johnson algorithm[1], also known as the merge-insertion sort[2,3] uses the minimum
number of possible comparisons for lists of 22 items or less, and at the time of writing has
the fewest comparisons known for lists of 46 items or less. It is therefore very well suited
for cases where comparisons are expensive, such as asking a person which of two things they prefer.

This package runs the algorithm as a state machine that asks for one comparison at a time
(:class:`~pairrank.sorter.MergeInsertionSorter`), so that a ranking can be interrupted, saved, and
resumed between any two questions. On top of it, a :class:`~pairrank.tournament.Tournament` keeps
track of everything that follows from the answers given so far by transitivity, and never asks a
question whose answer is already known.

>>> from pairrank import Tournament, DuelWinner
>>> tournament = Tournament(['Y', 'X', 'Z'])
>>> while not tournament.is_complete:
...     duel = tournament.next_query()
...     # we prefer whichever comes first in the alphabet
...     tournament.declare_winner(DuelWinner.A if duel.a < duel.b else DuelWinner.B)
>>> tournament.get_ranking()
['X', 'Y', 'Z']
>>> tournament.current_progress()
1.0

There is also an async API that works like any other sort function, except that the comparator
is a coroutine, e.g. one that asks the user:

>>> from pairrank import merge_insertion_sort
>>> # A Comparator must return 0 if the first item is larger, or 1 if the second item is larger.
>>> async def comparator(ab :tuple[str,str]):
...     choice = None
...     while choice not in ab:
...         choice = input(f"Please choose {ab[0]!r} or {ab[1]!r}: ")
...     return 0 if choice == ab[0] else 1
...
>>> # Sort five items in ascending order with a maximum of only seven comparisons:
>>> sorted = merge_insertion_sort('DABEC', comparator)
>>> # Since we can't `await` in the REPL, use asyncio to run the coroutine here:
>>> import asyncio
>>> asyncio.run(sorted)  # doctest: +SKIP
Please choose 'D' or 'A': D
...
['A', 'B', 'C', 'D', 'E']

And a command-line tool that reads candidates from a file, one per line, asks the duels on the
console, and writes the final ranking to a file::

    python -m pairrank --new -i candidates.txt -o ranking.txt

**References**

1. Ford, L. R., & Johnson, S. M. (1959). A Tournament Problem.
   The American Mathematical Monthly, 66(5), 387-389. https://doi.org/10.1080/00029890.1959.11989306
2. Knuth, D. E. (1998). The Art of Computer Programming: Volume 3: Sorting and Searching (2nd ed.).
   Addison-Wesley. https://cs.stanford.edu/~knuth/taocp.html#vol3
3. https://en.wikipedia.org/wiki/Merge-insertion_sort

API
---

.. autoclass:: pairrank.Tournament
    :members:

.. autoclass:: pairrank.MergeInsertionSorter
    :members:

.. autofunction:: pairrank.merge_insertion_sort

.. autofunction:: pairrank.merge_insertion_max_comparisons

.. autofunction:: pairrank.reverse_jacobsthal

Author, Copyright and License
-----------------------------

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
from .duel import T, Duel, DuelWinner
from .errors import TournamentStateError, StorageError, CandidateFileError, StateFileError, ExportError
from .sorter import (UNPAIRED, State, MergeInsertionSorter, make_pairs, reverse_jacobsthal,
                     merge_insertion_max_comparisons)
from .tournament import Matchup, Tournament, Comparator, merge_insertion_sort

__all__ = [
    'T', 'Duel', 'DuelWinner',
    'TournamentStateError', 'StorageError', 'CandidateFileError', 'StateFileError', 'ExportError',
    'UNPAIRED', 'State', 'MergeInsertionSorter', 'make_pairs', 'reverse_jacobsthal', 'merge_insertion_max_comparisons',
    'Matchup', 'Tournament', 'Comparator', 'merge_insertion_sort',
]
