"""
Tests for pairrank.tournament

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
import json
import random
import unittest
from itertools import permutations
from collections.abc import Sequence
from typing import Any, Optional
from pairrank.tournament import Tournament, Matchup
from pairrank.duel import Duel, DuelWinner
from pairrank.errors import TournamentStateError
from helpers import Adjacent, MAX_COMPARISONS

def _play(t :Tournament[Any], order :Sequence[Any], log :Optional[list[tuple[Any,Any]]] = None) -> int:
    """Answers all duels according to ``order``, which lists the candidates best first."""
    count = 0
    while not t.is_complete:
        duel = t.next_query()
        if log is not None:
            log.append((duel.a, duel.b))
        t.declare_winner( DuelWinner.A if order.index(duel.a) < order.index(duel.b) else DuelWinner.B )
        count += 1
    return count

class TestDuel(unittest.TestCase):

    def test_symmetric(self):
        for x,y in permutations('abcd', 2):
            self.assertEqual( Duel(x, y), Duel(y, x) )
            self.assertEqual( hash(Duel(x, y)), hash(Duel(y, x)) )
        self.assertNotEqual( Duel('a', 'b'), Duel('a', 'c') )
        self.assertNotEqual( Duel('a', 'b'), ('a', 'b') )
        self.assertEqual( len({ Duel(1, 2), Duel(2, 1), Duel(1, 3) }), 2 )

    def test_sides(self):
        d = Duel('x', 'y')
        self.assertEqual( d.winner(DuelWinner.A), 'x' )
        self.assertEqual( d.loser(DuelWinner.A), 'y' )
        self.assertEqual( d.winner(DuelWinner.B), 'y' )
        self.assertEqual( d.loser(DuelWinner.B), 'x' )

class TestTournament(unittest.TestCase):

    def test_scenario(self):
        t = Tournament(['X', 'Y', 'Z'], Adjacent())
        self.assertEqual( t.current_progress(), 0.0 )
        self.assertEqual( t.round, 1 )
        duel = t.next_query()
        self.assertEqual( (duel.a, duel.b), ('X', 'Y') )
        self.assertIs( t.active_duel, duel )
        t.declare_winner(DuelWinner.A)
        self.assertIsNone( t.active_duel )
        self.assertAlmostEqual( t.current_progress(), 1/3 )
        duel = t.next_query()
        self.assertEqual( (duel.a, duel.b), ('Z', 'Y') )
        t.declare_winner(DuelWinner.B)
        # X vs Z follows from the first two answers
        self.assertTrue( t.is_complete )
        self.assertEqual( t.round, 3 )
        self.assertEqual( t.get_ranking(), ['X', 'Y', 'Z'] )
        self.assertEqual( t.current_progress(), 1.0 )
        self.assertEqual( t.knowledge, t.total_knowledge )

    def test_transitive_closure(self):
        t = Tournament(['a', 'b', 'c', 'd', 'e'], random.Random(1))
        order = ['e', 'd', 'c', 'b', 'a']
        asked :set[Duel[str]] = set()
        while not t.is_complete:
            duel = t.next_query()
            self.assertNotIn( duel, asked )
            asked.add(duel)
            w = DuelWinner.A if order.index(duel.a) < order.index(duel.b) else DuelWinner.B
            t.declare_winner(w)
            # everything that follows from the answers so far is known
            for x in order:
                for y in order:
                    if x==y:
                        continue
                    if any( t.preference(x, z) is Matchup.PREFERRED and t.preference(z, y) is Matchup.PREFERRED for z in order ):
                        self.assertIs( t.preference(x, y), Matchup.PREFERRED )
                        self.assertIs( t.preference(y, x), Matchup.NOT_PREFERRED )
        self.assertEqual( t.get_ranking(), order )
        self.assertEqual( t.current_progress(), 1.0 )

    def test_inference_chain(self):
        # answering a>b and then b>c makes a>c known without asking
        t = Tournament(['a', 'b', 'c'], Adjacent())
        self.assertEqual( t.next_query(), Duel('a', 'b') )
        t.declare_winner(DuelWinner.A)
        self.assertIs( t.preference('a', 'c'), Matchup.UNKNOWN )
        duel = t.next_query()
        self.assertEqual( duel, Duel('c', 'b') )
        t.declare_winner( DuelWinner.A if duel.a=='b' else DuelWinner.B )
        self.assertIs( t.preference('a', 'c'), Matchup.PREFERRED )
        self.assertIs( t.preference('c', 'a'), Matchup.NOT_PREFERRED )
        self.assertTrue( t.is_complete )

    def test_one(self):
        t = Tournament(['only'])
        self.assertTrue( t.is_complete )
        self.assertEqual( t.current_progress(), 1.0 )
        self.assertEqual( t.get_ranking(), ['only'] )
        with self.assertRaises(TournamentStateError):
            t.next_query()

    def test_errors(self):
        with self.assertRaises(ValueError):
            Tournament([])
        with self.assertRaises(ValueError):
            Tournament(['a', 'b', 'a'])
        t = Tournament(['a', 'b', 'c'])
        with self.assertRaises(TournamentStateError):
            t.declare_winner(DuelWinner.A)
        with self.assertRaises(TournamentStateError):
            t.get_ranking()
        t.next_query()
        with self.assertRaises(TournamentStateError):
            t.next_query()
        with self.assertRaises(TournamentStateError):
            t.to_dict()
        t.cancel_query()
        _play(t, ['c', 'a', 'b'])
        with self.assertRaises(TournamentStateError):
            t.next_query()
        with self.assertRaises(TournamentStateError):
            t.declare_winner(DuelWinner.B)

    def test_cancel_query(self):
        t = Tournament(list('abcdef'), random.Random(5))
        t.next_query()
        t.declare_winner(DuelWinner.A)
        duel = t.next_query()
        t.cancel_query()
        self.assertIsNone( t.active_duel )
        self.assertEqual( t.round, 2 )
        again = t.next_query()
        self.assertEqual( (again.a, again.b), (duel.a, duel.b) )

    def test_max_comparisons_permutations(self):
        # 6! = 720, 7! = 5040
        for n in range(1, 8):
            names = [ chr(x+65) for x in range(n) ]
            for i,perm in enumerate(permutations(names)):
                t = Tournament(names, random.Random(i))
                count = _play(t, perm)
                self.assertEqual( t.get_ranking(), list(perm) )
                self.assertLessEqual( count, MAX_COMPARISONS[n] )
                self.assertEqual( t.round, count+1 )

    def test_max_comparisons_lengths(self):
        rng = random.Random(123)
        for n in range(8, len(MAX_COMPARISONS)):
            order = [ f"item{i}" for i in range(n) ]
            for _ in range(5):
                rng.shuffle(order)
                t = Tournament(sorted(order), rng)
                log :list[tuple[Any,Any]] = []
                count = _play(t, order, log)
                self.assertEqual( t.get_ranking(), order )
                self.assertLessEqual( count, MAX_COMPARISONS[n] )
                self.assertEqual( len(set( Duel(*ab) for ab in log )), count )
                self.assertEqual( t.current_progress(), 1.0 )

    def test_serialization(self):
        names = [ 'apple', 'kiwi', 'fig', 'plum', 'pear', 'lime', 'date', 'yuzu', 'sloe' ]
        order = [ 'fig', 'yuzu', 'apple', 'sloe', 'date', 'kiwi', 'plum', 'lime', 'pear' ]
        ref = Tournament(names, random.Random(7))
        ref_log :list[tuple[Any,Any]] = []
        total = _play(ref, order, ref_log)
        for prefix in range(total+1):
            t = Tournament(names, random.Random(7))
            log :list[tuple[Any,Any]] = []
            for _ in range(prefix):
                duel = t.next_query()
                log.append((duel.a, duel.b))
                t.declare_winner( DuelWinner.A if order.index(duel.a) < order.index(duel.b) else DuelWinner.B )
            t2 = Tournament.from_dict(json.loads(json.dumps(t.to_dict())))
            self.assertEqual( t2.round, t.round )
            self.assertEqual( t2.knowledge, t.knowledge )
            self.assertEqual( t2.candidates, t.candidates )
            _play(t2, order, log)
            self.assertEqual( log, ref_log )
            self.assertEqual( t2.get_ranking(), order )

    def test_from_dict_errors(self):
        t = Tournament(['a', 'b', 'c'], Adjacent())
        t.next_query()
        t.declare_winner(DuelWinner.A)
        data = t.to_dict()
        self.assertEqual( data['knowledge'], 1 )
        with self.assertRaises(ValueError):
            Tournament.from_dict({ **data, 'n': 4 })
        with self.assertRaises(ValueError):
            Tournament.from_dict({ **data, 'knowledge': 2 })
        with self.assertRaises(ValueError):
            Tournament.from_dict({ **data, 'candidates': ['a', 'b', 'b'] })
        with self.assertRaises(ValueError):
            Tournament.from_dict({ **data, 'matrix': [[0, 1, 0], [1, 0, 0], [0, 0, 0]] })
        with self.assertRaises(ValueError):
            Tournament.from_dict({ **data, 'matrix': [[0, 1], [-1, 0]] })
        with self.assertRaises(KeyError):
            Tournament.from_dict({ k: v for k,v in data.items() if k!='sorter' })
