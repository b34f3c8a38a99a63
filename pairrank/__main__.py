"""
Command-line interface: rank the candidates in a file by answering duels

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
import sys
import random
import logging
import argparse
from collections.abc import Sequence
from typing import Optional
from .console import ConsoleView, Action
from .duel import DuelWinner
from .sorter import RandomSource
from .tournament import Tournament
from .storage import import_candidates, export_ranking, save_state, load_state
from .errors import CandidateFileError, StateFileError, ExportError
from .logging_helper import get_logger

logger = logging.getLogger(__name__)

#: Default file to save a tournament to and load it from.
DEFAULT_STATE_FILE = 'tournament.json'

def _start_new(view :ConsoleView, input_path :Optional[str], output_path :Optional[str],
               rng :Optional[RandomSource]) -> tuple[Tournament[str], Optional[str]]:
    # Nothing is created until the candidates were read successfully.
    output = output_path
    while True:
        if input_path is None:
            input_path, asked_output = view.ask_paths()
            output = asked_output if output_path is None else output_path
        try:
            names = import_candidates(input_path)
        except CandidateFileError as ex:
            view.show_error(str(ex))
            input_path = None
            continue
        return Tournament(names, rng), output

def run_tournament(view :ConsoleView, state_path :str = DEFAULT_STATE_FILE, *, new :Optional[bool] = None,
                   input_path :Optional[str] = None, output_path :Optional[str] = None,
                   rng :Optional[RandomSource] = None) -> int:
    """Runs a tournament from start (or a saved state) to its final ranking, or until the user saves.

    If the saved tournament can't be loaded, the user is asked again whether to start a new one or to retry.
    If the final ranking can't be written, the user is asked for another file.

    :param view: The user interface.
    :param state_path: Where to save the tournament to and load it from.
    :param new: Whether to start a new tournament or to load the saved one; ask the user if ``None``.
    :param input_path: Candidate file for a new tournament; ask the user if ``None``.
    :param output_path: Where to write the final ranking; for a loaded tournament, overrides the saved one.
    :return: The exit code.
    """
    tournament :Optional[Tournament[str]] = None
    while tournament is None:
        if new is None:
            new = view.intro()
        if new:
            tournament, output = _start_new(view, input_path, output_path, rng)
            view.show_new(len(tournament.candidates))
        else:
            try:
                saved = load_state(state_path)
            except StateFileError as ex:
                view.show_error(str(ex))
                new = None
                continue
            tournament = saved.tournament
            output = saved.output if output_path is None else output_path
            view.show_loaded(tournament.round)

    while not tournament.is_complete:
        duel = tournament.active_duel or tournament.next_query()
        action = view.choose_option(duel.a, duel.b, tournament.round, tournament.current_progress())
        if action is Action.CHOSE_A:
            tournament.declare_winner(DuelWinner.A)
        elif action is Action.CHOSE_B:
            tournament.declare_winner(DuelWinner.B)
        elif action is Action.REQUEST_HELP:
            view.show_help()
        else:
            tournament.cancel_query()
            try:
                save_state(tournament, state_path, output)
            except StateFileError as ex:
                view.show_error(str(ex))
                continue
            view.show_saved(state_path)
            return 0

    logger.info("tournament complete in round %d, %d of %d pairs asked or inferred",
                tournament.round, tournament.knowledge, tournament.total_knowledge)
    ranking = tournament.get_ranking()
    view.show_ranking(ranking)
    while output is not None:
        try:
            export_ranking(ranking, output)
        except ExportError as ex:
            view.show_error(str(ex))
            output = view.ask_output()
            continue
        view.show_exported(output)
        break
    return 0


def main(argv :Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='pairrank', description="Rank a list of candidates by answering as few duels as possible.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--new', dest='new', action='store_true', help="start a new ranking")
    group.add_argument('--load', dest='new', action='store_false', help="continue the saved ranking")
    parser.set_defaults(new=None)
    parser.add_argument('-i', '--input', help="file with one candidate name per line")
    parser.add_argument('-o', '--output', help="file to write the final ranking to")
    parser.add_argument('-s', '--state', default=DEFAULT_STATE_FILE, help="file to save the ranking to (default: %(default)s)")
    parser.add_argument('--seed', type=int, help="seed for a reproducible order of duels")
    parser.add_argument('-v', '--verbose', action='count', default=0, help="more log output (repeatable)")
    parser.add_argument('--log-file', help="also write the log to this file")
    args = parser.parse_args(argv)

    try:
        get_logger(max(logging.DEBUG, logging.WARNING - 10*args.verbose), args.log_file)
    except OSError as ex:
        parser.error(f"cannot open log file: {ex}")
    view = ConsoleView()
    rng = None if args.seed is None else random.Random(args.seed)
    try:
        return run_tournament(view, args.state, new=args.new, input_path=args.input,
                              output_path=args.output, rng=rng)
    except (EOFError, KeyboardInterrupt):
        view.console.print("\nAborted, the ranking was not saved.")
        return 1

if __name__ == '__main__':
    sys.exit(main())
