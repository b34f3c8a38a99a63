"""
Candidate import, ranking export and saving of tournaments

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
import os
import json
import logging
from collections import Counter
from collections.abc import Sequence
from contextlib import suppress
from datetime import datetime
from pathlib import Path
from typing import NamedTuple, Optional, Union, Any
from .tournament import Tournament
from .errors import CandidateFileError, StateFileError, ExportError

logger = logging.getLogger(__name__)

#: Version of the format written by :func:`save_state`.
STATE_FORMAT = 1

PathType = Union[str, 'os.PathLike[str]']

_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

class SavedTournament(NamedTuple):
    tournament :Tournament[str]
    #: Where the final ranking is to be written, if known.
    output :Optional[str]

def import_candidates(path :PathType) -> list[str]:
    """Reads candidate names from a text file, one per line.

    Whitespace around the names is removed and blank lines are skipped.

    :raises CandidateFileError: If the file can't be read, has no candidates, or has duplicates.
    """
    try:
        with open(path, encoding='UTF-8') as fh:
            names = [ line.strip() for line in fh ]
    except (OSError, UnicodeDecodeError) as ex:
        raise CandidateFileError(f"cannot read candidates from {os.fspath(path)!r}: {ex}") from ex
    names = [ n for n in names if n ]
    if not names:
        raise CandidateFileError(f"no candidates found in {os.fspath(path)!r}")
    dupes = [ n for n,c in Counter(names).items() if c>1 ]
    if dupes:
        raise CandidateFileError(f"duplicate candidates in {os.fspath(path)!r}: {', '.join(dupes)}")
    logger.info("imported %d candidates from %s", len(names), os.fspath(path))
    return names

def format_ranking(ranking :Sequence[str], now :Optional[datetime] = None) -> str:
    """Formats a final ranking as a title line plus one numbered line per candidate, starting at 1."""
    if now is None:
        now = datetime.now()
    # e.g. "Oct 19, 2026 @ 14:05", independent of the locale
    stamp = f"{_MONTHS[now.month-1]} {now.day}, {now.year} @ {now:%H:%M}"
    lines = [ f"Top {len(ranking)} Rankings (Completed on {stamp}):" ]
    lines.extend( f"{i}. {name}" for i,name in enumerate(ranking, start=1) )
    return '\n'.join(lines) + '\n'

def export_ranking(ranking :Sequence[str], path :PathType, now :Optional[datetime] = None) -> None:
    """Writes the final ranking to a text file, see :func:`format_ranking`.

    :raises ExportError: If the file can't be written.
    """
    try:
        with open(path, 'w', encoding='UTF-8') as fh:
            fh.write(format_ranking(ranking, now))
    except OSError as ex:
        raise ExportError(f"cannot write ranking to {os.fspath(path)!r}: {ex}") from ex
    logger.info("wrote ranking of %d candidates to %s", len(ranking), os.fspath(path))

def save_state(tournament :Tournament[str], path :PathType, output :Optional[PathType] = None) -> None:
    """Saves a tournament to a JSON file, so it can be resumed with :func:`load_state`.

    The file is replaced atomically, a failed save leaves an earlier one intact.

    :param output: Where the final ranking is to be written, stored along with the tournament.
    :raises StateFileError: If the file can't be written.
    :raises TournamentStateError: If the tournament has an active duel.
    """
    data :dict[str, Any] = {
        'format': STATE_FORMAT,
        'output': None if output is None else os.fspath(output),
        'tournament': tournament.to_dict(),
    }
    target = Path(path)
    temp = target.with_name(target.name + '.tmp')
    try:
        with open(temp, 'w', encoding='UTF-8') as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
        os.replace(temp, target)
    except OSError as ex:
        with suppress(OSError):
            temp.unlink()
        raise StateFileError(f"cannot save tournament to {os.fspath(path)!r}: {ex}") from ex
    logger.info("saved tournament in round %d to %s", tournament.round, os.fspath(path))

def load_state(path :PathType) -> SavedTournament:
    """Loads a tournament saved by :func:`save_state`.

    :raises StateFileError: If the file can't be read or its contents are not a valid saved tournament.
    """
    try:
        with open(path, encoding='UTF-8') as fh:
            data = json.load(fh)
    except (OSError, ValueError) as ex:  # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        raise StateFileError(f"cannot load tournament from {os.fspath(path)!r}: {ex}") from ex
    if not isinstance(data, dict) or data.get('format') != STATE_FORMAT:
        raise StateFileError(f"{os.fspath(path)!r} is not a saved tournament in a supported format")
    try:
        tournament = Tournament.from_dict(data['tournament'])
        output = data.get('output')
        if output is not None and not isinstance(output, str):
            raise TypeError(f"output must be a string, not {type(output).__name__}")
    except (KeyError, IndexError, TypeError, ValueError) as ex:
        raise StateFileError(f"saved tournament in {os.fspath(path)!r} is corrupt: {ex!r}") from ex
    logger.info("loaded tournament in round %d from %s", tournament.round, os.fspath(path))
    return SavedTournament(tournament, output)
