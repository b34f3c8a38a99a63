"""
Console user interface

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
from collections.abc import Sequence
from typing import Optional, TextIO
from enum import Enum
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

class Action(Enum):
    """What the user chose to do when asked a duel."""
    CHOSE_A = 1
    CHOSE_B = 2
    REQUEST_HELP = 3
    SAVE_AND_EXIT = 4

_ACTIONS = {
    '1': Action.CHOSE_A,
    '2': Action.CHOSE_B,
    '/help': Action.REQUEST_HELP,
    '/save': Action.SAVE_AND_EXIT,
}

_INTRO_NEW = ('1', 'new', 'start new ranking')
_INTRO_LOAD = ('2', 'load', 'load previous', 'load previous ranking')

HELP = """Each round you have 4 choices:
  [bold]1[/bold]        choose candidate 1 as your preference in the duel
  [bold]2[/bold]        choose candidate 2 as your preference in the duel
  [bold]/help[/bold]    show this help
  [bold]/save[/bold]    save the tournament and exit; load it next time to continue where you left off"""

def parse_action(response :str) -> Optional[Action]:
    """Parses one line of user input into an :class:`Action`, or ``None`` if it isn't one."""
    return _ACTIONS.get(response.strip().lower())

class ConsoleView:
    """Asks the user questions on a :class:`rich.console.Console`.

    :param console: Where to print, a new console if not given.
    :param stream: Where to read answers from, instead of standard input.
    """

    def __init__(self, console :Optional[Console] = None, stream :Optional[TextIO] = None):
        self.console = Console(highlight=False) if console is None else console
        self._stream = stream

    def _read(self, prompt :str = "> ") -> str:
        line = self.console.input(prompt, stream=self._stream)
        if self._stream is not None and not line:
            raise EOFError("no more input")
        return line.strip()

    def intro(self) -> bool:
        """Asks whether to start a new ranking or load a saved one.

        :return: True for a new ranking.
        """
        self.console.print("Welcome to the online ranker! Start a new ranking or load your previous ranking.")
        self.console.print("  1. Start new ranking\n  2. Load previous ranking")
        while True:
            response = self._read().lower()
            if response in _INTRO_NEW:
                return True
            if response in _INTRO_LOAD:
                return False

    def ask_paths(self) -> tuple[str, str]:
        """Asks for the file to read candidates from and the file to write the final ranking to."""
        self.console.print("\nBefore starting, we need some input and output files.")
        infile = ''
        while not infile:
            infile = self._read("File to read candidate names from: ")
        outfile = ''
        while not outfile:
            outfile = self._read("File to write the final ranking to: ")
        return infile, outfile

    def ask_output(self) -> Optional[str]:
        """Asks for another file to write the final ranking to, ``None`` if the user leaves it empty."""
        return self._read("File to write the final ranking to (empty to skip): ") or None

    def show_new(self, count :int) -> None:
        self.console.print(f"\nStarting a new ranking of {count} candidates. You will be asked a sequence of "
            "preference questions until a full ranking can be made.\n"
            "At any point, you can ask for help with [bold]/help[/bold] or save and exit with [bold]/save[/bold].")

    def show_loaded(self, round :int) -> None:
        self.console.print(f"\nLoaded previous ranking, continuing with round {round}.")

    def choose_option(self, option_a :str, option_b :str, round :int, progress :float) -> Action:
        """Asks the user which of two candidates they prefer.

        :param round: Shown to the user.
        :param progress: Fraction of known pairs, shown to the user.
        """
        self.console.print(f"\n[bold]Round {round}[/bold] (progress: {progress:.4%})")
        self.console.print(f"  1. {escape(option_a)}")
        self.console.print(f"  2. {escape(option_b)}")
        while True:
            action = parse_action(self._read())
            if action is not None:
                return action
            self.console.print("Please answer [bold]1[/bold] or [bold]2[/bold], or [bold]/help[/bold].")

    def show_help(self) -> None:
        self.console.print(Panel(HELP, title="Help", expand=False))

    def show_saved(self, path :str) -> None:
        self.console.print(f"\nRanking is saved to {escape(path)}. Select the load option next time to pick up where you left off.")

    def show_error(self, message :str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def show_ranking(self, ranking :Sequence[str]) -> None:
        table = Table(title="Final Rankings", box=box.SIMPLE)
        table.add_column("#", justify="right")
        table.add_column("Candidate")
        for i,name in enumerate(ranking, start=1):
            table.add_row(str(i), escape(name))
        self.console.print(table)

    def show_exported(self, path :str) -> None:
        self.console.print(f"Final ranking written to {escape(path)}")
