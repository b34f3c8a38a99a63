"""
Exceptions raised by :mod:`pairrank`

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

class TournamentStateError(RuntimeError):
    """An operation was called in a state that does not allow it, e.g. asking for the next
    comparison after sorting has completed, or declaring a winner when no duel is active."""

class StorageError(OSError):
    """Reading or writing one of the files a tournament works with failed.
    The original exception, if any, is available as ``__cause__``."""

class CandidateFileError(StorageError):
    """The candidate list could not be read, or contained no candidates."""

class StateFileError(StorageError):
    """A saved tournament could not be written, read or decoded."""

class ExportError(StorageError):
    """The final ranking could not be written."""
