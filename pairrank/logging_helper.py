"""
logging_helper.py – one-call logging setup: stderr plus an optional file.

Usage::

    from pairrank.logging_helper import get_logger
    log = get_logger(logging.DEBUG, "pairrank.log")
    log.info("It works")

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
import sys
import logging
from typing import Optional, Union

DEF_FMT  = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEF_DATE = "%Y-%m-%d %H:%M:%S"

def get_logger(level :int = logging.WARNING, log_file :Union[str, 'os.PathLike[str]', None] = None,
               name :str = 'pairrank') -> logging.Logger:
    """Configures (once) and returns the logger for the package.

    Messages go to stderr, so they don't get mixed up with the questions on stdout,
    and if ``log_file`` is given, also to that file.
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # already initialised
        return logger
    logger.setLevel(logging.DEBUG if log_file is not None else level)

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    ch.setLevel(level)
    logger.addHandler(ch)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(DEF_FMT, DEF_DATE))
        fh.setLevel(min(level, logging.INFO))
        logger.addHandler(fh)

    logger.propagate = False
    return logger
