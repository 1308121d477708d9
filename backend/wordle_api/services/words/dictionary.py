import os
import string
from typing import Optional, Tuple

from flask import current_app

WORD_LENGTH = 5
DEFAULT_WORD_LIST = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), 'data', 'words.txt')
EXTENSION_KEY = 'wordle_dictionary'

_ALPHABET = set(string.ascii_lowercase)


def load_dictionary(path: Optional[str] = None) -> Tuple[str, ...]:
    """Read a word list, one word per line.

    Blank lines and ``#`` comments are skipped. Words are lowercased and
    de-duplicated keeping their first position. Any word that is not
    exactly ``WORD_LENGTH`` ascii letters fails the whole load.
    """
    path = path or DEFAULT_WORD_LIST
    words = []
    seen = set()
    with open(path, 'r', encoding='utf-8') as fh:
        for lineno, raw in enumerate(fh, start=1):
            word = raw.strip().lower()
            if not word or word.startswith('#'):
                continue
            if len(word) != WORD_LENGTH or not set(word) <= _ALPHABET:
                raise ValueError(f"{path}:{lineno}: '{word}' is not a {WORD_LENGTH}-letter word")
            if word in seen:
                continue
            seen.add(word)
            words.append(word)
    if not words:
        raise ValueError(f"{path}: word list is empty")
    return tuple(words)


def init_dictionary(app) -> Tuple[str, ...]:
    path = app.config.get('WORD_LIST_PATH')
    words = load_dictionary(path)
    app.extensions[EXTENSION_KEY] = words
    app.logger.info(f"[dictionary] loaded {len(words)} words")
    if not path and not app.testing:
        app.logger.warning(
            "[dictionary] WORD_LIST_PATH is unset; using the bundled sample list. "
            "Remaining counts will not match the ones clients compute."
        )
    return words


def get_dictionary(app=None) -> Tuple[str, ...]:
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def is_word(value) -> bool:
    return isinstance(value, str) and len(value) == WORD_LENGTH and set(value) <= _ALPHABET
