from collections import Counter
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .feedback import CORRECT, PRESENT

HistoryEntry = Tuple[str, Sequence[str]]


class _EntryConstraint:
    """Constraints one (guess, states) pair places on the hidden word."""

    __slots__ = ('letters', 'min_counts', 'has_absent', 'fixed', 'excluded')

    def __init__(self, guess: str, states: Sequence[str]):
        self.min_counts: Dict[str, int] = {}
        self.has_absent: Set[str] = set()
        self.fixed: List[Tuple[int, str]] = []
        self.excluded: List[Tuple[int, str]] = []
        for i, (letter, state) in enumerate(zip(guess, states)):
            if state == CORRECT or state == PRESENT:
                self.min_counts[letter] = self.min_counts.get(letter, 0) + 1
            else:
                self.has_absent.add(letter)
            if state == CORRECT:
                self.fixed.append((i, letter))
            elif state == PRESENT:
                self.excluded.append((i, letter))
        self.letters = set(guess)

    def allows(self, word: str, counts: Counter) -> bool:
        for letter in self.letters:
            minimum = self.min_counts.get(letter, 0)
            count = counts[letter]
            if count < minimum:
                return False
            if letter in self.has_absent and count > minimum:
                return False
        for i, letter in self.fixed:
            if word[i] != letter:
                return False
        for i, letter in self.excluded:
            if word[i] == letter:
                return False
        return True


def is_consistent(word: str, history: Iterable[HistoryEntry]) -> bool:
    counts = Counter(word)
    return all(_EntryConstraint(guess, states).allows(word, counts) for guess, states in history)


def filter_candidates(history: Sequence[HistoryEntry], words: Sequence[str]) -> List[str]:
    """Return the words still consistent with every (guess, states) entry.

    Order follows ``words``. With no history every word is a candidate.
    """
    if not history:
        return list(words)
    constraints = [_EntryConstraint(guess, states) for guess, states in history]
    remaining = []
    for word in words:
        counts = Counter(word)
        if all(c.allows(word, counts) for c in constraints):
            remaining.append(word)
    return remaining

