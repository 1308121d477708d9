from typing import Dict, List, Sequence

from .candidates import HistoryEntry, filter_candidates
from .feedback import evaluate_guess


def replay(guesses: Sequence[str], target: str, words: Sequence[str]) -> List[Dict]:
    """Walk a finished game guess by guess.

    Each row holds the guess, its tile states against ``target`` and how
    many dictionary words were still possible after applying it.
    """
    history: List[HistoryEntry] = []
    rows = []
    for guess in guesses:
        states = evaluate_guess(guess, target)
        history.append((guess, states))
        rows.append({
            'guess': guess,
            'states': states,
            'remaining': len(filter_candidates(history, words)),
        })
    return rows


def remaining_counts(guesses: Sequence[str], target: str, words: Sequence[str]) -> List[int]:
    return [row['remaining'] for row in replay(guesses, target, words)]
