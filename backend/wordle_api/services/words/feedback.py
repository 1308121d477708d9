from typing import Dict, List

CORRECT = 'correct'
PRESENT = 'present'
ABSENT = 'absent'


def evaluate_guess(guess: str, target: str) -> List[str]:
    """Score ``guess`` against ``target`` the same way the game client does.

    Exact matches are marked first. Remaining positions become ``present``
    only while the letter still has unconsumed occurrences in the target, so
    a letter appearing k times in the target is coloured at most k times.
    """
    length = len(target)
    states = [ABSENT] * length
    target_counts: Dict[str, int] = {}
    guess_counts: Dict[str, int] = {}

    for i in range(length):
        if guess[i] == target[i]:
            states[i] = CORRECT
        target_counts[target[i]] = target_counts.get(target[i], 0) + 1

    for i in range(length):
        if states[i] == CORRECT:
            guess_counts[guess[i]] = guess_counts.get(guess[i], 0) + 1

    for i in range(length):
        if states[i] == CORRECT:
            continue
        letter = guess[i]
        if letter in target and guess_counts.get(letter, 0) < target_counts.get(letter, 0):
            states[i] = PRESENT
            guess_counts[letter] = guess_counts.get(letter, 0) + 1

    return states
