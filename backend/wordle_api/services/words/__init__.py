"""Word solver: tile feedback, candidate filtering and per-guess tracking.

Everything here is pure and safe to call from any thread; the dictionary
is loaded once by ``create_app`` and never mutated afterwards.
"""

from .feedback import ABSENT, CORRECT, PRESENT, evaluate_guess
from .candidates import filter_candidates, is_consistent
from .tracker import remaining_counts, replay
from .dictionary import WORD_LENGTH, get_dictionary, load_dictionary
