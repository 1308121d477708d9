from collections import Counter
import itertools

import pytest

from wordle_api.services.words import (
    ABSENT, CORRECT, PRESENT,
    evaluate_guess, filter_candidates, is_consistent, load_dictionary, remaining_counts, replay,
)


def test_sheep_against_speed():
    assert evaluate_guess('sheep', 'speed') == [CORRECT, ABSENT, CORRECT, CORRECT, PRESENT]


def test_repeated_letter_in_guess_only_coloured_once():
    # 'allot' vs 'total': the second 'l' has nothing left to match
    assert evaluate_guess('allot', 'total') == [PRESENT, PRESENT, ABSENT, PRESENT, PRESENT]


def test_correct_match_consumes_the_only_occurrence():
    # 'b' is exact at index 2, so the earlier 'b' gets nothing
    assert evaluate_guess('abbey', 'cabin') == [PRESENT, ABSENT, CORRECT, ABSENT, ABSENT]


def test_exact_guess_is_all_correct():
    assert evaluate_guess('grate', 'grate') == [CORRECT] * 5


def test_disjoint_letters_all_absent():
    assert evaluate_guess('lumpy', 'grate') == [ABSENT] * 5


def test_never_colours_more_than_target_count():
    words = load_dictionary()[:40]
    for guess, target in itertools.product(words, repeat=2):
        states = evaluate_guess(guess, target)
        coloured = Counter(g for g, s in zip(guess, states) if s != ABSENT)
        target_counts = Counter(target)
        for letter, n in coloured.items():
            assert n <= target_counts[letter], (guess, target, states)


def test_filter_prunes_repeated_letter_words():
    words = ['total', 'stoal', 'allot', 'tally', 'alloy', 'atoll']
    history = [('allot', evaluate_guess('allot', 'total'))]
    assert filter_candidates(history, words) == ['total', 'stoal']


def test_filter_with_empty_history_returns_every_word():
    words = ['crane', 'grate', 'slate']
    result = filter_candidates([], words)
    assert result == words
    assert result is not words


def test_filter_never_grows_with_more_feedback():
    words = load_dictionary()
    target = 'steel'
    history = []
    previous = len(words)
    for guess in ['heist', 'stare', 'steep', 'steel']:
        history.append((guess, evaluate_guess(guess, target)))
        size = len(filter_candidates(history, words))
        assert size <= previous
        previous = size


@pytest.mark.parametrize('target,guesses', [
    ('flies', ['audio', 'spicy', 'frisk', 'flies']),
    ('breve', ['aisle', 'froze', 'prune', 'three', 'dream', 'breve']),
    ('toast', ['heist', 'joust', 'worst', 'boost', 'coast', 'toast']),
    ('savvy', ['mound', 'aisle', 'stack', 'spray', 'sassy', 'savvy']),
])
def test_target_survives_its_own_feedback(target, guesses):
    words = load_dictionary()
    history = []
    for guess in guesses:
        history.append((guess, evaluate_guess(guess, target)))
        assert target in filter_candidates(history, words)
        assert is_consistent(target, history)


def test_remaining_counts_track_each_guess():
    words = ['crane', 'crate', 'grate', 'irate', 'prate', 'trace', 'react', 'spade']
    assert remaining_counts(['crane', 'irate', 'grate'], 'grate', words) == [3, 2, 1]


def test_remaining_counts_length_matches_guesses():
    words = load_dictionary()
    guesses = ['aisle', 'honed', 'muter', 'renew', 'egret', 'creep']
    counts = remaining_counts(guesses, 'creep', words)
    assert len(counts) == len(guesses)
    assert counts == sorted(counts, reverse=True)
    assert counts[-1] == 1


def test_replay_rows_carry_states():
    rows = replay(['sheep'], 'speed', ['speed', 'sheep', 'steep'])
    assert rows[0]['guess'] == 'sheep'
    assert rows[0]['states'] == [CORRECT, ABSENT, CORRECT, CORRECT, PRESENT]
    assert rows[0]['remaining'] == 1


def test_no_guesses_gives_no_counts():
    assert remaining_counts([], 'grate', ['grate']) == []


def test_load_dictionary_rejects_bad_words(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text('# header\ncrane\n\nCRANE\nslate\n', encoding='utf-8')
    assert load_dictionary(str(path)) == ('crane', 'slate')

    path.write_text('crane\ntoolong\n', encoding='utf-8')
    with pytest.raises(ValueError):
        load_dictionary(str(path))


def test_bundled_dictionary_is_five_letter_lowercase():
    words = load_dictionary()
    assert len(words) == len(set(words))
    assert all(len(w) == 5 and w.isalpha() and w.islower() for w in words)


def test_bundled_list_outside_tests_logs_a_warning(caplog, tmp_path):
    from conftest import TestConfig
    from wordle_api import create_app

    class LiveConfig(TestConfig):
        TESTING = False

    class ConfiguredConfig(LiveConfig):
        WORD_LIST_PATH = str(tmp_path / 'words.txt')

    (tmp_path / 'words.txt').write_text('crane\ngrate\n')

    create_app(LiveConfig)
    assert any('WORD_LIST_PATH is unset' in r.getMessage() for r in caplog.records)

    caplog.clear()
    app = create_app(ConfiguredConfig)
    assert not any('WORD_LIST_PATH is unset' in r.getMessage() for r in caplog.records)
    assert app.extensions['wordle_dictionary'] == ('crane', 'grate')
