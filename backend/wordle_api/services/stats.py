"""Aggregate statistics over stored games and finished multiplayer rooms.

The helpers operate on plain rows so they can be tested without a
database; ``build_stats`` does the querying and stitches the sections
together into the shape the client renders.
"""

from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from wordle_api.models import GameRecord, Room, RoomPlayer

MP_PARTICIPANT_STATUSES = ('playing', 'won', 'lost')


def _round(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _pct(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int((Decimal(part) * 100 / Decimal(whole)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_streaks(results: Iterable[bool]) -> Tuple[int, int]:
    """Return ``(current, best)`` win streaks for results in chronological order."""
    results = list(results)
    best = run = 0
    for won in results:
        if won:
            run += 1
            best = max(best, run)
        else:
            run = 0
    current = 0
    for won in reversed(results):
        if not won:
            break
        current += 1
    return current, best


def distribution(games: Iterable[GameRecord]) -> Dict[str, int]:
    dist: Dict[str, int] = {}
    for g in games:
        key = str(g.guesses_count) if g.outcome == 'win' else 'loss'
        dist[key] = dist.get(key, 0) + 1
    return dist


def top_starters(games: Sequence[GameRecord], total: int, limit: int = 5) -> List[Dict]:
    counts: Dict[str, int] = OrderedDict()
    for g in games:
        word = g.first_word or '?'
        counts[word] = counts.get(word, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return [{'word': w, 'count': c, 'pct': _pct(c, total)} for w, c in ranked]


def first_word_rankings(games: Iterable[GameRecord], min_games: int, best: bool = True, limit: int = 5) -> List[Dict]:
    """Rank opening words by how many candidates they left on average.

    Only games with remaining counts are considered, and a word needs at
    least ``min_games`` of them to qualify. ``best`` ranks lowest first.
    """
    grouped: Dict[str, List[int]] = OrderedDict()
    for g in games:
        counts = g.remaining_counts_json
        if not counts or not g.first_word:
            continue
        grouped.setdefault(g.first_word, []).append(counts[0])
    rows = [
        {'word': word, 'uses': len(vals), 'avgRemaining': _round(sum(vals) / len(vals))}
        for word, vals in grouped.items()
        if len(vals) >= min_games
    ]
    rows.sort(key=lambda r: r['avgRemaining'], reverse=not best)
    return rows[:limit]


def possibilities_per_guess(games: Iterable[GameRecord]) -> List[Dict]:
    sums: Dict[int, List[int]] = {}
    for g in games:
        for idx, val in enumerate(g.remaining_counts_json or [], start=1):
            sums.setdefault(idx, []).append(val)
    return [
        {'guessNum': idx, 'avgRemaining': _round(sum(vals) / len(vals))}
        for idx, vals in sorted(sums.items())
    ]


def summarize(games: Sequence[GameRecord], min_first_word_games: int) -> Dict:
    total = len(games)
    wins = sum(1 for g in games if g.outcome == 'win')
    current, best = compute_streaks(g.outcome == 'win' for g in games)
    return {
        'totalGames': total,
        'wins': wins,
        'winPct': _pct(wins, total),
        'currentStreak': current,
        'bestStreak': best,
        'distribution': distribution(games),
        'topStarters': top_starters(games, total),
        'bestFirstWords': first_word_rankings(games, min_first_word_games, best=True),
        'worstFirstWords': first_word_rankings(games, min_first_word_games, best=False),
        'possibilitiesPerGuess': possibilities_per_guess(games),
    }


def multiplayer_matches(rooms: Iterable[Tuple[Room, Sequence[RoomPlayer]]], username: str) -> List[Dict]:
    """One entry per completed room ``username`` played against someone.

    ``rooms`` must already be in ``ended_at`` order.
    """
    user = (username or '').lower()
    matches = []
    for room, players in rooms:
        participants = [p for p in players if p.status in MP_PARTICIPANT_STATUSES]
        if not any(p.username.lower() == user for p in participants):
            continue
        opponents = sorted(p.username.lower() for p in participants if p.username.lower() != user)
        if not opponents:
            continue
        winner = next((p.username.lower() for p in players if p.status == 'won'), None)
        matches.append({'i_won': winner == user, 'opponents': opponents, 'ended_at': room.ended_at})
    return matches


def head_to_head(matches: Iterable[Dict], min_games: int) -> List[Dict]:
    groups: Dict[str, Dict] = OrderedDict()
    for m in matches:
        key = ','.join(m['opponents'])
        groups.setdefault(key, {'opponents': m['opponents'], 'games': []})['games'].append(m['i_won'])

    rows = []
    for group in groups.values():
        games = group['games']
        if len(games) < min_games:
            continue
        wins = sum(1 for won in games if won)
        current, best = compute_streaks(games)
        rows.append({
            'opponents': group['opponents'],
            'wins': wins,
            'losses': len(games) - wins,
            'winPct': _pct(wins, len(games)),
            'currentStreak': current,
            'bestStreak': best,
        })
    # 1v1 first, then larger groups; most played first within each
    rows.sort(key=lambda r: (len(r['opponents']), -(r['wins'] + r['losses'])))
    return rows


def multiplayer_summary(matches: Sequence[Dict], min_h2h_games: int) -> Dict:
    wins = sum(1 for m in matches if m['i_won'])
    current, best = compute_streaks(m['i_won'] for m in matches)
    return {
        'matches': len(matches),
        'wins': wins,
        'losses': len(matches) - wins,
        'winPct': _pct(wins, len(matches)),
        'currentStreak': current,
        'bestStreak': best,
        'headToHead': head_to_head(matches, min_h2h_games),
    }


def build_stats(session, username: Optional[str], min_first_word_games: int = 3, min_h2h_games: int = 3) -> Dict:
    user = (username or '').strip().lower()
    ordering = (GameRecord.end_time.asc(), GameRecord.id.asc())
    all_games = session.query(GameRecord).order_by(*ordering).all()
    my_games = []
    matches = []
    if user:
        my_games = (
            session.query(GameRecord)
            .filter(func.lower(GameRecord.username) == user)
            .order_by(*ordering)
            .all()
        )
        mine = select(RoomPlayer.room_id).where(RoomPlayer.username == user)
        rooms = (
            session.query(Room)
            .options(selectinload(Room.players))
            .filter(Room.status == 'complete', Room.id.in_(mine))
            .order_by(Room.ended_at.asc())
            .all()
        )
        matches = multiplayer_matches(((r, r.players) for r in rooms), user)

    return {
        'me': summarize(my_games, min_first_word_games),
        'overall': summarize(all_games, min_first_word_games),
        'mpStats': multiplayer_summary(matches, min_h2h_games),
    }
