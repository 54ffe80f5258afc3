"""Auto-Draw: assign a shuffled player pool to court position slots.

The draw walks the matches in the order given. Each match takes the next
players from the shuffled pool, up to the layout's capacity, and those
players are split between side A and side B so the two sides' mean skill
is as close as the drawn subset allows. Each side's players then fill that
side's slots in layout order.

The shuffle is the only source of randomness and is passed in, so a test
can pin it (``shuffle=lambda seq: None``) and assert exact placements.
"""

import logging
import math
import random
from itertools import combinations
from typing import Callable, Optional, Sequence

from courtdraw.models import (
    CourtLayout, EligiblePlayer, Match, MatchPlayer, TeamSide,
)

logger = logging.getLogger(__name__)

# Above this many candidate partitions per match, fall back to a snake draft
MAX_EXHAUSTIVE_PARTITIONS = 5000

Shuffle = Callable[[list], None]


class DrawError(Exception):
    """Base class for Auto-Draw failures."""


class NoEligiblePlayersError(DrawError):
    """There are no non-reserve eligible players to draw from."""


class AutoDrawError(DrawError):
    """The draw failed unexpectedly; the previous assignments are kept."""


def _skill(player: EligiblePlayer) -> float:
    s = player.skill
    return s if s is not None and s > 0 else 0.0


def _side_mean(players: Sequence[EligiblePlayer]) -> float:
    """Mean of the positive skills on a side, 0 when there are none."""
    valid = [_skill(p) for p in players if _skill(p) > 0]
    if not valid:
        return 0.0
    return sum(valid) / len(valid)


def _imbalance(side_a, side_b) -> tuple[float, float]:
    mean_diff = abs(_side_mean(side_a) - _side_mean(side_b))
    sum_diff = abs(sum(_skill(p) for p in side_a) -
                   sum(_skill(p) for p in side_b))
    return (round(mean_diff, 9), round(sum_diff, 9))


def side_counts(drawn: int, cap_a: int, cap_b: int) -> tuple[int, int]:
    """How many of `drawn` players go to each side.

    Side A takes the larger half of an odd draw; neither side exceeds its
    capacity.
    """
    count_a = min(cap_a, (drawn + 1) // 2)
    count_b = drawn - count_a
    if count_b > cap_b:
        count_b = cap_b
        count_a = drawn - cap_b
    return count_a, count_b


def _snake_split(drawn: list[EligiblePlayer], count_a: int,
                 count_b: int) -> tuple[list[int], list[int]]:
    order = sorted(range(len(drawn)), key=lambda i: -_skill(drawn[i]))
    a_idx: list[int] = []
    b_idx: list[int] = []
    for n, i in enumerate(order):
        want_a = (n % 4) in (0, 3)
        if want_a and len(a_idx) < count_a or len(b_idx) >= count_b:
            a_idx.append(i)
        else:
            b_idx.append(i)
    return sorted(a_idx), sorted(b_idx)


def balance_sides(drawn: list[EligiblePlayer], count_a: int,
                  count_b: int) -> tuple[list[EligiblePlayer], list[EligiblePlayer]]:
    """Split drawn players into sides of the given sizes, balancing skill.

    Small draws are searched exhaustively for the split with the smallest
    mean-skill difference (then the smallest skill-sum difference); the
    first best split in draw order wins. Larger draws use a snake draft
    over the skill-sorted players. Draw order is kept within each side.
    """
    n = len(drawn)
    if count_a + count_b != n:
        raise ValueError(f"cannot split {n} players into {count_a}+{count_b}")
    if count_a == 0 or count_b == 0:
        return list(drawn[:count_a]), list(drawn[count_a:])

    if math.comb(n, count_a) > MAX_EXHAUSTIVE_PARTITIONS:
        a_idx, b_idx = _snake_split(drawn, count_a, count_b)
        return [drawn[i] for i in a_idx], [drawn[i] for i in b_idx]

    best = None
    best_key = None
    for a_idx in combinations(range(n), count_a):
        chosen = set(a_idx)
        side_a = [drawn[i] for i in a_idx]
        side_b = [p for i, p in enumerate(drawn) if i not in chosen]
        key = _imbalance(side_a, side_b)
        if best_key is None or key < best_key:
            best, best_key = (side_a, side_b), key
            if key == (0.0, 0.0):
                break
    return best


def _place(match: Match, side: TeamSide, players: list[EligiblePlayer],
           layout: CourtLayout) -> None:
    team = match.players(side)
    for slot, player in zip(layout.slots_for(side), players):
        team.append(MatchPlayer.from_player(player, side, slot.id))


def generate_auto_matches(players: Sequence[EligiblePlayer],
                          matches: Sequence[Match],
                          layout: CourtLayout,
                          *,
                          seed: int | None = None,
                          shuffle: Optional[Shuffle] = None) -> list[Match]:
    """Draw players into every match's position slots.

    Returns new Match objects with the same identities and freshly drawn
    teams; the input matches and player list are not modified. Reserves
    must already be removed from `players`. A player is used at most once
    across all matches; slots left over when the pool runs out stay empty.
    """
    if shuffle is None:
        shuffle = random.Random(seed).shuffle

    pool = list(players)
    shuffle(pool)

    cap_a = layout.side_capacity(TeamSide.A)
    cap_b = layout.side_capacity(TeamSide.B)
    used: set[str] = set()
    result: list[Match] = []
    cursor = 0

    for match in matches:
        new_match = Match(
            match_id=match.match_id,
            event_id=match.event_id,
            court_id=match.court_id,
            field_id=match.field_id,
            status=match.status,
            match_order=match.match_order,
        )
        result.append(new_match)

        drawn: list[EligiblePlayer] = []
        while cursor < len(pool) and len(drawn) < cap_a + cap_b:
            p = pool[cursor]
            cursor += 1
            if p.member_id in used:
                continue
            used.add(p.member_id)
            drawn.append(p)

        if not drawn:
            continue

        count_a, count_b = side_counts(len(drawn), cap_a, cap_b)
        side_a, side_b = balance_sides(drawn, count_a, count_b)
        _place(new_match, TeamSide.A, side_a, layout)
        _place(new_match, TeamSide.B, side_b, layout)
        logger.debug(
            "%s: %d vs %d players, mean skill %.2f vs %.2f",
            new_match.match_id, len(side_a), len(side_b),
            _side_mean(side_a), _side_mean(side_b),
        )

    logger.info(
        "Auto-Draw placed %d of %d players on %d matches (%s)",
        len(used), len(pool), len(result), layout.name,
    )
    return result
