"""Skill averages and balance statistics for drawn matches."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from courtdraw.eligibility import group_by_team
from courtdraw.models import (
    CourtLayout, EligiblePlayer, Match, MatchPlayer, ShareType,
)

# member_id -> skill label, used when a placed player carries no skill
SkillLookup = Callable[[str], Optional[str]]


def skill_value(label: str | None) -> float:
    """Parse a skill label; missing or non-numeric labels count as 0."""
    try:
        return float(label) if label else 0.0
    except ValueError:
        return 0.0


def _player_skill(p: MatchPlayer, lookup: SkillLookup | None) -> float:
    label = p.skill_name
    if not label and lookup is not None:
        label = lookup(p.member_id)
    return skill_value(label)


def skill_average(players: list[MatchPlayer],
                  lookup: SkillLookup | None = None) -> Optional[float]:
    """Mean skill of the players with a positive skill, None if there are none."""
    valid = [s for s in (_player_skill(p, lookup) for p in players) if s > 0]
    if not valid:
        return None
    return sum(valid) / len(valid)


def format_average(avg: Optional[float]) -> Optional[str]:
    if avg is None:
        return None
    # Half-up on the exact binary value: 3.75 shows as 3.8, 3.65 as 3.6
    return str(Decimal(avg).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_skill_average(players: list[MatchPlayer],
                         lookup: SkillLookup | None = None) -> Optional[str]:
    return format_average(skill_average(players, lookup))


def lookup_from_players(players: list[EligiblePlayer]) -> SkillLookup:
    by_id = {str(p.member_id): p.skill_level for p in players}
    return lambda member_id: by_id.get(str(member_id))


def side_skill_totals(match: Match,
                      lookup: SkillLookup | None = None) -> tuple[float, float]:
    return (
        sum(_player_skill(p, lookup) for p in match.team_a_players),
        sum(_player_skill(p, lookup) for p in match.team_b_players),
    )


def match_skill_difference(match: Match,
                           lookup: SkillLookup | None = None) -> float:
    a, b = side_skill_totals(match, lookup)
    return abs(a - b)


def compute_stats(matches: list[Match], layout: CourtLayout,
                  players: list[EligiblePlayer] | None = None) -> dict:
    """Compute draw statistics.

    Returns dict with:
    - total_slots, filled_slots, open_slots
    - assigned_ids: set of placed member ids
    - unassigned: eligible players not placed anywhere
    - per_match: list of {match_id, team_a_avg, team_b_avg, difference}
    - skill_balance: 0-10 score, 10 means equal side totals everywhere
    """
    players = players or []
    lookup = lookup_from_players(players)

    total_slots = layout.capacity * len(matches)
    assigned_ids: set[str] = set()
    filled = 0
    per_match = []
    diffs = []

    for m in matches:
        placed = m.all_players()
        filled += len(placed)
        assigned_ids.update(p.member_id for p in placed)
        diff = match_skill_difference(m, lookup)
        if m.team_a_players and m.team_b_players:
            diffs.append(diff)
        per_match.append({
            "match_id": m.match_id,
            "team_a_count": len(m.team_a_players),
            "team_b_count": len(m.team_b_players),
            "team_a_avg": format_skill_average(m.team_a_players, lookup),
            "team_b_avg": format_skill_average(m.team_b_players, lookup),
            "difference": diff,
        })

    mean_diff = sum(diffs) / len(diffs) if diffs else 0.0

    return {
        "total_slots": total_slots,
        "filled_slots": filled,
        "open_slots": total_slots - filled,
        "assigned_ids": assigned_ids,
        "unassigned": [p for p in players if p.member_id not in assigned_ids],
        "per_match": per_match,
        "mean_difference": mean_diff,
        "skill_balance": max(0.0, 10 - mean_diff),
    }


def format_stats_report(stats: dict) -> str:
    """Format draw statistics as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("DRAW STATISTICS")
    lines.append("=" * 60)
    lines.append(
        f"Slots: {stats['filled_slots']}/{stats['total_slots']} filled "
        f"({stats['open_slots']} open)"
    )
    lines.append(f"Skill balance score: {stats['skill_balance']:.1f}/10 "
                 f"(mean side difference {stats['mean_difference']:.2f})")

    lines.append("\nPer match:")
    for row in stats["per_match"]:
        a_avg = row["team_a_avg"] or "-"
        b_avg = row["team_b_avg"] or "-"
        lines.append(
            f"  {row['match_id']:<14} A {row['team_a_count']} (avg {a_avg:>4})  "
            f"B {row['team_b_count']} (avg {b_avg:>4})  "
            f"diff {row['difference']:.1f}"
        )

    unassigned = stats["unassigned"]
    if unassigned:
        lines.append(f"\nNot drawn ({len(unassigned)}):")
        for team, members in sorted(group_by_team(unassigned).items()):
            lines.append(f"  {team}")
            for p in sorted(members, key=lambda p: p.full_name.lower()):
                tag = " [reserve]" if p.is_reserve else ""
                share = ShareType.label_for(p.share_type)
                share_note = f"  {share}" if share else ""
                lines.append(f"    {p.full_name}{tag}{share_note}")

    return "\n".join(lines)
