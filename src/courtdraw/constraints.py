"""Validation of a match list against its court layout.

Works on freshly drawn matches or on a list read back from JSON.
"""

from collections import defaultdict

from courtdraw.models import CourtLayout, EligiblePlayer, Match, TeamSide


def validate_matches(matches: list[Match], layout: CourtLayout,
                     players: list[EligiblePlayer] | None = None) -> dict:
    """Validate slot occupancy for every match.

    Returns dict with:
    - valid: bool (True if no errors)
    - errors: slot shared on one side, member twice in a match, side over
      capacity, slot id not on that side of the layout, duplicate match id
    - warnings: member placed in more than one match, reserve placed
    """
    errors = []
    warnings = []

    reserves = {p.member_id for p in players or [] if p.is_reserve}
    matches_per_member: dict[str, list[str]] = defaultdict(list)
    seen_ids: set[str] = set()

    for m in matches:
        if m.match_id in seen_ids:
            errors.append(f"Duplicate match id {m.match_id}")
        seen_ids.add(m.match_id)

        for side in TeamSide:
            team = m.players(side)
            cap = layout.side_capacity(side)
            if len(team) > cap:
                errors.append(
                    f"{m.match_id}: side {side.value} has {len(team)} players "
                    f"for {cap} slots"
                )

            valid_slots = {s.id for s in layout.slots_for(side)}
            slot_counts: dict[str, int] = defaultdict(int)
            for p in team:
                slot_counts[p.position_slot] += 1
                if p.position_slot not in valid_slots:
                    errors.append(
                        f"{m.match_id}: slot {p.position_slot} is not a side "
                        f"{side.value} position of {layout.name}"
                    )
                if p.team_side is not side:
                    errors.append(
                        f"{m.match_id}: {p.member_id} listed on side "
                        f"{side.value} but tagged {p.team_side.value}"
                    )
            for slot, count in slot_counts.items():
                if count > 1:
                    errors.append(
                        f"{m.match_id}: slot {side.value}/{slot} held by "
                        f"{count} players"
                    )

        member_counts: dict[str, int] = defaultdict(int)
        for p in m.all_players():
            member_counts[p.member_id] += 1
        for member_id, count in member_counts.items():
            if count > 1:
                errors.append(
                    f"{m.match_id}: member {member_id} appears {count} times"
                )
            matches_per_member[member_id].append(m.match_id)
            if member_id in reserves:
                warnings.append(f"{m.match_id}: reserve {member_id} is placed")

    for member_id, match_ids in matches_per_member.items():
        if len(match_ids) > 1:
            warnings.append(
                f"Member {member_id} placed in {len(match_ids)} matches: "
                f"{', '.join(match_ids)}"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("MATCH VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (all slot constraints hold)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
