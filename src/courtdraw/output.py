"""Output formatters and match persistence for courtdraw."""

import csv
import json
from io import StringIO
from pathlib import Path

from courtdraw.models import CourtLayout, Match, TeamSide
from courtdraw.stats import format_skill_average


def resource_name(match: Match, courts: dict | None = None,
                  fields: dict | None = None) -> str:
    """Court or field display name for a match."""
    if match.court_id is not None:
        return (courts or {}).get(match.court_id, f"Court {match.court_id}")
    return (fields or {}).get(match.field_id, f"Field {match.field_id}")


def _player_label(p) -> str:
    name = p.display_name or f"{p.first_name} {p.last_name}".strip()
    if p.skill_name:
        return f"{name} ({p.skill_name})"
    return name


def format_matches(matches: list[Match], layout: CourtLayout,
                   courts: dict | None = None,
                   fields: dict | None = None) -> str:
    """Format the draw as a human-readable sheet, one block per court/field."""
    lines = []
    lines.append("=" * 60)
    lines.append(f"MATCH SHEET - {layout.name.upper()}")
    lines.append("=" * 60)

    for m in sorted(matches, key=lambda m: m.match_order):
        lines.append(f"\n--- {resource_name(m, courts, fields)} ---")
        for side in TeamSide:
            avg = format_skill_average(m.players(side))
            avg_note = f"  (skill avg {avg})" if avg else ""
            lines.append(f"  Team {side.value}{avg_note}")
            by_slot = {p.position_slot: p for p in m.players(side)}
            for slot in layout.slots_for(side):
                p = by_slot.get(slot.id)
                who = _player_label(p) if p else "(open)"
                lines.append(f"    {slot.id:<10} {who}")

    return "\n".join(lines)


def matches_to_json(matches: list[Match]) -> str:
    return json.dumps([m.to_dict() for m in matches], indent=2)


def matches_from_json(text: str) -> list[Match]:
    return [Match.from_dict(d) for d in json.loads(text)]


def write_matches_json(matches: list[Match], path: str | Path) -> None:
    Path(path).write_text(matches_to_json(matches))


def read_matches_json(path: str | Path) -> list[Match]:
    return matches_from_json(Path(path).read_text())


def matches_to_csv(matches: list[Match], courts: dict | None = None,
                   fields: dict | None = None) -> str:
    """One row per occupied slot.

    Columns: Match, Resource, Side, Slot, Member, Name, Skill
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Match", "Resource", "Side", "Slot", "Member", "Name", "Skill"])

    for m in sorted(matches, key=lambda m: m.match_order):
        name = resource_name(m, courts, fields)
        for p in m.all_players():
            writer.writerow([
                m.match_id, name, p.team_side.value, p.position_slot,
                p.member_id, f"{p.first_name} {p.last_name}".strip(),
                p.skill_name,
            ])

    return output.getvalue()


def write_outputs(matches: list[Match], layout: CourtLayout,
                  output_prefix: str = "output",
                  courts: dict | None = None, fields: dict | None = None):
    """Write the match sheet, JSON and CSV into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    sheet_path = out_dir / "matches.txt"
    sheet_path.write_text(format_matches(matches, layout, courts, fields))
    print(f"Written: {sheet_path}")

    json_path = out_dir / "matches.json"
    write_matches_json(matches, json_path)
    print(f"Written: {json_path}")

    csv_path = out_dir / "matches.csv"
    csv_path.write_text(matches_to_csv(matches, courts, fields))
    print(f"Written: {csv_path}")
