"""Event file loading for courtdraw.

An event file is YAML:

    event:
      id: spring-ladder-3
    teams: {1: "Tuesday Doubles", 2: "Thursday Mixed"}
    match_types: {10: "Tennis Doubles"}
    genders: {m: Male, f: Female}
    courts: {c1: "Court 1", c2: "Court 2"}
    fields: {}
    selection:
      team_ids: [1]
      court_ids: [c1, c2]
      match_type_ids: [10]
    members:
      - id: 101
        first_name: Ana
        last_name: Ruiz
        gender: F
        teams:
          - team_id: 1
            roles: Player
            positions: [Tennis Doubles]
            skill: "4.0"
            share_type: F
"""

from pathlib import Path

import yaml

from courtdraw.eligibility import FilterCriteria
from courtdraw.layouts import LAYOUTS, layout_for_match_types
from courtdraw.models import Member, TeamMembership


def _str_keys(d: dict | None) -> dict[str, str]:
    return {str(k): str(v) for k, v in (d or {}).items()}


def _str_list(values) -> list[str]:
    return [str(v) for v in values or []]


def _opt_str(value) -> str | None:
    return None if value is None else str(value)


def _opt_float(value) -> float | None:
    return None if value is None else float(value)


def parse_membership(data: dict) -> TeamMembership:
    return TeamMembership(
        team_id=str(data["team_id"]),
        team_name=data.get("team_name", ""),
        role_names=data.get("roles", ""),
        positions=_str_list(data.get("positions")),
        level_id=_opt_str(data.get("level_id")),
        level_name=data.get("level_name", ""),
        skill_name=str(data.get("skill", "") or ""),
        share=_opt_float(data.get("share")),
        share_type=data.get("share_type", ""),
    )


def parse_member(data: dict) -> Member:
    return Member(
        member_id=str(data["id"]),
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        display_name=data.get("display_name", ""),
        gender=data.get("gender", ""),
        gender_category_ids=_str_list(data.get("gender_category_ids")),
        age_group_ids=_str_list(data.get("age_group_ids")),
        skill_name=str(data.get("skill", "") or ""),
        share=_opt_float(data.get("share")),
        share_type=data.get("share_type", ""),
        teams=[parse_membership(t) for t in data.get("teams", [])],
    )


def load_event(path: str | Path) -> dict:
    """Load an event file, returning structured data.

    Returns dict with:
    - event_id
    - members: list[Member]
    - teams, match_types, genders, courts, fields: id -> name catalogs
    - criteria: FilterCriteria
    - court_ids, field_ids: selected resources
    - layout: CourtLayout for the selected match type
    - warnings: list of config problems that did not stop loading
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    event = raw.get("event") or {}
    teams = _str_keys(raw.get("teams"))
    match_types = _str_keys(raw.get("match_types"))
    genders = _str_keys(raw.get("genders"))
    courts = _str_keys(raw.get("courts"))
    fields = _str_keys(raw.get("fields"))

    sel = raw.get("selection") or {}
    criteria = FilterCriteria(
        team_ids=_str_list(sel.get("team_ids")),
        member_ids=_str_list(sel.get("member_ids")),
        age_group_ids=_str_list(sel.get("age_group_ids")),
        gender_ids=_str_list(sel.get("gender_ids")),
        level_ids=_str_list(sel.get("level_ids")),
        match_type_ids=_str_list(sel.get("match_type_ids")),
    )
    court_ids = _str_list(sel.get("court_ids"))
    field_ids = _str_list(sel.get("field_ids"))

    members = [parse_member(m) for m in raw.get("members", [])]

    layout_name = event.get("layout")
    if layout_name:
        if layout_name not in LAYOUTS:
            raise ValueError(
                f"Unknown layout {layout_name!r}; "
                f"expected one of {sorted(LAYOUTS)}"
            )
        layout = LAYOUTS[layout_name]
    else:
        layout = layout_for_match_types(match_types, criteria.match_type_ids)

    # Validate references
    warnings = []
    for m in members:
        for t in m.teams:
            if teams and t.team_id not in teams:
                warnings.append(
                    f"Member {m.member_id} belongs to unknown team {t.team_id}"
                )
    for c in court_ids:
        if c not in courts:
            warnings.append(f"Selected court {c} not in courts")
    for fid in field_ids:
        if fid not in fields:
            warnings.append(f"Selected field {fid} not in fields")
    for t in criteria.match_type_ids:
        if t not in match_types:
            warnings.append(f"Selected match type {t} not in match_types")

    if warnings:
        print("Config warnings:")
        for w in warnings:
            print(f"  {w}")

    return {
        "event_id": str(event.get("id", "new")),
        "members": members,
        "teams": teams,
        "match_types": match_types,
        "genders": genders,
        "courts": courts,
        "fields": fields,
        "criteria": criteria,
        "court_ids": court_ids,
        "field_ids": field_ids,
        "layout": layout,
        "warnings": warnings,
    }
