"""Eligibility filtering: which roster members can be drawn for an event.

Every filter dimension is optional. An empty id list means "no
constraint" for that dimension, and a member must pass all of the
non-empty ones. When the caller names members explicitly, those members
are used as-is and the filters are not applied.
"""

from dataclasses import dataclass, field
from typing import Optional

from courtdraw.models import EligiblePlayer, Member, TeamMembership

# Legacy gender codes on members that predate gender categories
LEGACY_GENDER_NAMES = {"male": "M", "female": "F"}


@dataclass
class FilterCriteria:
    """Selection filters for an event. All ids are compared as strings."""
    team_ids: list[str] = field(default_factory=list)
    member_ids: list[str] = field(default_factory=list)
    age_group_ids: list[str] = field(default_factory=list)
    gender_ids: list[str] = field(default_factory=list)
    level_ids: list[str] = field(default_factory=list)
    match_type_ids: list[str] = field(default_factory=list)


def _ids(values) -> list[str]:
    return [str(v) for v in values or []]


def is_reserve_role(role_names: str | None) -> bool:
    """A membership is a reserve when any role name mentions 'reserve'."""
    return "reserve" in (role_names or "").lower()


def legacy_gender_matches(member: Member, gender_name: str | None) -> bool:
    """Match an old-style M/F member against a 'Male'/'Female' category."""
    if not gender_name:
        return False
    code = LEGACY_GENDER_NAMES.get(gender_name.strip().lower())
    return code is not None and member.gender == code


def _selected_memberships(member: Member,
                          team_ids: list[str]) -> list[TeamMembership]:
    selected = set(team_ids)
    return [t for t in member.teams if str(t.team_id) in selected]


def member_passes(member: Member, criteria: FilterCriteria,
                  match_type_names: set[str],
                  genders: dict[str, str]) -> bool:
    """Test a member against every active filter dimension."""
    team_ids = _ids(criteria.team_ids)
    memberships = _selected_memberships(member, team_ids)
    if not memberships:
        return False

    gender_ids = _ids(criteria.gender_ids)
    if gender_ids:
        member_cats = set(_ids(member.gender_category_ids))
        if member_cats:
            ok = any(g in member_cats for g in gender_ids)
        else:
            ok = any(legacy_gender_matches(member, genders.get(g))
                     for g in gender_ids)
        if not ok:
            return False

    age_group_ids = _ids(criteria.age_group_ids)
    if age_group_ids:
        member_ages = set(_ids(member.age_group_ids))
        if not any(a in member_ages for a in age_group_ids):
            return False

    level_ids = set(_ids(criteria.level_ids))
    if level_ids:
        if not any(m.level_id is not None and str(m.level_id) in level_ids
                   for m in memberships):
            return False

    if criteria.match_type_ids:
        if not any(pos.lower() in match_type_names
                   for m in memberships for pos in m.positions):
            return False

    return True


def decorate(member: Member, team_ids: list[str],
             teams: dict[str, str]) -> EligiblePlayer:
    """Build the EligiblePlayer for a member using its first selected team."""
    memberships = _selected_memberships(member, _ids(team_ids))
    team: Optional[TeamMembership] = memberships[0] if memberships else None

    if team is None:
        return EligiblePlayer(
            member_id=member.member_id,
            first_name=member.first_name,
            last_name=member.last_name,
            display_name=member.display_name,
            skill_level=member.skill_name,
            contract_share=member.share,
            share_type=member.share_type,
        )

    return EligiblePlayer(
        member_id=member.member_id,
        first_name=member.first_name,
        last_name=member.last_name,
        display_name=member.display_name,
        team_id=str(team.team_id),
        team_name=team.team_name or teams.get(str(team.team_id), ""),
        skill_level=team.skill_name or team.level_name or member.skill_name,
        contract_share=team.share if team.share is not None else member.share,
        share_type=team.share_type or member.share_type,
        is_reserve=is_reserve_role(team.role_names),
    )


def build_eligible_players(members: list[Member], criteria: FilterCriteria,
                           teams: dict[str, str] | None = None,
                           match_types: dict[str, str] | None = None,
                           genders: dict[str, str] | None = None,
                           ) -> list[EligiblePlayer]:
    """Compute the eligible player pool for an event selection.

    teams, match_types and genders are id -> name catalogs. Explicit member
    ids take precedence over the filters; with neither member ids nor team
    ids there are no candidates. Each member appears at most once.
    """
    teams = {str(k): v for k, v in (teams or {}).items()}
    match_types = {str(k): v for k, v in (match_types or {}).items()}
    genders = {str(k): v for k, v in (genders or {}).items()}

    by_id = {str(m.member_id): m for m in members}
    member_ids = _ids(criteria.member_ids)

    if member_ids:
        candidates = [by_id[i] for i in dict.fromkeys(member_ids) if i in by_id]
    elif criteria.team_ids:
        match_type_names = {
            match_types[t].lower()
            for t in _ids(criteria.match_type_ids) if t in match_types
        }
        candidates = [
            m for m in members
            if member_passes(m, criteria, match_type_names, genders)
        ]
    else:
        candidates = []

    return [decorate(m, criteria.team_ids, teams) for m in candidates]


def non_reserve_players(players: list[EligiblePlayer]) -> list[EligiblePlayer]:
    """Players that may take part in an Auto-Draw."""
    return [p for p in players if not p.is_reserve]


def group_by_team(players: list[EligiblePlayer]) -> dict[str, list[EligiblePlayer]]:
    """Group players by team name, keeping input order within each team."""
    groups: dict[str, list[EligiblePlayer]] = {}
    for p in players:
        groups.setdefault(p.team_name or "Unassigned", []).append(p)
    return groups
