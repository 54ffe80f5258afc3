"""In-memory match state for one event: resource sync, manual slot edits
and Auto-Draw.

The store owns the event's Match list. Every mutation installs a new list
(whole-list swap), so callers holding a previous ``matches`` reference
never observe a half-applied change.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from courtdraw.automatch import (
    AutoDrawError, NoEligiblePlayersError, Shuffle, generate_auto_matches,
)
from courtdraw.eligibility import non_reserve_players
from courtdraw.models import (
    CourtLayout, EligiblePlayer, Match, MatchPlayer, TeamSide,
)
from courtdraw.stats import format_skill_average, lookup_from_players

logger = logging.getLogger(__name__)


def _search_text(p: EligiblePlayer) -> str:
    return f"{p.first_name} {p.last_name} {p.display_name} {p.team_name}".lower()


class MatchStore:
    """Match list for the active event."""

    def __init__(self, event_id: str = "new",
                 matches: Optional[list[Match]] = None):
        self.event_id = event_id
        self.matches: list[Match] = list(matches or [])

    def get(self, match_id: str) -> Optional[Match]:
        for m in self.matches:
            if m.match_id == match_id:
                return m
        return None

    def load(self, matches: list[Match]) -> None:
        """Replace state with previously persisted matches."""
        self.matches = list(matches)

    def sync_to_resources(self, court_ids: Iterable, field_ids: Iterable) -> bool:
        """Keep exactly one match per selected court and field.

        New resources get an empty match appended, deselected ones are
        dropped, and matches for resources still selected are untouched.
        Returns True if the list changed.
        """
        court_ids = [str(c) for c in court_ids]
        field_ids = [str(f) for f in field_ids]

        new_matches = list(self.matches)
        existing_courts = {m.court_id for m in new_matches if m.court_id is not None}
        existing_fields = {m.field_id for m in new_matches if m.field_id is not None}
        changed = False

        for index, court_id in enumerate(court_ids):
            if court_id not in existing_courts:
                new_matches.append(Match.for_court(
                    court_id, event_id=self.event_id, match_order=index + 1))
                existing_courts.add(court_id)
                changed = True

        for index, field_id in enumerate(field_ids):
            if field_id not in existing_fields:
                new_matches.append(Match.for_field(
                    field_id, event_id=self.event_id,
                    match_order=len(court_ids) + index + 1))
                existing_fields.add(field_id)
                changed = True

        selected_courts = set(court_ids)
        selected_fields = set(field_ids)
        kept = [
            m for m in new_matches
            if (m.court_id in selected_courts if m.court_id is not None
                else m.field_id in selected_fields)
        ]
        if len(kept) != len(new_matches):
            changed = True

        if changed:
            self.matches = kept
            logger.debug("Synced matches: %s", [m.match_id for m in kept])
        return changed

    def _replace_match(self, match_id: str, new_match: Match) -> None:
        self.matches = [new_match if m.match_id == match_id else m
                        for m in self.matches]

    def assign_player(self, match_id: str, player: EligiblePlayer,
                      team_side: TeamSide, position_slot: str) -> None:
        """Place a player in a slot, replacing whoever held that slot.

        A player already elsewhere in the match is moved, not duplicated.
        """
        match = self.get(match_id)
        if match is None:
            logger.debug("assign_player: no match %s", match_id)
            return

        mp = MatchPlayer.from_player(player, team_side, position_slot)
        teams = {}
        for side in TeamSide:
            teams[side.players_attr] = [
                p for p in match.players(side)
                if p.member_id != mp.member_id
                and not (side is team_side and p.position_slot == position_slot)
            ]
        teams[team_side.players_attr].append(mp)
        self._replace_match(match_id, replace(match, **teams))

    def remove_player(self, match_id: str, member_id: str) -> None:
        """Remove a member from both sides of a match."""
        match = self.get(match_id)
        if match is None:
            logger.debug("remove_player: no match %s", match_id)
            return

        member_id = str(member_id)
        self._replace_match(match_id, replace(
            match,
            team_a_players=[p for p in match.team_a_players
                            if p.member_id != member_id],
            team_b_players=[p for p in match.team_b_players
                            if p.member_id != member_id],
        ))

    def assigned_player_ids(self) -> set[str]:
        ids = set()
        for m in self.matches:
            ids.update(p.member_id for p in m.all_players())
        return ids

    def slot_candidates(self, players: list[EligiblePlayer],
                        current_member_id: Optional[str] = None,
                        search_terms: Iterable[str] = (),
                        mode: str = "AND") -> list[EligiblePlayer]:
        """Players offered when picking someone for a slot.

        Players already placed anywhere are hidden, except the slot's own
        occupant. Search terms match first, last, display and team name,
        all of them (AND) or any of them (OR). Sorted by first then last name.
        """
        assigned = self.assigned_player_ids()
        if current_member_id is not None:
            current_member_id = str(current_member_id)
        candidates = [
            p for p in players
            if p.member_id not in assigned or p.member_id == current_member_id
        ]

        terms = [t.lower() for t in search_terms if t]
        if terms:
            match_fn = all if mode.upper() == "AND" else any
            candidates = [
                p for p in candidates
                if match_fn(t in _search_text(p) for t in terms)
            ]

        return sorted(candidates,
                      key=lambda p: f"{p.first_name} {p.last_name}".lower())

    def skill_averages(self, match_id: str,
                       players: Optional[list[EligiblePlayer]] = None,
                       ) -> tuple[Optional[str], Optional[str]]:
        """Formatted (side A, side B) skill averages for a match."""
        match = self.get(match_id)
        if match is None:
            return None, None
        lookup = lookup_from_players(players) if players else None
        return (format_skill_average(match.team_a_players, lookup),
                format_skill_average(match.team_b_players, lookup))

    def auto_draw(self, players: list[EligiblePlayer], layout: CourtLayout,
                  seed: int | None = None,
                  shuffle: Optional[Shuffle] = None) -> list[Match]:
        """Redraw every match from the non-reserve players.

        Raises NoEligiblePlayersError when no non-reserve player remains and
        AutoDrawError when the draw itself fails; in both cases the current
        matches are kept.
        """
        pool = non_reserve_players(players)
        if not pool:
            raise NoEligiblePlayersError("No eligible non-reserve players to assign.")

        cleared = [replace(m, team_a_players=[], team_b_players=[])
                   for m in self.matches]
        try:
            drawn = generate_auto_matches(pool, cleared, layout,
                                          seed=seed, shuffle=shuffle)
        except Exception as e:
            logger.exception("Auto-match failed")
            raise AutoDrawError("Failed to generate matches automatically.") from e

        self.matches = drawn
        return drawn
