"""Tests for store.py — match state, manual edits and Auto-Draw."""

import pytest

from courtdraw.automatch import AutoDrawError, NoEligiblePlayersError
from courtdraw.layouts import GENERIC_FIELD, TENNIS_DOUBLES, TENNIS_SINGLES
from courtdraw.models import (
    CourtLayout, EligiblePlayer, Match, MatchPlayer, PositionSlot, TeamSide,
)
from courtdraw.store import MatchStore


def _make_player(member_id, skill="3.0", **kwargs):
    return EligiblePlayer(
        member_id=str(member_id),
        first_name=kwargs.pop("first_name", f"P{member_id}"),
        last_name=kwargs.pop("last_name", "Test"),
        skill_level=skill,
        **kwargs,
    )


def _store(courts=("1", "2"), fields=()):
    store = MatchStore(event_id="e1")
    store.sync_to_resources(courts, fields)
    return store


class TestSyncToResources:
    def test_creates_one_match_per_resource(self):
        store = _store(["1", "2"], ["f1"])
        assert [m.match_id for m in store.matches] == [
            "court_1", "court_2", "field_f1"]
        assert [m.match_order for m in store.matches] == [1, 2, 3]
        assert all(m.event_id == "e1" for m in store.matches)
        assert all(m.status == "scheduled" for m in store.matches)

    def test_idempotent_keeps_assignments(self):
        store = _store(["1", "2"])
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_deuce")
        store.assign_player("court_2", _make_player(2), TeamSide.B, "b_ad")
        before = list(store.matches)

        assert store.sync_to_resources([1, 2], []) is False
        assert store.matches == before

    def test_deselect_removes_only_that_match(self):
        store = _store(["1", "2"])
        store.assign_player("court_2", _make_player(2), TeamSide.A, "a_deuce")
        assert store.sync_to_resources(["2", "3"], []) is True
        assert [m.match_id for m in store.matches] == ["court_2", "court_3"]
        assert store.get("court_2").team_a_players[0].member_id == "2"

    def test_new_resource_order(self):
        store = _store(["1"])
        store.sync_to_resources(["1", "2"], ["9"])
        orders = {m.match_id: m.match_order for m in store.matches}
        assert orders == {"court_1": 1, "court_2": 2, "field_9": 3}

    def test_clear_all(self):
        store = _store(["1"], ["2"])
        assert store.sync_to_resources([], []) is True
        assert store.matches == []


class TestAssignAndRemove:
    def test_assign(self):
        store = _store()
        store.assign_player("court_1", _make_player(7, "4.5"), TeamSide.B, "b_ad")
        [mp] = store.get("court_1").team_b_players
        assert mp.member_id == "7"
        assert mp.team_side is TeamSide.B
        assert mp.position_slot == "b_ad"
        assert mp.skill_name == "4.5"

    def test_assign_occupied_slot_overwrites(self):
        store = _store()
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_deuce")
        store.assign_player("court_1", _make_player(2), TeamSide.A, "a_deuce")
        team = store.get("court_1").team_a_players
        assert [p.member_id for p in team] == ["2"]

    def test_assign_same_slot_other_side(self):
        store = _store()
        store.assign_player("court_1", _make_player(1), TeamSide.A, "slot")
        store.assign_player("court_1", _make_player(2), TeamSide.B, "slot")
        m = store.get("court_1")
        assert len(m.team_a_players) == 1 and len(m.team_b_players) == 1

    def test_assign_does_not_touch_other_matches(self):
        store = _store()
        before = store.get("court_2")
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_deuce")
        assert store.get("court_2") is before

    def test_assign_replaces_list(self):
        store = _store()
        old = store.matches
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_deuce")
        assert store.matches is not old
        assert old[0].team_a_players == []

    def test_unknown_match_is_noop(self):
        store = _store()
        before = list(store.matches)
        store.assign_player("court_99", _make_player(1), TeamSide.A, "a_deuce")
        store.remove_player("court_99", "1")
        assert store.matches == before

    def test_assign_moves_player_within_match(self):
        store = _store()
        store.assign_player("court_1", _make_player(7), TeamSide.A, "a_deuce")
        store.assign_player("court_1", _make_player(7), TeamSide.B, "b_ad")
        m = store.get("court_1")
        ids = [p.member_id for p in m.all_players()]
        assert ids == ["7"]
        assert m.team_b_players[0].position_slot == "b_ad"

    def test_assign_moves_player_to_other_slot_same_side(self):
        store = _store()
        store.assign_player("court_1", _make_player(7), TeamSide.A, "a_deuce")
        store.assign_player("court_1", _make_player(8), TeamSide.B, "b_ad")
        store.assign_player("court_1", _make_player(7), TeamSide.A, "a_ad")
        m = store.get("court_1")
        assert [p.position_slot for p in m.team_a_players] == ["a_ad"]
        assert [p.member_id for p in m.team_b_players] == ["8"]

    def test_remove_from_both_sides(self):
        # saved lists from older sessions can hold a member on both sides
        match = Match.for_court("1", event_id="e1", match_order=1)
        match.team_a_players.append(MatchPlayer("1", TeamSide.A, "a_deuce"))
        match.team_b_players.append(MatchPlayer("1", TeamSide.B, "b_deuce"))
        match.team_b_players.append(MatchPlayer("2", TeamSide.B, "b_ad"))
        store = MatchStore(event_id="e1", matches=[match])
        store.remove_player("court_1", 1)
        m = store.get("court_1")
        assert m.team_a_players == []
        assert [p.member_id for p in m.team_b_players] == ["2"]

    def test_remove_absent_player(self):
        store = _store()
        store.remove_player("court_1", "42")
        assert store.get("court_1").all_players() == []

    def test_assigned_player_ids(self):
        store = _store()
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_deuce")
        store.assign_player("court_2", _make_player(2), TeamSide.B, "b_ad")
        assert store.assigned_player_ids() == {"1", "2"}


class TestSlotCandidates:
    def _players(self):
        return [
            _make_player(1, first_name="Zoe", last_name="Adams", team_name="Tue"),
            _make_player(2, first_name="ana", last_name="Berg", team_name="Thu"),
            _make_player(3, first_name="Ben", last_name="Cole", team_name="Tue"),
        ]

    def test_sorted_by_name(self):
        store = _store()
        names = [p.first_name for p in store.slot_candidates(self._players())]
        assert names == ["ana", "Ben", "Zoe"]

    def test_hides_assigned_except_current(self):
        store = _store()
        players = self._players()
        store.assign_player("court_1", players[0], TeamSide.A, "a_deuce")
        store.assign_player("court_1", players[1], TeamSide.A, "a_ad")
        ids = [p.member_id for p in store.slot_candidates(players)]
        assert ids == ["3"]
        ids = [p.member_id for p in store.slot_candidates(players, "1")]
        assert ids == ["3", "1"]

    def test_current_occupant_id_normalised(self):
        store = _store()
        players = self._players()
        store.assign_player("court_1", players[0], TeamSide.A, "a_deuce")
        ids = [p.member_id for p in store.slot_candidates(players, 1)]
        assert ids == ["2", "3", "1"]

    def test_search_and(self):
        store = _store()
        result = store.slot_candidates(self._players(),
                                       search_terms=["tue", "ben"])
        assert [p.member_id for p in result] == ["3"]

    def test_search_or(self):
        store = _store()
        result = store.slot_candidates(self._players(),
                                       search_terms=["zoe", "BERG"], mode="OR")
        assert [p.member_id for p in result] == ["2", "1"]


class TestSkillAverages:
    def test_side_averages(self):
        store = _store()
        players = [_make_player(1, "4.0"), _make_player(2, "3.5"),
                   _make_player(3, ""), _make_player(4, "5.0")]
        for p, slot in zip(players[:2], ["a_deuce", "a_ad"]):
            store.assign_player("court_1", p, TeamSide.A, slot)
        for p, slot in zip(players[2:], ["b_deuce", "b_ad"]):
            store.assign_player("court_1", p, TeamSide.B, slot)
        assert store.skill_averages("court_1") == ("3.8", "5.0")
        assert store.skill_averages("court_2") == (None, None)
        assert store.skill_averages("nope") == (None, None)


class TestAutoDraw:
    def test_draw_excludes_reserves(self):
        store = _store(["1"])
        players = [_make_player(i) for i in range(4)]
        players.append(_make_player(9, is_reserve=True))
        matches = store.auto_draw(players, TENNIS_DOUBLES, seed=1)
        assert store.matches is matches
        assert "9" not in store.assigned_player_ids()
        assert store.assigned_player_ids() == {"0", "1", "2", "3"}

    def test_reserves_still_manually_assignable(self):
        store = _store(["1"])
        store.assign_player("court_1", _make_player(9, is_reserve=True),
                            TeamSide.A, "a_deuce")
        assert store.assigned_player_ids() == {"9"}

    def test_draw_replaces_manual_assignments(self):
        store = _store(["1"])
        store.assign_player("court_1", _make_player(50), TeamSide.A, "a_center")
        store.auto_draw([_make_player(1), _make_player(2)], TENNIS_SINGLES, seed=0)
        assert store.assigned_player_ids() == {"1", "2"}

    def test_no_eligible_players(self):
        store = _store(["1"])
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_center")
        before = store.matches
        with pytest.raises(NoEligiblePlayersError):
            store.auto_draw([_make_player(5, is_reserve=True)], TENNIS_SINGLES)
        assert store.matches is before

    def test_failure_keeps_previous_state(self, caplog):
        store = _store(["1"])
        store.assign_player("court_1", _make_player(1), TeamSide.A, "a_center")
        before = store.matches

        def broken_shuffle(seq):
            raise RuntimeError("boom")

        with pytest.raises(AutoDrawError):
            store.auto_draw([_make_player(2)], TENNIS_SINGLES,
                            shuffle=broken_shuffle)
        assert store.matches is before
        assert "Auto-match failed" in caplog.text

    def test_layout_without_sides_places_nobody(self):
        store = _store(["1"])
        bad = CourtLayout("x", "Bad", (PositionSlot("a1", "", None),))
        store.auto_draw([_make_player(1)], bad, seed=0)
        # A slot without a side holds nobody; nothing is placed
        assert store.assigned_player_ids() == set()

    def test_generic_layout_full_event(self):
        store = _store(["1", "2"], ["f1"])
        players = [_make_player(i, str(2 + i % 4)) for i in range(20)]
        store.auto_draw(players, GENERIC_FIELD, seed=11)
        assert len(store.assigned_player_ids()) == 18
