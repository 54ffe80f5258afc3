"""Tests for stats.py — skill parsing, averages and draw statistics."""

from courtdraw.layouts import TENNIS_DOUBLES
from courtdraw.models import EligiblePlayer, Match, MatchPlayer, TeamSide
from courtdraw.stats import (
    compute_stats, format_average, format_skill_average, format_stats_report,
    lookup_from_players, match_skill_difference, skill_average, skill_value,
)


def _mp(member_id, skill, side=TeamSide.A, slot="a_deuce"):
    return MatchPlayer(member_id=str(member_id), team_side=side,
                       position_slot=slot, first_name=f"P{member_id}",
                       skill_name=skill)


def _match(a_skills, b_skills, court="1"):
    m = Match.for_court(court, match_order=int(court))
    for i, s in enumerate(a_skills):
        m.team_a_players.append(_mp(f"a{court}{i}", s, TeamSide.A, f"a{i}"))
    for i, s in enumerate(b_skills):
        m.team_b_players.append(_mp(f"b{court}{i}", s, TeamSide.B, f"b{i}"))
    return m


class TestSkillValue:
    def test_parsing(self):
        assert skill_value("4.5") == 4.5
        assert skill_value("3") == 3.0
        assert skill_value("") == 0.0
        assert skill_value(None) == 0.0
        assert skill_value("Advanced") == 0.0


class TestSkillAverage:
    def test_scenario(self):
        m = _match(["4.0", "3.5"], ["", "5.0"])
        assert skill_average(m.team_a_players) == 3.75
        assert format_skill_average(m.team_a_players) == "3.8"
        assert format_skill_average(m.team_b_players) == "5.0"

    def test_no_valid_entries(self):
        assert skill_average([]) is None
        assert skill_average([_mp(1, ""), _mp(2, "0"), _mp(3, "n/a")]) is None
        assert format_skill_average([_mp(1, "")]) is None

    def test_rounding_half_up(self):
        assert format_average(3.75) == "3.8"
        assert format_average(3.25) == "3.3"
        assert format_average(4.0) == "4.0"
        assert format_average(None) is None

    def test_rounds_exact_binary_value(self):
        # 3.65 is stored just below 3.65
        assert format_average((3.3 + 4.0) / 2) == "3.6"
        assert format_average(3.45) == "3.5"

    def test_lookup_fallback(self):
        players = [EligiblePlayer("1", "A", "B", skill_level="4.0")]
        lookup = lookup_from_players(players)
        assert skill_average([_mp(1, "")], lookup) == 4.0
        assert skill_average([_mp(1, "2.0")], lookup) == 2.0
        assert skill_average([_mp(2, "")], lookup) is None


class TestComputeStats:
    def test_counts(self):
        matches = [_match(["4.0", "3.0"], ["3.5", "3.5"], "1"),
                   _match(["2.0"], [], "2")]
        players = [EligiblePlayer("a10", "A", "X"),
                   EligiblePlayer("zz", "Zed", "Y", is_reserve=True)]
        stats = compute_stats(matches, TENNIS_DOUBLES, players)

        assert stats["total_slots"] == 8
        assert stats["filled_slots"] == 5
        assert stats["open_slots"] == 3
        assert [p.member_id for p in stats["unassigned"]] == ["zz"]
        assert stats["per_match"][0]["team_a_avg"] == "3.5"
        assert stats["per_match"][1]["team_b_avg"] is None
        # Only matches with both sides populated count towards balance
        assert stats["mean_difference"] == 0.0
        assert stats["skill_balance"] == 10.0

    def test_difference(self):
        m = _match(["5.0", "5.0"], ["1.0", "1.0"])
        assert match_skill_difference(m) == 8.0
        stats = compute_stats([m], TENNIS_DOUBLES)
        assert stats["skill_balance"] == 2.0

    def test_balance_floor(self):
        m = _match(["9.0", "9.0"], ["1.0"])
        assert compute_stats([m], TENNIS_DOUBLES)["skill_balance"] == 0.0

    def test_empty(self):
        stats = compute_stats([], TENNIS_DOUBLES)
        assert stats["total_slots"] == 0
        assert stats["per_match"] == []

    def test_report(self):
        matches = [_match(["4.0"], ["3.0"])]
        players = [EligiblePlayer("r1", "Res", "Erve", is_reserve=True)]
        text = format_stats_report(compute_stats(matches, TENNIS_DOUBLES, players))
        assert "DRAW STATISTICS" in text
        assert "Slots: 2/4 filled" in text
        assert "Res Erve [reserve]" in text

    def test_report_groups_undrawn_by_team_with_share(self):
        players = [
            EligiblePlayer("1", "Ana", "Berg", team_name="Tue", share_type="H"),
            EligiblePlayer("2", "Ben", "Cole", team_name="Tue", share_type="XX"),
            EligiblePlayer("3", "Kim", "Diaz"),
        ]
        text = format_stats_report(compute_stats([], TENNIS_DOUBLES, players))
        assert "Not drawn (3):" in text
        assert "\n  Tue\n    Ana Berg  Half (50%)\n    Ben Cole  XX" in text
        assert "\n  Unassigned\n    Kim Diaz" in text
