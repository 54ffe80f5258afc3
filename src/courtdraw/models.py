"""Data models for courtdraw."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TeamSide(Enum):
    A = "A"
    B = "B"

    @classmethod
    def from_str(cls, s: str) -> "TeamSide":
        return cls(s.strip().upper())

    @property
    def players_attr(self) -> str:
        return "team_a_players" if self is TeamSide.A else "team_b_players"


class ShareType(Enum):
    """Contract share codes used by the roster import."""
    F = "F"
    TQ = "TQ"
    TT = "TT"
    H = "H"
    OT = "OT"
    R = "R"
    C = "C"

    @property
    def label(self) -> str:
        return _SHARE_LABELS[self]

    @classmethod
    def label_for(cls, code: str | None) -> str:
        """Display label for a share code; unknown codes are shown as-is."""
        if not code:
            return ""
        try:
            return cls(code).label
        except ValueError:
            return code


_SHARE_LABELS = {
    ShareType.F: "Full (100%)",
    ShareType.TQ: "Three Quarters (75%)",
    ShareType.TT: "Two Thirds (67%)",
    ShareType.H: "Half (50%)",
    ShareType.OT: "One Third (33%)",
    ShareType.R: "Reserve (0%)",
    ShareType.C: "Custom",
}


@dataclass(frozen=True)
class PositionSlot:
    """A named position on a court, belonging to one team side."""
    id: str
    label: str
    team_side: TeamSide
    x: int = 0  # percent across the court, display only
    y: int = 0


@dataclass(frozen=True)
class CourtLayout:
    """An ordered set of position slots for one kind of match."""
    sport_id: str
    name: str
    positions: tuple[PositionSlot, ...]

    def slots_for(self, side: TeamSide) -> list[PositionSlot]:
        return [p for p in self.positions if p.team_side is side]

    def side_capacity(self, side: TeamSide) -> int:
        return len(self.slots_for(side))

    @property
    def capacity(self) -> int:
        return len(self.positions)


@dataclass
class TeamMembership:
    """A member's association with one team."""
    team_id: str
    team_name: str = ""
    role_names: str = ""  # comma separated, e.g. "Player, Reserve"
    positions: list[str] = field(default_factory=list)
    level_id: Optional[str] = None
    level_name: str = ""
    skill_name: str = ""
    share: Optional[float] = None
    share_type: str = ""


@dataclass
class Member:
    """A roster member with their per-team associations."""
    member_id: str
    first_name: str
    last_name: str
    display_name: str = ""
    gender: str = ""  # "M" / "F" on older records
    gender_category_ids: list[str] = field(default_factory=list)
    age_group_ids: list[str] = field(default_factory=list)
    skill_name: str = ""
    share: Optional[float] = None
    share_type: str = ""
    teams: list[TeamMembership] = field(default_factory=list)


@dataclass
class EligiblePlayer:
    """A member decorated with the team context of the current event."""
    member_id: str
    first_name: str
    last_name: str
    display_name: str = ""
    team_id: Optional[str] = None
    team_name: str = ""
    skill_level: str = ""
    contract_share: Optional[float] = None
    share_type: str = ""
    is_reserve: bool = False

    @property
    def skill(self) -> Optional[float]:
        """Numeric skill, or None when the label is missing or not a number."""
        try:
            return float(self.skill_level)
        except (TypeError, ValueError):
            return None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class MatchPlayer:
    """A player placed in a position slot of a match."""
    member_id: str
    team_side: TeamSide
    position_slot: str
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    skill_name: str = ""

    @classmethod
    def from_player(cls, player: EligiblePlayer, team_side: TeamSide,
                    position_slot: str) -> "MatchPlayer":
        return cls(
            member_id=player.member_id,
            team_side=team_side,
            position_slot=position_slot,
            first_name=player.first_name,
            last_name=player.last_name,
            display_name=player.display_name,
            skill_name=player.skill_level,
        )

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "team_side": self.team_side.value,
            "position_slot": self.position_slot,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "display_name": self.display_name,
            "skill_name": self.skill_name,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MatchPlayer":
        return cls(
            member_id=str(d["member_id"]),
            team_side=TeamSide.from_str(d["team_side"]),
            position_slot=d["position_slot"],
            first_name=d.get("first_name", ""),
            last_name=d.get("last_name", ""),
            display_name=d.get("display_name") or "",
            skill_name=d.get("skill_name") or "",
        )


@dataclass
class Match:
    """One court or field of an event and the players assigned to it."""
    match_id: str
    event_id: str = "new"
    court_id: Optional[str] = None
    field_id: Optional[str] = None
    status: str = "scheduled"
    team_a_players: list[MatchPlayer] = field(default_factory=list)
    team_b_players: list[MatchPlayer] = field(default_factory=list)
    match_order: int = 0

    def __post_init__(self):
        if (self.court_id is None) == (self.field_id is None):
            raise ValueError(
                f"Match {self.match_id} needs exactly one of court_id/field_id"
            )

    @classmethod
    def for_court(cls, court_id: str, event_id: str = "new",
                  match_order: int = 0) -> "Match":
        return cls(match_id=f"court_{court_id}", event_id=event_id,
                   court_id=court_id, match_order=match_order)

    @classmethod
    def for_field(cls, field_id: str, event_id: str = "new",
                  match_order: int = 0) -> "Match":
        return cls(match_id=f"field_{field_id}", event_id=event_id,
                   field_id=field_id, match_order=match_order)

    def players(self, side: TeamSide) -> list[MatchPlayer]:
        return getattr(self, side.players_attr)

    def all_players(self) -> list[MatchPlayer]:
        return self.team_a_players + self.team_b_players

    def to_dict(self) -> dict:
        d = {
            "match_id": self.match_id,
            "event_id": self.event_id,
            "status": self.status,
            "team_a_players": [p.to_dict() for p in self.team_a_players],
            "team_b_players": [p.to_dict() for p in self.team_b_players],
            "match_order": self.match_order,
        }
        if self.court_id is not None:
            d["court_id"] = self.court_id
        else:
            d["field_id"] = self.field_id
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Match":
        court_id = d.get("court_id")
        field_id = d.get("field_id")
        return cls(
            match_id=str(d["match_id"]),
            event_id=str(d.get("event_id", "new")),
            court_id=str(court_id) if court_id is not None else None,
            field_id=str(field_id) if field_id is not None else None,
            status=d.get("status", "scheduled"),
            team_a_players=[MatchPlayer.from_dict(p)
                            for p in d.get("team_a_players") or []],
            team_b_players=[MatchPlayer.from_dict(p)
                            for p in d.get("team_b_players") or []],
            match_order=int(d.get("match_order", 0)),
        )
