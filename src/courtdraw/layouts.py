"""Court layout catalog and match-type to layout selection."""

from courtdraw.models import CourtLayout, PositionSlot, TeamSide

A = TeamSide.A
B = TeamSide.B

TENNIS_SINGLES = CourtLayout(
    sport_id="tennis",
    name="Tennis Singles",
    positions=(
        PositionSlot("a_center", "", A, 25, 50),
        PositionSlot("b_center", "", B, 75, 50),
    ),
)

TENNIS_DOUBLES = CourtLayout(
    sport_id="tennis",
    name="Tennis Doubles",
    positions=(
        PositionSlot("a_deuce", "", A, 25, 25),
        PositionSlot("a_ad", "", A, 25, 75),
        PositionSlot("b_deuce", "", B, 75, 25),
        PositionSlot("b_ad", "", B, 75, 75),
    ),
)

PICKLEBALL_DOUBLES = CourtLayout(
    sport_id="pickleball",
    name="Pickleball Doubles",
    positions=(
        PositionSlot("a_left", "", A, 25, 30),
        PositionSlot("a_right", "", A, 25, 70),
        PositionSlot("b_left", "", B, 75, 30),
        PositionSlot("b_right", "", B, 75, 70),
    ),
)

GENERIC_FIELD = CourtLayout(
    sport_id="generic",
    name="Field",
    positions=(
        PositionSlot("a_pos1", "1", A, 20, 30),
        PositionSlot("a_pos2", "2", A, 20, 50),
        PositionSlot("a_pos3", "3", A, 20, 70),
        PositionSlot("b_pos1", "1", B, 80, 30),
        PositionSlot("b_pos2", "2", B, 80, 50),
        PositionSlot("b_pos3", "3", B, 80, 70),
    ),
)

LAYOUTS: dict[str, CourtLayout] = {
    layout.name: layout
    for layout in (TENNIS_SINGLES, TENNIS_DOUBLES, PICKLEBALL_DOUBLES,
                   GENERIC_FIELD)
}

RACQUET_KEYWORDS = ("tennis", "pickleball", "racquet")


def is_singles(name: str) -> bool:
    return "singles" in name.lower()


def is_doubles(name: str) -> bool:
    return "doubles" in name.lower()


def is_racquet_name(name: str) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in RACQUET_KEYWORDS)


def select_layout(match_type_name: str | None) -> CourtLayout:
    """Pick the court layout for a match type display name.

    singles -> tennis singles, doubles -> tennis doubles, any other racquet
    sport name -> tennis doubles, everything else (including no match type)
    -> the generic field layout.
    """
    name = match_type_name or ""
    if is_singles(name):
        return TENNIS_SINGLES
    if is_doubles(name):
        return TENNIS_DOUBLES
    if is_racquet_name(name):
        return TENNIS_DOUBLES
    return GENERIC_FIELD


def layout_for_match_types(match_types: dict[str, str],
                           selected_ids: list[str]) -> CourtLayout:
    """Resolve the layout from the first selected match type in the catalog."""
    selected = {str(i) for i in selected_ids}
    for type_id, name in match_types.items():
        if str(type_id) in selected:
            return select_layout(name)
    return select_layout(None)
