from __future__ import annotations
from typing import Dict, List
from .errors import UnknownGame
from .schemas import GameSpec

GAMES: List[GameSpec] = [
    GameSpec(
        id="3d",
        name="3 Digit Lotto (Swertres)",
        digit_count=3,
        min_value=0,
        max_value=9,
        order_significant=True,
        draw_days="Daily 2PM, 5PM, 9PM",
    ),
    # More PCSO games slot in here, e.g.
    # GameSpec(id="6/42", name="Lotto 6/42", digit_count=6, min_value=1, max_value=42,
    #          order_significant=False, draw_days="Tue, Thu, Sat"),
]

GAMES_BY_ID: Dict[str, GameSpec] = {g.id: g for g in GAMES}

DEFAULT_GAME_ID = GAMES[0].id

def get_game(game_id: str) -> GameSpec:
    try:
        return GAMES_BY_ID[game_id]
    except KeyError:
        raise UnknownGame(f"Unknown game '{game_id}'.") from None

def default_game() -> GameSpec:
    return GAMES_BY_ID[DEFAULT_GAME_ID]
