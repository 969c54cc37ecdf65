from __future__ import annotations
from typing import Iterable, Iterator, List, Tuple

from .errors import IndexOutOfRange
from .schemas import Draw, GameSpec

class DrawCollection:
    """Accepted draws for one game, newest first.

    Inputs are assumed to be validated already. ``generation`` goes up on every
    mutation so a caller can tell whether the collection changed while it was
    waiting on something.
    """

    def __init__(self, game: GameSpec):
        self.game = game
        self._draws: List[Draw] = []
        self.generation = 0

    def __len__(self) -> int:
        return len(self._draws)

    def __iter__(self) -> Iterator[Draw]:
        return iter(self._draws)

    @property
    def draws(self) -> Tuple[Draw, ...]:
        return tuple(self._draws)

    def chronological(self) -> List[Draw]:
        return self._draws[::-1]

    def _touch(self):
        self.generation += 1

    def insert_front(self, draw: Draw):
        self._draws.insert(0, tuple(draw))
        self._touch()

    def insert_many_from_chronological(self, draws: Iterable[Draw]):
        # input is oldest first; the newest supplied draw lands at index 0
        incoming = [tuple(d) for d in draws]
        incoming.reverse()
        self._draws = incoming + self._draws
        self._touch()

    def remove_at(self, index: int) -> Draw:
        if not 0 <= index < len(self._draws):
            raise IndexOutOfRange(f"No draw at position {index} (have {len(self._draws)}).")
        draw = self._draws.pop(index)
        self._touch()
        return draw

    def clear(self):
        self._draws = []
        self._touch()

    def switch_game(self, game: GameSpec):
        self.game = game
        self.clear()
