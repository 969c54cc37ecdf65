from __future__ import annotations
import logging
from typing import Optional

from . import config
from .collection import DrawCollection
from .errors import BatchRejected, InsufficientData, LottoError, StalePrediction
from .games import default_game, get_game
from .logic import analyze
from .parser import format_batch_errors, parse_draw, parse_draw_batch, split_lines
from .predictor import PredictionRequestor
from .schemas import Draw, FrequencyReport, GameOut, PredictionResult, SessionView
from .storage import read_sample

log = logging.getLogger("swertres.state")

class LottoSession:
    """Everything the page shows: active game, its draws, derived stats and the AI result.

    Frequency data is recomputed after every draw mutation, and any held
    prediction or AI error is dropped at the same time.
    """

    def __init__(self, requestor: PredictionRequestor, game_id: Optional[str] = None):
        game = get_game(game_id) if game_id else default_game()
        self.requestor = requestor
        self.collection = DrawCollection(game)
        self.frequency = FrequencyReport()
        self.prediction: Optional[PredictionResult] = None
        self.ai_error: Optional[str] = None

    @property
    def game(self):
        return self.collection.game

    def _refresh(self):
        self.frequency = analyze(self.collection, self.game.digit_count)
        self.prediction = None
        self.ai_error = None

    # ---- game ----
    def switch_game(self, game_id: str):
        game = get_game(game_id)
        self.collection.switch_game(game)
        self._refresh()

    # ---- draws ----
    def add_draw_text(self, text: str) -> Draw:
        draw = parse_draw(text, self.game)
        self.collection.insert_front(draw)
        self._refresh()
        return draw

    def add_batch_text(self, text: str, source: str = "CSV file") -> int:
        result = parse_draw_batch(text, self.game)
        if result.errors:
            log.info("rejected %s: %d bad line(s)", source, len(result.errors))
            raise BatchRejected(format_batch_errors(result.errors, f"Errors in {source}:"), result.errors)
        if not result.draws:
            raise BatchRejected(f"{source} is empty or contains no processable lines.")
        self.collection.insert_many_from_chronological(result.draws)
        self._refresh()
        return len(result.draws)

    def load_sample(self) -> int:
        text = read_sample()
        if not split_lines(text):
            raise BatchRejected("Sample data is empty or could not be read.")
        return self.add_batch_text(text, source="sample data")

    def remove_draw(self, index: int) -> Draw:
        draw = self.collection.remove_at(index)
        self._refresh()
        return draw

    def clear(self):
        self.collection.clear()
        self._refresh()

    # ---- AI ----
    async def predict(self) -> PredictionResult:
        if len(self.collection) < config.MIN_DRAWS_FOR_AI:
            raise InsufficientData(
                f"Please add at least {config.MIN_DRAWS_FOR_AI} draw results for a better AI prediction.")

        generation, game = self.collection.generation, self.game
        self.prediction = None
        self.ai_error = None
        try:
            result = await self.requestor.request_prediction(game, self.collection.chronological())
        except LottoError as e:
            if self._is_current(generation, game):
                self.ai_error = e.message
            log.warning("AI prediction failed: %s", e.message)
            raise

        if not self._is_current(generation, game):
            log.info("discarding prediction: draws changed while the request was running")
            raise StalePrediction("Draws changed while the AI prediction was running; the result was discarded.")
        self.prediction = result
        return result

    def _is_current(self, generation: int, game) -> bool:
        return self.collection.generation == generation and self.game.id == game.id

    def snapshot(self) -> SessionView:
        return SessionView(
            game=GameOut.of(self.game),
            draws=[list(d) for d in self.collection],
            frequency=self.frequency.entries,
            hot_digits=self.frequency.hot_digits,
            prediction=self.prediction,
            ai_enabled=self.requestor.enabled,
            ai_error=self.ai_error,
            min_draws_for_ai=config.MIN_DRAWS_FOR_AI,
        )
