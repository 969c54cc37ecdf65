from __future__ import annotations
from typing import List, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Annotated

Draw = Tuple[int, ...]

Digits = Annotated[List[int], Field(min_length=1)]

class GameSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    digit_count: int = Field(ge=1)
    min_value: int = 0
    max_value: int = 9
    order_significant: bool = True
    draw_days: str | None = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_value > self.max_value:
            raise ValueError(f"min_value {self.min_value} is greater than max_value {self.max_value}")
        return self

    @property
    def label(self) -> str:
        unit = "digits" if self.order_significant else "numbers"
        return f"{self.name} ({self.digit_count} {unit}, {self.min_value}-{self.max_value} each)"

class FrequencyEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int
    count: int
    percentage: float

class FrequencyReport(BaseModel):
    entries: List[FrequencyEntry] = []
    hot_digits: List[int] = []

class PredictionResult(BaseModel):
    predicted_numbers: Digits
    analysis_summary: str

# ---- HTTP payloads ----
class DrawText(BaseModel):
    text: str

class GameSelect(BaseModel):
    game_id: str

class GameOut(BaseModel):
    id: str
    name: str
    label: str
    digit_count: int
    min_value: int
    max_value: int
    order_significant: bool
    draw_days: str | None = None

    @classmethod
    def of(cls, game: GameSpec) -> "GameOut":
        return cls(label=game.label, **game.model_dump())

class SessionView(BaseModel):
    game: GameOut
    draws: List[List[int]]
    frequency: List[FrequencyEntry]
    hot_digits: List[int]
    prediction: PredictionResult | None = None
    ai_enabled: bool
    ai_error: str | None = None
    min_draws_for_ai: int
