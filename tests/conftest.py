import pytest

from swertres.games import get_game
from swertres.predictor import PredictionRequestor
from swertres.schemas import GameSpec, PredictionResult


class FakeRequestor(PredictionRequestor):
    enabled = True
    model = "fake-model"

    def __init__(self, result=None, error=None, during=None):
        self.result = result or PredictionResult(predicted_numbers=[1, 2, 3], analysis_summary="hot streak")
        self.error = error
        self.during = during
        self.calls = []

    async def request_prediction(self, game, chronological_draws):
        self.calls.append((game.id, list(chronological_draws)))
        if self.during:
            self.during()
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def game3d():
    return get_game("3d")


@pytest.fixture
def combo_game():
    return GameSpec(id="6/42", name="Lotto 6/42", digit_count=6, min_value=1, max_value=42,
                    order_significant=False)


@pytest.fixture
def fake_requestor():
    return FakeRequestor()
