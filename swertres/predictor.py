from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
import re
from typing import Any, Dict, List, Optional, Sequence

import httpx

from . import config
from .errors import InvalidPredictionValue, MalformedResponse, ServiceUnavailable
from .schemas import Draw, GameSpec, PredictionResult

log = logging.getLogger("swertres.predictor")

HEADERS = {"Content-Type": "application/json", "User-Agent": "swertres-predict/1.0"}

FENCE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.S)

# ---------------- prompt ----------------
def _history(draws: Sequence[Draw]) -> str:
    return "; ".join("-".join(str(n) for n in d) for d in draws)

def build_prompt(game: GameSpec, chronological_draws: Sequence[Draw]) -> str:
    history = _history(chronological_draws)
    k, lo, hi = game.digit_count, game.min_value, game.max_value
    positions = ", ".join(f"d{i}" for i in range(1, k + 1))
    example = "-".join(f"d{i}" for i in range(1, k + 1))
    shape = "\n".join([
        "Return your response ONLY as a JSON object with the following structure:",
        "{",
        f'  "predictedNumbers": [{positions}],',
        '  "analysisSummary": "Your brief analysis and strategy here."',
        "}",
    ])

    if game.order_significant:
        return f"""
You are a lottery analysis expert specializing in the Philippine {game.name}.
The game consists of drawing {k} digits, each from {lo} to {hi}. The order of the digits ({positions}) matters.
Recent draw results are provided below, ordered from OLDEST to NEWEST (e.g., {example}; ...; latest):
{history}

1. Analyze these historical results. Consider digit frequencies ({lo}-{hi} for each position), their positions, common pairs across positions, triplets, sequences, sums, or any other observable patterns or trends leading up to the most recent draw.
2. Based on your comprehensive analysis of the provided sequence, predict the next {k}-digit combination ({positions}) that would follow the LATEST draw. Remember, digits can repeat, and each digit must be between {lo} and {hi}.
3. Provide a brief, simple explanation (max 2-3 sentences) for your prediction strategy.

{shape}
Ensure the "predictedNumbers" array contains exactly {k} digits, each an integer between {lo} and {hi} inclusive. The order in the array should be your predicted {positions}.
Do not include any preamble, markdown formatting (like ```json), or explanations outside the JSON object itself.
""".strip()

    return f"""
You are a lottery analysis expert.
Given the following recent draw results for the Philippine {game.name} (where {k} numbers are drawn from {lo} to {hi}), ordered OLDEST to NEWEST:
{history}

1. Analyze the frequency of each number from these results and any emerging trends.
2. Based on this analysis, predict {k} numbers for the next draw.
3. Provide a brief, simple explanation for your prediction strategy.

{shape}
Ensure the predictedNumbers array contains {k} unique numbers, sorted in ascending order, and each number is within the range.
Do not include any preamble, markdown formatting (like ```json), or explanations outside the JSON object itself.
""".strip()

# ---------------- response ----------------
def strip_code_fence(text: str) -> str:
    text = text.strip()
    m = FENCE.match(text)
    if m and m.group(2):
        return m.group(2).strip()
    return text

def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None

def normalize_prediction(raw_text: str, game: GameSpec) -> PredictionResult:
    try:
        data = json.loads(strip_code_fence(raw_text))
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Failed to parse AI response as JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponse("Invalid JSON structure from AI. Expected a JSON object.")
    numbers, summary = data.get("predictedNumbers"), data.get("analysisSummary")
    if not isinstance(numbers, list) or not isinstance(summary, str) or not summary:
        raise MalformedResponse(
            "Invalid JSON structure from AI. Missing 'predictedNumbers' or 'analysisSummary', "
            "or 'predictedNumbers' is not an array.")

    unit = "digits" if game.order_significant else "numbers"
    if len(numbers) != game.digit_count:
        raise InvalidPredictionValue(
            f"AI predicted {len(numbers)} {unit}, but exactly {game.digit_count} were expected for {game.name}.",
            value=numbers)

    values: List[int] = []
    for pos, raw in enumerate(numbers, start=1):
        n = _as_int(raw)
        if n is None or not game.min_value <= n <= game.max_value:
            raise InvalidPredictionValue(
                f"AI predicted an invalid value: '{raw}' at position {pos}. "
                f"Each value must be an integer between {game.min_value} and {game.max_value}.",
                value=raw, position=pos)
        values.append(n)

    if not game.order_significant:
        unique = sorted(set(values))
        if len(unique) != game.digit_count:
            raise InvalidPredictionValue(
                f"AI prediction processing error: Expected {game.digit_count} unique numbers, "
                f"but got {len(unique)} after removing duplicates.",
                value=values)
        values = unique

    return PredictionResult(predicted_numbers=values, analysis_summary=summary)

def _candidate_text(payload: Dict[str, Any]) -> str:
    try:
        parts = payload["candidates"][0]["content"]["parts"]
        text = "".join(p.get("text", "") for p in parts)
    except (KeyError, IndexError, TypeError, AttributeError):
        raise MalformedResponse("AI response did not contain any candidate text.") from None
    if not text.strip():
        raise MalformedResponse("AI response did not contain any candidate text.")
    return text

# ---------------- requestors ----------------
class PredictionRequestor(ABC):
    """Asks the model for the next draw. Callers must pass at least MIN_DRAWS_FOR_AI draws."""

    enabled = False
    model: str | None = None

    @abstractmethod
    async def request_prediction(self, game: GameSpec, chronological_draws: Sequence[Draw]) -> PredictionResult:
        ...

class DisabledRequestor(PredictionRequestor):
    async def request_prediction(self, game, chronological_draws):
        raise ServiceUnavailable(
            "Gemini AI features are disabled. The API_KEY environment variable is not set.")

class GeminiRequestor(PredictionRequestor):
    enabled = True

    def __init__(self, api_key: str, model: str = config.GEMINI_MODEL, base_url: str = config.GEMINI_BASE,
                 temperature: float = config.GEMINI_TEMPERATURE, timeout: httpx.Timeout = config.GEMINI_TIMEOUT,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json", "temperature": self.temperature},
        }

    async def _generate(self, prompt: str) -> Dict[str, Any]:
        headers = {**HEADERS, "x-goog-api-key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.post(self.url, json=self.payload(prompt), headers=headers)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ServiceUnavailable(
                f"Failed to get AI prediction: HTTP {e.response.status_code} from model endpoint.") from e
        except httpx.HTTPError as e:
            raise ServiceUnavailable(f"Failed to get AI prediction: {e.__class__.__name__}: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponse("Model endpoint returned a non-JSON body.") from e

    async def request_prediction(self, game: GameSpec, chronological_draws: Sequence[Draw]) -> PredictionResult:
        prompt = build_prompt(game, chronological_draws)
        log.info("requesting prediction: game=%s draws=%d model=%s", game.id, len(chronological_draws), self.model)
        payload = await self._generate(prompt)
        return normalize_prediction(_candidate_text(payload), game)

def make_requestor(api_key: str | None = None, **kw) -> PredictionRequestor:
    if not api_key:
        log.warning("API_KEY environment variable not set. Gemini AI features will be disabled.")
        return DisabledRequestor()
    return GeminiRequestor(api_key, **kw)
