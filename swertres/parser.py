from __future__ import annotations
import re
from typing import List, NamedTuple, Tuple, Union

from .errors import DrawValidationError, DuplicateValue, NotNumeric, OutOfRange, WrongCount
from .schemas import Draw, GameSpec

SEPARATORS = re.compile(r"[,\-\s]+")
LINE_BREAKS = re.compile(r"\r\n|\n")
# plain ASCII decimals only: no underscores, no non-Latin digits, no inf/nan
NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

ERROR_PREVIEW = 5

class BatchResult(NamedTuple):
    draws: List[Draw]
    errors: List[Tuple[int, DrawValidationError]]

def _unit(spec: GameSpec) -> str:
    return "digits" if spec.order_significant else "numbers"

def _to_number(token: str) -> Union[int, float]:
    if not NUMBER.fullmatch(token):
        raise ValueError(token)
    try:
        return int(token)
    except ValueError:
        return float(token)

def parse_draw(raw_text: str, spec: GameSpec) -> Draw:
    tokens = [t.strip() for t in SEPARATORS.split(raw_text) if t.strip()]

    if len(tokens) != spec.digit_count:
        raise WrongCount(raw_text,
            f'Please enter exactly {spec.digit_count} {_unit(spec)} for {spec.name}. '
            f'You entered {len(tokens)}. Input: "{raw_text}"')

    try:
        numbers = [_to_number(t) for t in tokens]
    except ValueError:
        kind = f"numeric digits ({spec.min_value}-{spec.max_value})" if spec.order_significant else "numbers"
        raise NotNumeric(raw_text, f'All inputs must be {kind}. Input: "{raw_text}"') from None

    if any((isinstance(n, float) and not n.is_integer()) or not spec.min_value <= n <= spec.max_value
           for n in numbers):
        if spec.order_significant:
            reason = f"Each digit must be an integer between {spec.min_value} and {spec.max_value}."
        else:
            reason = f"All numbers must be integers between {spec.min_value} and {spec.max_value}."
        raise OutOfRange(raw_text, f'{reason} Input: "{raw_text}"')

    draw = [int(n) for n in numbers]
    if spec.order_significant:
        return tuple(draw)

    if len(set(draw)) != spec.digit_count:
        raise DuplicateValue(raw_text,
            f'All numbers in a draw must be unique for this game type. Input: "{raw_text}"')
    return tuple(sorted(draw))

def split_lines(text: str) -> List[str]:
    return [line.strip() for line in LINE_BREAKS.split(text) if line.strip()]

def parse_draw_batch(text: str, spec: GameSpec) -> BatchResult:
    """Parse one draw per line, collecting every failure instead of stopping at the first.

    Line numbers count the non-blank lines, starting at 1.
    """
    draws: List[Draw] = []
    errors: List[Tuple[int, DrawValidationError]] = []
    for no, line in enumerate(split_lines(text), start=1):
        try:
            draws.append(parse_draw(line, spec))
        except DrawValidationError as e:
            errors.append((no, e))
    return BatchResult(draws, errors)

def format_batch_errors(errors: List[Tuple[int, DrawValidationError]], heading: str,
                        preview: int = ERROR_PREVIEW) -> str:
    lines = [f"- Line {no} ('{e.raw_text}'): {e.reason}" for no, e in errors[:preview]]
    out = f"{heading}\n" + "\n".join(lines)
    if len(errors) > preview:
        out += f"\n...and {len(errors) - preview} more errors."
    return out
