from __future__ import annotations
from collections import Counter
from typing import Iterable, List

from .schemas import Draw, FrequencyEntry, FrequencyReport

def _digit_counts(draws: Iterable[Draw]) -> tuple[Counter, int]:
    cnt: Counter = Counter()
    total = 0
    for d in draws:
        cnt.update(d)
        total += len(d)
    return cnt, total

def frequency_table(draws: Iterable[Draw]) -> List[FrequencyEntry]:
    cnt, total = _digit_counts(draws)
    entries = [
        FrequencyEntry(value=n, count=c, percentage=(c / total) * 100 if total else 0.0)
        for n, c in cnt.items()
    ]
    # most drawn first; equal counts in numeric order
    entries.sort(key=lambda e: (-e.count, e.value))
    return entries

def hot_digits(entries: List[FrequencyEntry], digit_count: int) -> List[int]:
    return sorted(e.value for e in entries[:digit_count])

def analyze(draws: Iterable[Draw], digit_count: int) -> FrequencyReport:
    entries = frequency_table(draws)
    return FrequencyReport(entries=entries, hot_digits=hot_digits(entries, digit_count))
