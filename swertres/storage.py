from __future__ import annotations
import logging
from pathlib import Path

from . import config

log = logging.getLogger("swertres.storage")

# Bundled past results, oldest first, one draw per line (same format as an upload).
SAMPLE_CSV = """\
4-1-7
0,9,3
2 2 8
5-6-1
7,0,4
3 9 9
1-4-6
8,2,5
6 3 0
9-7-2
2,5,1
0 8 6
4-4-3
7,1,9
3 6 2
5-0-8
1,9,4
8 3 7
6-2-2
9,5,0
2-7-3
0,1,5
4 8 9
7-3-6
3,2,1
5 9 4
1-6-8
8,0,0
6 4 7
9-1-3
"""

def _safe_read(path: Path, default: str) -> str:
    try:
        if path.exists():
            return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("could not read sample file %s: %s", path, e)
    return default

def read_sample() -> str:
    return _safe_read(config.SAMPLE_PATH, SAMPLE_CSV)
