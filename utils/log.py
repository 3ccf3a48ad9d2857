# =======================================================
# 🪵 DEBUG LOG – one tagged line per event
# [2025-01-01T12:00:00.000Z] [CATEGORY] message
# =======================================================

import sys

from utils.time_helpers import utc_now_iso


def debug_log(category: str, message: str, is_error: bool = False) -> None:
    stream = sys.stderr if is_error else sys.stdout
    print(f"[{utc_now_iso()}] [{category.upper()}] {message}", file=stream, flush=True)
