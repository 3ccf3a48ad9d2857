# ==================================================
# ⚙️ CACHE WORKER PROCESS – Einmal-Lauf (Diagnose)
# Ein Fast-Cycle + ein Price-Cycle, Snapshot als JSON
# ==================================================

import os
import sys
import json

PROJECT_ROOT = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "../../")
)
sys.path.insert(0, PROJECT_ROOT)

from core.config import load_tracker_env, load_settings, require_settings
from core.snapshot import CacheSnapshot
from workers.scheduler import build_cycles


def run_once() -> dict:
    load_tracker_env()
    settings = require_settings(load_settings())

    snapshot = CacheSnapshot()
    fast_cycle, price_cycle = build_cycles(settings, snapshot)

    fast_ok = fast_cycle.run()
    price_ok = price_cycle.run()

    view = snapshot.read()
    return {
        "fastCycleOk": fast_ok,
        "priceCycleOk": price_ok,
        "burn": view.burn_payload(),
        "wallet": view.wallet_payload(),
    }


if __name__ == "__main__":
    print("[CACHE WORKER PROCESS] started (one-shot)")
    try:
        print(json.dumps(run_once(), indent=2))
    except KeyboardInterrupt:
        print("[CACHE WORKER PROCESS] stopped by Ctrl+C")
