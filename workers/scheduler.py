# ===================================================
# ⏰ SCHEDULER – zwei unabhängige Takte, ein Snapshot
# Fast-Cycle sofort, Price-Cycle versetzt (Stagger)
# ===================================================

import time
import threading
from concurrent.futures import ThreadPoolExecutor

import requests

from core.snapshot import CacheSnapshot
from sources.helius import HeliusClient
from sources.coingecko import CoinGeckoClient
from sources.price_memo import SolPriceHistory
from sources.forecast import ForecastClient
from workers.cache.fast_cycle_worker import FastCycle
from workers.cache.price_cycle_worker import PriceCycle
from utils.log import debug_log


class RecurringTask:
    """
    Fixed-rate ticker with a stop event as cancellation token.

    The ticker thread only dispatches; each run executes on the pool, so a
    slow run never shifts the next deadline and runs may overlap. At most
    ``max_in_flight`` runs are running or queued; a tick that finds every
    slot taken is dropped, not queued.
    """

    def __init__(
        self,
        name: str,
        interval_s: float,
        target,
        initial_delay_s: float = 0.0,
        executor: ThreadPoolExecutor | None = None,
        clock=time.monotonic,
        max_in_flight: int = 2,
    ):
        if interval_s <= 0:
            raise ValueError(f"[SCHEDULER] {name}: interval must be positive")
        if max_in_flight < 1:
            raise ValueError(f"[SCHEDULER] {name}: max_in_flight must be at least 1")

        self.name = name
        self.interval_s = interval_s
        self.target = target
        self.initial_delay_s = max(0.0, initial_delay_s)
        self.clock = clock
        self.max_in_flight = max_in_flight
        self.runs_dispatched = 0
        self.runs_skipped = 0

        self._executor = executor
        self._owns_executor = executor is None
        self._slots = threading.BoundedSemaphore(max_in_flight)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.is_running:
            return

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_in_flight, thread_name_prefix=self.name)

        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name=f"{self.name}-ticker", daemon=True)
        self._thread.start()
        debug_log(
            "SCHEDULER",
            f"{self.name} armed (first run in {self.initial_delay_s:.0f}s, every {self.interval_s:.0f}s)",
        )

    def _loop(self):
        next_run = self.clock() + self.initial_delay_s

        while not self._stop.wait(max(0.0, next_run - self.clock())):
            self._dispatch()
            next_run += self.interval_s

            # verpasste Ticks nicht als Burst nachholen
            now = self.clock()
            if next_run < now:
                next_run = now

    def _dispatch(self):
        if not self._slots.acquire(blocking=False):
            self.runs_skipped += 1
            debug_log(
                "SCHEDULER",
                f"{self.name} tick skipped: {self.max_in_flight} runs still in flight",
                True,
            )
            return

        try:
            self._executor.submit(self._run_once)
        except RuntimeError:
            # Pool schon heruntergefahren
            self._slots.release()
            return
        self.runs_dispatched += 1

    def _run_once(self):
        try:
            self.target()
        except Exception as e:
            debug_log("SCHEDULER", f"{self.name} run crashed: {e}", True)
        finally:
            self._slots.release()

    def stop(self, timeout: float | None = None):
        self._stop.set()

        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

        debug_log("SCHEDULER", f"{self.name} stopped after {self.runs_dispatched} runs")


class CacheScheduler:

    def __init__(self, fast_cycle, price_cycle, settings):
        self.fast_task = RecurringTask(
            "fast-cycle",
            settings.fast_cycle_seconds,
            fast_cycle.run,
            initial_delay_s=0,
        )
        self.price_task = RecurringTask(
            "price-cycle",
            settings.price_cycle_seconds,
            price_cycle.run,
            initial_delay_s=settings.price_stagger_seconds,
        )

    def start(self):
        self.fast_task.start()
        self.price_task.start()

    def stop(self, timeout: float | None = None):
        self.fast_task.stop(timeout)
        self.price_task.stop(timeout)


# ==========================================================
# 🔹 Verdrahtung: Settings → Clients → Cycles
def build_cycles(settings, snapshot: CacheSnapshot, session: requests.Session | None = None):
    session = session or requests.Session()

    helius = HeliusClient(settings, session=session)
    price_history = SolPriceHistory(
        CoinGeckoClient(settings, session=session),
        memo_path=settings.price_cache_path,
    )
    forecast = ForecastClient(settings.forecast_api_url, session=session)

    fast_cycle = FastCycle(snapshot, helius, price_history, forecast)
    price_cycle = PriceCycle(snapshot, helius)
    return fast_cycle, price_cycle


def build_cache_scheduler(settings, snapshot: CacheSnapshot) -> CacheScheduler:
    fast_cycle, price_cycle = build_cycles(settings, snapshot)
    return CacheScheduler(fast_cycle, price_cycle, settings)
