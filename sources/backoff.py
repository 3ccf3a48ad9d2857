# sources/backoff.py
# Einziger Weg nach draußen: jeder Upstream-Call läuft hier durch

import time
import random

import requests

from core.constants import (
    BACKOFF_MAX_RETRIES,
    BACKOFF_RETRY_BASE_MS,
    BACKOFF_NETWORK_BASE_MS,
    BACKOFF_JITTER_MS,
    REQUEST_TIMEOUT,
)
from utils.log import debug_log


class UpstreamError(RuntimeError):
    """Upstream call failed for good (non-retryable status or retries exhausted)."""

    def __init__(self, message: str, category: str = "API", status: int | None = None, attempts: int = 0):
        super().__init__(message)
        self.category = category
        self.status = status
        self.attempts = attempts


def _is_retryable(status: int) -> bool:
    return status == 429 or status >= 500


def retry_delay_ms(attempt: int) -> float:
    return (2 ** attempt) * BACKOFF_RETRY_BASE_MS + random.uniform(0, BACKOFF_JITTER_MS)


def network_delay_ms(attempt: int) -> float:
    return (2 ** attempt) * BACKOFF_NETWORK_BASE_MS + random.uniform(0, BACKOFF_JITTER_MS)


def backoff_fetch(
    url: str,
    method: str = "GET",
    max_retries: int = BACKOFF_MAX_RETRIES,
    category: str = "API",
    session: requests.Session | None = None,
    **options,
) -> requests.Response:
    """
    Führt den Request aus und gibt die 2xx-Response zurück.

    - 429 / 5xx      → 2^attempt * 1000ms + jitter, danach erneut
    - andere Status  → sofort UpstreamError
    - Netzwerkfehler → 2^attempt * 500ms + jitter, danach erneut
    """
    http = session or requests
    options.setdefault("timeout", REQUEST_TIMEOUT)

    last_status = None
    for attempt in range(max_retries):
        try:
            res = http.request(method, url, **options)
        except requests.RequestException as e:
            if attempt == max_retries - 1:
                raise UpstreamError(
                    f"API failed after {max_retries} attempts: {e}",
                    category=category,
                    attempts=max_retries,
                ) from e
            delay = network_delay_ms(attempt)
            debug_log(category, f"Attempt {attempt + 1}: Network error ({e}). Retrying in {delay:.0f}ms...", True)
            time.sleep(delay / 1000)
            continue

        if res.ok:
            return res

        if not _is_retryable(res.status_code):
            raise UpstreamError(
                f"API failed with non-retryable status: {res.status_code}",
                category=category,
                status=res.status_code,
                attempts=attempt + 1,
            )

        last_status = res.status_code
        if attempt == max_retries - 1:
            break

        delay = retry_delay_ms(attempt)
        debug_log(category, f"Attempt {attempt + 1}: Received HTTP {res.status_code}. Retrying in {delay:.0f}ms...")
        time.sleep(delay / 1000)

    raise UpstreamError(
        f"API failed after {max_retries} attempts: HTTP {last_status}",
        category=category,
        status=last_status,
        attempts=max_retries,
    )


def json_body(res: requests.Response, category: str = "API"):
    try:
        return res.json()
    except ValueError as e:
        raise UpstreamError(f"[{category}] response is not valid JSON: {e}", category=category, status=res.status_code) from e
