"""Retry policy for outbound calls and a first-success combinator over candidates."""

from __future__ import annotations

import errno
import logging
import socket
import ssl
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Tuple, TypeVar

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")

RETRYABLE_ERRNOS = {
    errno.ECONNRESET,
    errno.ETIMEDOUT,
    errno.ECONNREFUSED,
}


def _error_chain(exc: BaseException) -> Iterable[BaseException]:
    """Walk explicit causes, implicit context and urllib3 ``reason`` wrappers breadth first."""
    seen = set()
    pending: List[BaseException] = [exc]
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__, getattr(current, "reason", None)):
            if isinstance(linked, BaseException):
                pending.append(linked)


def is_retryable_network_error(exc: BaseException) -> bool:
    """Connection resets, timeouts, DNS failures and refused connections are transient.

    Certificate and TLS failures are never retried, even when a reset shows up
    further down the chain. A bare ``requests.ConnectionError`` without a
    recognisable cause is not retried either.
    """
    for err in _error_chain(exc):
        if isinstance(err, (requests.exceptions.SSLError, ssl.SSLError)):
            return False
    for err in _error_chain(exc):
        if isinstance(err, requests.Timeout):
            return True
        if isinstance(err, (ConnectionResetError, ConnectionRefusedError, TimeoutError, socket.gaierror)):
            return True
        if isinstance(err, OSError) and err.errno in RETRYABLE_ERRNOS:
            return True
    return False


def linear_backoff(step: float) -> Callable[[int], float]:
    return lambda attempt: step * attempt


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=lambda: linear_backoff(0.4))
    retryable: Callable[[BaseException], bool] = is_retryable_network_error
    sleep: Callable[[float], None] = time.sleep

    def run(self, task_name: str, fn: Callable[[], T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return fn()
            except Exception as exc:
                if attempt >= self.max_attempts or not self.retryable(exc):
                    raise
                delay = self.backoff(attempt)
                logger.warning(
                    "%s failed (attempt %s/%s): %s. Retrying in %.1fs",
                    task_name,
                    attempt,
                    self.max_attempts,
                    exc,
                    delay,
                )
                self.sleep(delay)


class AllCandidatesFailed(RuntimeError):
    def __init__(self, failures: List[Tuple[object, BaseException]]):
        self.failures = failures
        summary = "; ".join(f"{candidate}: {exc}" for candidate, exc in failures) or "no candidates"
        super().__init__(f"All candidates failed: {summary}")


def first_success(candidates: Iterable[C], attempt: Callable[[C], T]) -> Tuple[C, T]:
    """Try candidates in order; return the first ``(candidate, result)`` that does not raise."""
    failures: List[Tuple[object, BaseException]] = []
    for candidate in candidates:
        try:
            return candidate, attempt(candidate)
        except Exception as exc:
            failures.append((candidate, exc))
    raise AllCandidatesFailed(failures)
