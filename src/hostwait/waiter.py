"""Sweep loop that blocks until every target accepts connections."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from tenacity import Retrying, retry_if_result, wait_fixed

from .probe import probe
from .targets import Target

logger = logging.getLogger("hostwait")

Prober = Callable[[Target], bool]
Clock = Callable[[], float]


class TargetStatus(Enum):
    """Readiness of a single target within a session."""

    UNKNOWN = auto()
    AVAILABLE = auto()
    UNAVAILABLE = auto()


@dataclass
class WaitSession:
    """State of one wait run.

    Statuses are keyed by :attr:`Target.address`. Duplicate targets share one
    entry, and an ``AVAILABLE`` entry is final.
    """

    targets: List[Target]
    timeout: int
    retry_interval: int
    started_at: float
    clock: Clock = field(default=time.monotonic, repr=False)
    statuses: Dict[str, TargetStatus] = field(default_factory=dict)

    @classmethod
    def start(
        cls,
        targets: Iterable[Target],
        timeout: int,
        retry_interval: int,
        *,
        clock: Clock = time.monotonic,
    ) -> "WaitSession":
        unique: Dict[str, Target] = {}
        for target in targets:
            unique.setdefault(target.address, target)
        return cls(
            targets=list(unique.values()),
            timeout=timeout,
            retry_interval=retry_interval,
            started_at=clock(),
            clock=clock,
            statuses={address: TargetStatus.UNKNOWN for address in unique},
        )

    def status(self, target: Target) -> TargetStatus:
        return self.statuses[target.address]

    def mark(self, target: Target, status: TargetStatus) -> None:
        if self.statuses[target.address] is TargetStatus.AVAILABLE:
            return
        self.statuses[target.address] = status

    def pending(self) -> List[Target]:
        return [t for t in self.targets if self.statuses[t.address] is not TargetStatus.AVAILABLE]

    @property
    def all_ready(self) -> bool:
        return all(status is TargetStatus.AVAILABLE for status in self.statuses.values())

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def timed_out(self) -> bool:
        return self.elapsed() >= self.timeout


def _fields(target: Target) -> Dict[str, Any]:
    return {"host": target.host, "port": target.port}


class WaitEvents:
    """Progress notifications emitted by :class:`Waiter`.

    The base implementation ignores every event.
    """

    def checking(self, target: Target) -> None:
        pass

    def available(self, target: Target) -> None:
        pass

    def unavailable(self, target: Target) -> None:
        pass

    def all_available(self) -> None:
        pass

    def timed_out(self, pending: Sequence[Target]) -> None:
        pass


class LoggingEvents(WaitEvents):
    """Write wait progress to the ``hostwait`` logger."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self._log = log

    def checking(self, target: Target) -> None:
        self._log.debug("Checking availability", extra=_fields(target))

    def available(self, target: Target) -> None:
        self._log.info("Host is available", extra=_fields(target))

    def unavailable(self, target: Target) -> None:
        self._log.debug("Host is not available yet", extra=_fields(target))

    def all_available(self) -> None:
        self._log.info("All hosts are available!")

    def timed_out(self, pending: Sequence[Target]) -> None:
        self._log.warning(
            "Timeout reached. Not all hosts became available.",
            extra={"pending": [target.address for target in pending]},
        )


class Waiter:
    """Probe targets in sweeps until all are ready or the timeout passes."""

    def __init__(
        self,
        prober: Prober = probe,
        events: Optional[WaitEvents] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._prober = prober
        self.events = events if events is not None else LoggingEvents()
        self._sleep = sleep
        self._clock = clock

    def start(self, targets: Iterable[Target], timeout: int, retry_interval: int) -> WaitSession:
        return WaitSession.start(targets, timeout, retry_interval, clock=self._clock)

    def sweep(self, session: WaitSession) -> bool:
        """Probe every pending target once and report whether all are ready."""

        for target in session.pending():
            self.events.checking(target)
            if self._prober(target):
                session.mark(target, TargetStatus.AVAILABLE)
                self.events.available(target)
            else:
                session.mark(target, TargetStatus.UNAVAILABLE)
                self.events.unavailable(target)
        return session.all_ready

    def run(self, session: WaitSession) -> bool:
        # The deadline is only checked between sweeps, never during a probe.
        controller = Retrying(
            retry=retry_if_result(lambda ready: not ready),
            stop=lambda _state: session.timed_out(),
            wait=wait_fixed(max(session.retry_interval, 0)),
            sleep=self._sleep,
            retry_error_callback=lambda state: state.outcome.result(),
        )
        if controller(self.sweep, session):
            self.events.all_available()
            return True
        self.events.timed_out(session.pending())
        return False


def wait_for_all(
    targets: Iterable[Target],
    timeout: int,
    retry_interval: int,
    *,
    prober: Prober = probe,
    events: Optional[WaitEvents] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Clock = time.monotonic,
) -> bool:
    """Block until every target accepts TCP connections.

    Returns ``True`` once all targets have answered and ``False`` when the
    timeout is reached first. Targets that became available stay available
    even if the overall result is ``False``.
    """

    waiter = Waiter(prober, events, sleep=sleep, clock=clock)
    return waiter.run(waiter.start(targets, timeout, retry_interval))
