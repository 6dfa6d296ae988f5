"""Background thread that garbage-collects expired pending authorizations."""

from __future__ import annotations

import logging
import threading

from passport.services.oauth.coordinator import OAuthExchangeCoordinator

log = logging.getLogger(__name__)


class PendingAuthorizationSweeper:
    """
    Run :meth:`OAuthExchangeCoordinator.sweep` every ``interval`` seconds.

    The thread is a daemon so it never blocks interpreter shutdown.
    """

    def __init__(self, coordinator: OAuthExchangeCoordinator, interval: float) -> None:
        self.coordinator = coordinator
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="pending-authorization-sweeper", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.coordinator.sweep()
            except Exception:  # noqa: BLE001
                log.exception("oauth.sweep_failed")
