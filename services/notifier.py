"""Best-effort delivery of thermal readings to an external device."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Optional

import httpx

from models.thermal import ThermalState

logger = logging.getLogger(__name__)


class NotifyDeliveryError(RuntimeError):
    """An outbound request failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class Notifier:
    """Sends ``GET <endpoint>?kernel_task=<cpu>&state=<State_Name>``.

    Requests run on a single background worker. A new notification is dropped
    while the previous one is still in flight, so at most one request per
    cycle goes out and nothing queues up behind a slow device.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notifier")
        self._inflight: Optional[Future[bool]] = None
        self._inflight_lock = Lock()

    @staticmethod
    def build_params(cpu_percent: float, state: ThermalState) -> dict[str, str]:
        return {"kernel_task": f"{cpu_percent:.1f}", "state": state.slug}

    def build_url(self, cpu_percent: float, state: ThermalState) -> httpx.URL:
        """Endpoint URL with the reading merged into any query it already has."""
        return httpx.URL(self.endpoint).copy_merge_params(self.build_params(cpu_percent, state))

    def deliver(self, cpu_percent: float, state: ThermalState) -> None:
        """Issue the request synchronously, raising ``NotifyDeliveryError`` on failure."""
        try:
            response = self._client.get(self.build_url(cpu_percent, state))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotifyDeliveryError(
                f"Endpoint returned status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.InvalidURL as exc:
            raise NotifyDeliveryError(f"Invalid endpoint URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise NotifyDeliveryError(f"Request to endpoint failed: {exc}") from exc

    def notify(self, cpu_percent: float, state: ThermalState) -> Optional[Future[bool]]:
        """Schedule delivery without waiting; returns ``None`` when dropped."""
        with self._inflight_lock:
            if self._inflight is not None and not self._inflight.done():
                logger.debug(
                    "Previous notification still in flight, dropping",
                    extra={"endpoint": self.endpoint},
                )
                return None
            future = self._executor.submit(self._deliver_quietly, cpu_percent, state)
            self._inflight = future
        return future

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    def _deliver_quietly(self, cpu_percent: float, state: ThermalState) -> bool:
        try:
            self.deliver(cpu_percent, state)
        except NotifyDeliveryError as exc:
            logger.warning(
                "Notification not delivered",
                extra={"endpoint": self.endpoint, "reason": exc, "status_code": exc.status_code},
            )
            return False
        logger.debug(
            "Notification delivered",
            extra={"cpu_percent": f"{cpu_percent:.1f}", "state": state.value},
        )
        return True
