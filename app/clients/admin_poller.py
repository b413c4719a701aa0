import sys
import asyncio
import logging
import httpx
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from app.core.config import settings

logger = logging.getLogger(__name__)


class NewOrderTracker:
    """
    Remembers the newest order id seen by the dashboard.

    ``last_seen_order_id == 0`` means nothing has been observed yet, so the
    first poll only initializes. Several orders arriving between two polls
    produce a single signal.
    """

    def __init__(self, last_seen_order_id: int = 0):
        self.last_seen_order_id = last_seen_order_id

    def observe(self, newest_order_id: Optional[int]) -> bool:
        if newest_order_id is None:
            return False

        fired = self.last_seen_order_id > 0 and newest_order_id > self.last_seen_order_id
        self.last_seen_order_id = newest_order_id
        return fired


@dataclass
class PollResult:
    orders: List[Dict[str, Any]] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    new_order: bool = False

    @property
    def newest_order(self) -> Optional[Dict[str, Any]]:
        return self.orders[0] if self.orders else None


NewOrderCallback = Callable[[PollResult], Union[None, Awaitable[None]]]


def chime_alert(result: PollResult) -> None:
    """Default signal: banner in the log plus the terminal bell."""
    newest = result.newest_order or {}
    logger.info(
        f"🔔 New order #{newest.get('id')} from {newest.get('customer_name')} "
        f"(${float(newest.get('total') or 0):.2f}) | pending: {result.stats.get('pending', 0)}"
    )
    sys.stdout.write("\a")
    sys.stdout.flush()


class AdminPoller:
    def __init__(
            self,
            http_client: httpx.AsyncClient,
            token: Optional[str] = None,
            on_new_order: NewOrderCallback = chime_alert,
            interval: Optional[float] = None,
            status_filter: str = "all",
    ):
        self.client = http_client
        self.token = token
        self.on_new_order = on_new_order
        self.interval = interval if interval is not None else settings.ADMIN_POLL_INTERVAL_SECONDS
        self.status_filter = status_filter
        self.tracker = NewOrderTracker()
        self._stopped = asyncio.Event()

    def _get_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def login(self, username: str, password: str) -> str:
        response = await self.client.post(
            "/auth/login", json={"username": username, "password": password}, timeout=30
        )
        response.raise_for_status()
        self.token = response.json()["token"]
        return self.token

    async def fetch_orders(self) -> List[Dict[str, Any]]:
        params = {"status": self.status_filter}
        response = await self.client.get("/orders", headers=self._get_headers(), params=params, timeout=30)
        response.raise_for_status()
        return response.json()

    async def fetch_stats(self) -> Dict[str, Any]:
        response = await self.client.get("/orders/stats", headers=self._get_headers(), timeout=30)
        response.raise_for_status()
        return response.json()

    async def poll_once(self) -> PollResult:
        stats = await self.fetch_stats()
        orders = await self.fetch_orders()

        result = PollResult(orders=orders, stats=stats)
        newest = result.newest_order
        result.new_order = self.tracker.observe(newest["id"] if newest else None)

        if result.new_order:
            outcome = self.on_new_order(result)
            if asyncio.iscoroutine(outcome):
                await outcome
        return result

    async def refresh(self) -> PollResult:
        """Manual refresh, same as a timer tick."""
        return await self.poll_once()

    async def run(self) -> None:
        logger.info(f"Admin poller started, every {self.interval:g}s")
        while not self._stopped.is_set():
            try:
                await self.poll_once()
            except httpx.HTTPError as e:
                logger.error(f"Poll failed: {e}")
            except (ValueError, KeyError) as e:
                logger.error(f"Poll returned an unexpected payload: {e!r}")

            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Admin poller stopped.")

    def stop(self) -> None:
        self._stopped.set()


async def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - [%(levelname)s] - %(name)s - %(message)s",
    )
    async with httpx.AsyncClient(base_url=settings.ADMIN_API_URL) as client:
        poller = AdminPoller(client)
        await poller.login(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        await poller.run()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
