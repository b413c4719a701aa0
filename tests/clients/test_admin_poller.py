"""Admin poller: new-order detection and polling against the live app."""

import httpx

from app.clients.admin_poller import AdminPoller, NewOrderTracker


ORDER = {
    "customerName": "Jane",
    "customerPhone": "555-1111",
    "items": "1x Concha",
    "total": 3.5,
}


class TestNewOrderTracker:

    def test_first_observation_only_initializes(self):
        tracker = NewOrderTracker()
        assert tracker.observe(7) is False
        assert tracker.last_seen_order_id == 7

    def test_fires_once_for_several_new_orders(self):
        tracker = NewOrderTracker(last_seen_order_id=7)
        assert tracker.observe(9) is True
        assert tracker.last_seen_order_id == 9

    def test_same_id_does_not_fire(self):
        tracker = NewOrderTracker(last_seen_order_id=9)
        assert tracker.observe(9) is False

    def test_lower_id_updates_without_firing(self):
        # newest order was deleted between polls
        tracker = NewOrderTracker(last_seen_order_id=9)
        assert tracker.observe(8) is False
        assert tracker.last_seen_order_id == 8

    def test_empty_list(self):
        tracker = NewOrderTracker(last_seen_order_id=3)
        assert tracker.observe(None) is False
        assert tracker.last_seen_order_id == 3


class TestAdminPoller:

    async def _place(self, client, count=1):
        ids = []
        for _ in range(count):
            ids.append((await client.post("/orders", json=ORDER)).json()["orderId"])
        return ids

    async def test_scenario_c_single_signal_for_two_orders(self, client, staff_token):
        signals = []
        poller = AdminPoller(client, token=staff_token, on_new_order=signals.append)

        ids = await self._place(client, 7)
        first = await poller.poll_once()
        assert first.new_order is False
        assert poller.tracker.last_seen_order_id == ids[-1]

        more = await self._place(client, 2)
        second = await poller.poll_once()

        assert second.new_order is True
        assert len(signals) == 1
        assert poller.tracker.last_seen_order_id == more[-1]
        assert signals[0].newest_order["id"] == more[-1]
        assert signals[0].stats["pending"] == 9

    async def test_quiet_poll_after_signal(self, client, staff_token):
        signals = []
        poller = AdminPoller(client, token=staff_token, on_new_order=signals.append)

        await self._place(client)
        await poller.poll_once()
        await self._place(client)
        await poller.refresh()
        await poller.refresh()

        assert len(signals) == 1

    async def test_async_callback(self, client, staff_token):
        seen = []

        async def on_new(result):
            seen.append(result.newest_order["id"])

        poller = AdminPoller(client, token=staff_token, on_new_order=on_new)
        await self._place(client)
        await poller.poll_once()
        new_id = (await self._place(client))[0]
        await poller.poll_once()

        assert seen == [new_id]

    async def test_login(self, client):
        from app.core.config import settings

        poller = AdminPoller(client)
        token = await poller.login(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        assert token
        result = await poller.poll_once()
        assert result.orders == []

    async def test_run_stops(self, client, staff_token):
        polls = []
        poller = AdminPoller(client, token=staff_token, interval=0.01)

        original = poller.poll_once

        async def counting_poll():
            polls.append(1)
            if len(polls) == 3:
                poller.stop()
            return await original()

        poller.poll_once = counting_poll
        await poller.run()
        assert len(polls) == 3


class TestMalformedResponses:

    def _poller(self, body: bytes, stop_after: int):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            if len(calls) >= stop_after:
                poller.stop()
            return httpx.Response(200, content=body, headers={"content-type": "application/json"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        poller = AdminPoller(client, token="t", interval=0.01)
        return poller, client, calls

    async def test_invalid_json_keeps_polling(self):
        poller, client, calls = self._poller(b"<html>gateway error</html>", stop_after=3)
        async with client:
            await poller.run()
        assert len(calls) == 3

    async def test_order_without_id_keeps_polling(self):
        poller, client, calls = self._poller(b'[{"customer_name": "Jane"}]', stop_after=4)
        async with client:
            await poller.run()
        # each tick fetches stats then orders
        assert calls == ["/orders/stats", "/orders"] * 2
