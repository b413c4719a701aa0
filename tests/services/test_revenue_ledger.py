from decimal import Decimal

import pytest

from app.core.exceptions import ValidationError
from app.services.revenue_ledger import MANUAL_REVENUE_KEY


class TestRevenueLedger:

    async def test_defaults_to_zero(self, ledger):
        assert await ledger.get() == Decimal("0")

    async def test_add_accumulates(self, ledger):
        await ledger.add(Decimal("5"))
        await ledger.add(Decimal("10"))
        assert await ledger.get() == Decimal("15")

    async def test_add_accepts_negative_correction(self, ledger):
        await ledger.set(Decimal("20"))
        await ledger.add(Decimal("-5.50"))
        assert await ledger.get() == Decimal("14.50")

    async def test_set_overwrites(self, ledger):
        await ledger.add(Decimal("7"))
        await ledger.set(Decimal("3.25"))
        assert await ledger.get() == Decimal("3.25")

    async def test_set_zero_allowed(self, ledger):
        await ledger.set(Decimal("0"))
        assert await ledger.get() == Decimal("0")

    async def test_set_negative_rejected(self, ledger):
        await ledger.set(Decimal("4"))
        with pytest.raises(ValidationError):
            await ledger.set(Decimal("-1"))
        assert await ledger.get() == Decimal("4")

    async def test_reset(self, ledger):
        await ledger.add(Decimal("99"))
        await ledger.reset()
        assert await ledger.get() == Decimal("0")

    async def test_stored_in_content_table(self, ledger, content_store):
        await ledger.set(Decimal("12.5"))
        assert await content_store.get(MANUAL_REVENUE_KEY) == "12.5"

    async def test_unreadable_value_treated_as_zero(self, ledger, content_store):
        await content_store.put(MANUAL_REVENUE_KEY, "lots")
        assert await ledger.get() == Decimal("0")
