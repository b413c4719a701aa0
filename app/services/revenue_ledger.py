import logging
from decimal import Decimal, InvalidOperation

from app.core.exceptions import ValidationError
from app.services.content_service import ContentStore

logger = logging.getLogger(__name__)

MANUAL_REVENUE_KEY = "manual_revenue"


class RevenueLedger:
    """
    Manual (walk-in) revenue kept as a single row of the content table.

    ``add`` is a plain read-modify-write. Two concurrent adjustments can lose
    an update; staff adjust by hand, one click at a time.
    """

    def __init__(self, content_store: ContentStore):
        self.content = content_store

    async def get(self) -> Decimal:
        row = await self.content.find(MANUAL_REVENUE_KEY)
        if row is None or row.value is None:
            return Decimal("0")
        try:
            return Decimal(row.value)
        except InvalidOperation:
            logger.warning(f"Unreadable manual revenue value {row.value!r}, treating as 0")
            return Decimal("0")

    async def add(self, amount: Decimal) -> Decimal:
        # Negative amounts are accepted so staff can correct a mistaken entry.
        current = await self.get()
        new_value = current + Decimal(amount)
        await self._write(new_value)
        return new_value

    async def set(self, amount: Decimal) -> Decimal:
        amount = Decimal(amount)
        if amount < 0:
            raise ValidationError("Manual revenue cannot be negative")
        await self._write(amount)
        return amount

    async def reset(self) -> Decimal:
        await self._write(Decimal("0"))
        return Decimal("0")

    async def _write(self, value: Decimal) -> None:
        await self.content.put(MANUAL_REVENUE_KEY, str(value))
        logger.info(f"Manual revenue is now {value}")
