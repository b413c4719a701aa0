import logging
from typing import Dict, Optional

from sqlalchemy import select, delete
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StorageError
from app.db.models.site_content import SiteContent
from app.utils.business_time import business_now

logger = logging.getLogger(__name__)

DEFAULT_CONTENT = {
    "hero_title": "Señorita",
    "hero_subtitle": "Made Fresh Daily",
    "hero_description": (
        "Our mission is to craft the best-tasting bread using traditional "
        "methods and the highest-quality ingredients."
    ),
    "special_label": "Special of the Day",
    "special_discount": "20% OFF",
    "special_text": "TODAY",
    "product_name": "Señorita Bread",
    "product_description": (
        "Our signature soft, sweet bread that's become a Stockton favorite. "
        "Perfect for any occasion."
    ),
    "business_hours": "Tues–Sun: 6AM–6PM<br>Mon: Closed",
    "phone": "(209) 420-7925",
    "email": "freshhotbread@gmail.com",
    "location": "2233 Grand Canal Blvd UNIT 102, Stockton, CA 95207",
}


class ContentStore:
    """Key/value site text kept in ``site_content``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def all(self) -> Dict[str, Optional[str]]:
        try:
            result = await self.db.execute(select(SiteContent.key, SiteContent.value))
        except SQLAlchemyError as e:
            await self._fail("read site content", e)
        return {key: value for key, value in result.all()}

    async def find(self, key: str) -> Optional[SiteContent]:
        try:
            # upserts bypass the identity map, so always reload the row
            stmt = (
                select(SiteContent)
                .where(SiteContent.key == key)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail(f"read content '{key}'", e)

    async def get(self, key: str) -> Optional[str]:
        row = await self.find(key)
        if row is None:
            raise NotFoundError("Content not found")
        return row.value

    async def put(self, key: str, value: Optional[str]) -> None:
        await self.put_many({key: value})

    async def put_many(self, updates: Dict[str, Optional[str]]) -> int:
        if not updates:
            return 0

        now = business_now()
        try:
            for key, value in updates.items():
                stmt = insert(SiteContent).values(key=key, value=value, updated_at=now)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[SiteContent.key],
                    set_={"value": value, "updated_at": now},
                )
                await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail("write site content", e)
        return len(updates)

    async def delete(self, key: str) -> bool:
        try:
            result = await self.db.execute(delete(SiteContent).where(SiteContent.key == key))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail(f"delete content '{key}'", e)
        return result.rowcount > 0

    async def seed_defaults(self) -> int:
        """Insert default site text for keys that are missing. Existing values are kept."""
        existing = await self.all()
        missing = {k: v for k, v in DEFAULT_CONTENT.items() if k not in existing}
        if missing:
            await self.put_many(missing)
            logger.info(f"Seeded {len(missing)} default content keys.")
        return len(missing)

    async def _fail(self, action: str, error: Exception):
        logger.error(f"Content store failed to {action}: {error}", exc_info=True)
        await self.db.rollback()
        raise StorageError(f"Could not {action}") from error
