"""SQLAlchemy-backed property catalog."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.property import Property


class SqlPropertyCatalog:
    """Read access to properties. Does not commit; the caller owns the transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_property_by_id(self, property_id: uuid.UUID) -> Property | None:
        result = await self.session.execute(select(Property).where(Property.id == property_id))
        return result.scalar_one_or_none()

    async def lock_property(self, property_id: uuid.UUID) -> Property | None:
        """Load a property with a row lock held until the transaction ends.

        Booking writers take this lock before checking availability so two
        requests for the same property cannot both pass the check. Backends
        without ``FOR UPDATE`` (SQLite) serialize writers on their own.
        """
        result = await self.session.execute(
            select(Property).where(Property.id == property_id).with_for_update()
        )
        return result.scalar_one_or_none()
