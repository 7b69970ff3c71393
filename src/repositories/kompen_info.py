"""Repository untuk sesi kompensasi (singleton row)."""

from typing import Any, Dict, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.kompen_info import KompenInfo


class KompenInfoRepository:
    """Repository untuk operasi kompen_info."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_current(self) -> Optional[KompenInfo]:
        """Get row sesi kompensasi (paling awal dibuat jika ada lebih dari satu)."""
        query = select(KompenInfo).order_by(KompenInfo.created_at).limit(1)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, fields: Dict[str, Any], created_by: Optional[str] = None) -> KompenInfo:
        """Create row sesi baru."""
        kompen_info = KompenInfo(**fields, created_by=created_by)
        self.session.add(kompen_info)
        await self.session.commit()
        await self.session.refresh(kompen_info)
        return kompen_info

    async def update_fields(
        self,
        info_id: str,
        fields: Dict[str, Any],
        updated_by: Optional[str] = None
    ) -> Optional[KompenInfo]:
        """
        Update kolom sesi lewat satu UPDATE statement.

        Object di memory baru di-refresh setelah commit berhasil, sehingga
        flag `is_active` tidak pernah berubah secara optimistic.
        """
        values = dict(fields)
        values["updated_at"] = utcnow()
        values["updated_by"] = updated_by

        query = (
            update(KompenInfo)
            .where(KompenInfo.id == info_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(query)
        await self.session.commit()

        if result.rowcount == 0:
            return None

        kompen_info = await self.session.get(KompenInfo, info_id)
        if kompen_info is not None:
            await self.session.refresh(kompen_info)
        return kompen_info
