"""
Unit Tests for the compensation session controller
"""
from datetime import datetime, timedelta, timezone
import pytest

from src.core.exceptions import NotFoundError, ValidationError
from src.models.base import as_utc
from src.models.kompen_info import KompenInfo
from src.models.kompensasi_enums import SemesterType
from src.repositories.kompen_info import KompenInfoRepository
from src.schemas.kompen_info import KompenInfoUpdate
from tests.conftest import ADMIN_ID, sesi_data


class TestGetCurrentSession:
    """Test reading the session before and after configuration"""

    @pytest.mark.asyncio
    async def test_not_configured_sentinel(self, kompen_info_service):
        sesi = await kompen_info_service.get_current_session()

        assert sesi.is_configured is False
        assert sesi.is_active is False
        assert sesi.id is None

    @pytest.mark.asyncio
    async def test_is_session_active_without_row(self, kompen_info_service):
        assert await kompen_info_service.is_session_active() is False


class TestOpenSession:
    """Test opening the session"""

    @pytest.mark.asyncio
    async def test_open_creates_active_session(self, kompen_info_service):
        sesi = await kompen_info_service.open_session(sesi_data(), ADMIN_ID)

        assert sesi.is_configured is True
        assert sesi.is_active is True
        assert sesi.nomor_surat == '123/PL/2024'
        assert sesi.semester == SemesterType.GANJIL
        assert await kompen_info_service.is_session_active() is True

    @pytest.mark.asyncio
    async def test_open_requires_nomor_surat(self, kompen_info_service):
        with pytest.raises(ValidationError):
            await kompen_info_service.open_session(sesi_data(nomor_surat='   '), ADMIN_ID)

        # Flag tidak berubah setelah validasi gagal
        assert await kompen_info_service.is_session_active() is False

    @pytest.mark.asyncio
    async def test_open_rejects_end_before_start(self, kompen_info_service):
        data = sesi_data(start_at=datetime(2024, 9, 10), end_at=datetime(2024, 9, 1))

        with pytest.raises(ValidationError):
            await kompen_info_service.open_session(data, ADMIN_ID)

    @pytest.mark.asyncio
    async def test_reopen_overwrites_single_row(self, kompen_info_service):
        first = await kompen_info_service.open_session(sesi_data(), ADMIN_ID)
        await kompen_info_service.close_session(ADMIN_ID)

        second = await kompen_info_service.open_session(
            sesi_data(semester=SemesterType.GENAP, tahun_ajaran='2024/2025', nomor_surat='456/PL/2025'),
            ADMIN_ID
        )

        assert second.id == first.id
        assert second.is_active is True
        assert second.semester == SemesterType.GENAP
        assert second.nomor_surat == '456/PL/2025'


class TestCloseAndToggle:
    """Test closing and toggling the session"""

    @pytest.mark.asyncio
    async def test_close_without_session_fails(self, kompen_info_service):
        with pytest.raises(NotFoundError):
            await kompen_info_service.close_session(ADMIN_ID)

    @pytest.mark.asyncio
    async def test_close_keeps_configuration(self, kompen_info_service, sesi_aktif):
        sesi = await kompen_info_service.close_session(ADMIN_ID)

        assert sesi.is_active is False
        assert sesi.nomor_surat == sesi_aktif.nomor_surat
        assert sesi.updated_by == ADMIN_ID

    @pytest.mark.asyncio
    async def test_toggle_flips_flag(self, kompen_info_service, sesi_aktif):
        closed = await kompen_info_service.toggle_session(ADMIN_ID)
        reopened = await kompen_info_service.toggle_session(ADMIN_ID)

        assert closed.is_active is False
        assert reopened.is_active is True
        assert reopened.tahun_ajaran == sesi_aktif.tahun_ajaran


class TestUpdateSessionMeta:
    """Test updating session information"""

    @pytest.mark.asyncio
    async def test_update_never_changes_active_flag(self, kompen_info_service, sesi_aktif):
        await kompen_info_service.close_session(ADMIN_ID)

        sesi = await kompen_info_service.update_session_meta(
            KompenInfoUpdate(tahun_ajaran='2025/2026'), ADMIN_ID
        )

        assert sesi.is_active is False
        assert sesi.tahun_ajaran == '2025/2026'
        assert sesi.nomor_surat == sesi_aktif.nomor_surat

    @pytest.mark.asyncio
    async def test_update_rejects_empty_nomor_surat(self, kompen_info_service, sesi_aktif):
        with pytest.raises(ValidationError):
            await kompen_info_service.update_session_meta(KompenInfoUpdate(nomor_surat=''), ADMIN_ID)

    @pytest.mark.asyncio
    async def test_update_without_session_fails(self, kompen_info_service):
        with pytest.raises(NotFoundError):
            await kompen_info_service.update_session_meta(KompenInfoUpdate(tahun_ajaran='2025/2026'))

    @pytest.mark.asyncio
    async def test_date_range_compares_across_timezones(self, kompen_info_service):
        # 10:00 WIB = 03:00 UTC
        wib = timezone(timedelta(hours=7))
        await kompen_info_service.open_session(
            sesi_data(start_at=datetime(2024, 9, 1, 10, 0, tzinfo=wib)), ADMIN_ID
        )

        with pytest.raises(ValidationError):
            await kompen_info_service.update_session_meta(
                KompenInfoUpdate(end_at=datetime(2024, 9, 1, 2, 0)), ADMIN_ID
            )

        sesi = await kompen_info_service.update_session_meta(
            KompenInfoUpdate(end_at=datetime(2024, 9, 1, 4, 0)), ADMIN_ID
        )
        assert sesi.end_at is not None


class TestTimestamps:
    """Timestamps are written as timezone-aware UTC"""

    def test_model_default_is_aware(self):
        assert KompenInfo().created_at.tzinfo is not None

    def test_naive_input_treated_as_utc(self):
        data = KompenInfoUpdate(start_at=datetime(2024, 9, 1, 8, 0))

        assert data.start_at == datetime(2024, 9, 1, 8, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_update_stamps_aware_time(self, db_session, kompen_info_service, sesi_aktif):
        before = datetime.now(timezone.utc)
        await kompen_info_service.close_session(ADMIN_ID)

        row = await KompenInfoRepository(db_session).get_current()
        assert as_utc(row.updated_at) >= before.replace(microsecond=0)
