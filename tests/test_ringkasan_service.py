"""
Unit Tests for the review summary and history projection
"""
from datetime import datetime, timedelta, timezone
import pytest

from src.models.kompensasi import Kompensasi
from src.models.kompensasi_enums import KeputusanReview, StatusKompensasi
from src.schemas.filters import RiwayatFilterParams
from src.schemas.kompensasi import PengajuanReview
from tests.conftest import ADMIN_ID, KELAS_ID


@pytest.fixture
async def riwayat(db_session, sekretaris, dosen_1):
    """Lima pengajuan terminal dan satu pending dengan timestamp tetap"""
    base = datetime(2024, 10, 1, 8, 0, 0, tzinfo=timezone.utc)
    rows = [
        # (kelas_id, status, created_at offset jam, updated_at offset jam)
        (KELAS_ID, StatusKompensasi.ADMIN_VERIFIED, 0, 10),
        (KELAS_ID, StatusKompensasi.ADMIN_REJECTED, 1, 30),
        ('3B-TeknikKimia-2023', StatusKompensasi.ADMIN_VERIFIED, 2, 20),
        ('3B-TeknikKimia-2023', StatusKompensasi.ADMIN_REJECTED, 3, None),
        ('3C-TeknikKimia-2023', StatusKompensasi.ADMIN_VERIFIED, 4, 40),
        ('3C-TeknikKimia-2023', StatusKompensasi.PENDING_ADMIN_REVIEW, 50, None),
    ]
    created = []
    for kelas_id, status, created_offset, updated_offset in rows:
        kompensasi = Kompensasi(
            kelas_id=kelas_id,
            id_sekretaris=sekretaris.id,
            id_dosen_pa=dosen_1.id,
            status=status,
            created_at=base + timedelta(hours=created_offset),
            updated_at=base + timedelta(hours=updated_offset) if updated_offset is not None else None,
        )
        db_session.add(kompensasi)
        created.append(kompensasi)
    await db_session.commit()
    return [k.id for k in created]


class TestCountByStatus:
    """Test dashboard counts"""

    @pytest.mark.asyncio
    async def test_empty(self, ringkasan_service):
        ringkasan = await ringkasan_service.count_by_status()

        assert (ringkasan.pending, ringkasan.riwayat, ringkasan.total) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_counts(self, ringkasan_service, riwayat):
        ringkasan = await ringkasan_service.count_by_status()

        assert ringkasan.pending == 1
        assert ringkasan.riwayat == 5
        assert ringkasan.total == 6

    @pytest.mark.asyncio
    async def test_review_moves_one_from_pending_to_history(
        self, ringkasan_service, kompensasi_service, kelas_siap, sekretaris
    ):
        pengajuan = await kompensasi_service.submit(KELAS_ID, sekretaris.id)
        before = await ringkasan_service.count_by_status()

        await kompensasi_service.review(pengajuan.id, PengajuanReview(keputusan=KeputusanReview.VERIFY), ADMIN_ID)
        after = await ringkasan_service.count_by_status()

        assert after.pending == before.pending - 1
        assert after.riwayat == before.riwayat + 1
        assert after.total == before.total


class TestListHistory:
    """Test history ordering, filtering and pagination"""

    @pytest.mark.asyncio
    async def test_newest_first(self, ringkasan_service, riwayat):
        page = await ringkasan_service.list_history(RiwayatFilterParams(page=1, size=10))

        # updated_at desc, baris tanpa updated_at di akhir
        assert [item.id for item in page.items] == [riwayat[4], riwayat[1], riwayat[2], riwayat[0], riwayat[3]]
        assert page.total == 5
        assert all(item.is_terminal for item in page.items)

    @pytest.mark.asyncio
    async def test_pagination(self, ringkasan_service, riwayat):
        page = await ringkasan_service.list_history(RiwayatFilterParams(page=2, size=2))

        assert [item.id for item in page.items] == [riwayat[2], riwayat[0]]
        assert page.pages == 3

    @pytest.mark.asyncio
    async def test_filters(self, ringkasan_service, riwayat):
        by_kelas = await ringkasan_service.list_history(RiwayatFilterParams(kelas_id=KELAS_ID))
        by_status = await ringkasan_service.list_history(
            RiwayatFilterParams(status=StatusKompensasi.ADMIN_REJECTED)
        )

        assert {item.id for item in by_kelas.items} == {riwayat[0], riwayat[1]}
        assert {item.id for item in by_status.items} == {riwayat[1], riwayat[3]}

    def test_pending_status_filter_rejected(self):
        with pytest.raises(ValueError):
            RiwayatFilterParams(status=StatusKompensasi.PENDING_ADMIN_REVIEW)

    @pytest.mark.asyncio
    async def test_includes_names(self, ringkasan_service, riwayat, sekretaris, dosen_1):
        page = await ringkasan_service.list_history(RiwayatFilterParams(size=1))

        assert page.items[0].nama_sekretaris == sekretaris.nama
        assert page.items[0].nama_dosen_pa == dosen_1.nama


class TestIterHistory:
    """Test lazy, restartable iteration"""

    @pytest.mark.asyncio
    async def test_iterates_all_batches(self, ringkasan_service, riwayat):
        ids = [item.id async for item in ringkasan_service.iter_history(batch_size=2)]

        assert ids == [riwayat[4], riwayat[1], riwayat[2], riwayat[0], riwayat[3]]

    @pytest.mark.asyncio
    async def test_restart_from_beginning(self, ringkasan_service, riwayat):
        async for item in ringkasan_service.iter_history():
            first = item.id
            break

        again = [item.id async for item in ringkasan_service.iter_history()]

        assert first == riwayat[4]
        assert again[0] == first
        assert len(again) == 5
