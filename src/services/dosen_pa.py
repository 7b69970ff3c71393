# ===== src/services/dosen_pa.py =====
"""Service untuk daftar kelas dan penugasan Dosen PA."""

import logging
from typing import AsyncIterator, Dict, List, Optional, Set, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.config import settings
from src.core.exceptions import ConflictError, DuplicateClassError, NotFoundError
from src.models.kelas_dosen_pa import KelasDosenPA, build_kelas_id
from src.repositories.dosen import DosenRepository
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.repositories.mahasiswa import MahasiswaRepository
from src.schemas.filters import KelasFilterParams
from src.schemas.kelas_dosen_pa import (
    KelasCreate, KelasDosenPAResponse, DosenResponse
)

logger = logging.getLogger(__name__)

KelasTuple = Tuple[str, str, str]


class DosenPAService:
    """Service untuk Reviewer Assignment Store."""

    def __init__(
        self,
        kelas_dosen_pa_repo: KelasDosenPARepository,
        mahasiswa_repo: MahasiswaRepository,
        dosen_repo: DosenRepository
    ):
        self.kelas_dosen_pa_repo = kelas_dosen_pa_repo
        self.mahasiswa_repo = mahasiswa_repo
        self.dosen_repo = dosen_repo

    async def iter_classes(
        self,
        filters: Optional[KelasFilterParams] = None,
        batch_size: Optional[int] = None
    ) -> AsyncIterator[KelasDosenPAResponse]:
        """
        Daftar kelas (dari data mahasiswa dan kelas yang dikelola) beserta
        Dosen PA-nya. Kelas tanpa penugasan tampil dengan Dosen PA kosong.

        Kelas dari data mahasiswa dibaca per batch lebih dulu, lalu kelas yang
        hanya ada di pengelolaan Dosen PA. Setiap pemanggilan membaca ulang
        dari database, jadi iterasi bisa diulang dan selalu mencerminkan
        penugasan terbaru.
        """
        batch_size = batch_size or settings.CLASS_LIST_BATCH_SIZE
        seen: Set[str] = set()

        offset = 0
        while True:
            batch = await self.mahasiswa_repo.get_distinct_kelas(offset=offset, limit=batch_size)
            kelas_ids = [build_kelas_id(*kelas_tuple) for kelas_tuple in batch]
            managed = {
                row.kelas_id: row
                for row in await self.kelas_dosen_pa_repo.get_by_kelas_ids(kelas_ids)
            }
            names = await self.dosen_repo.get_names(row.id_dosen_pa for row in managed.values())

            for kelas_id, kelas_tuple in zip(kelas_ids, batch):
                if kelas_id in seen:
                    continue
                seen.add(kelas_id)
                response = self._build_response(kelas_id, kelas_tuple, managed.get(kelas_id), names)
                if self._matches(response, filters):
                    yield response

            if len(batch) < batch_size:
                break
            offset += batch_size

        # Kelas yang ditambahkan admin sebelum ada data mahasiswanya
        offset = 0
        while True:
            rows = await self.kelas_dosen_pa_repo.get_page(offset=offset, limit=batch_size)
            extra = [row for row in rows if row.kelas_id not in seen]
            names = await self.dosen_repo.get_names(row.id_dosen_pa for row in extra)

            for row in extra:
                seen.add(row.kelas_id)
                response = self._build_response(
                    row.kelas_id, (row.kelas, row.prodi, row.angkatan), row, names
                )
                if self._matches(response, filters):
                    yield response

            if len(rows) < batch_size:
                break
            offset += batch_size

    async def list_classes(self, filters: Optional[KelasFilterParams] = None) -> List[KelasDosenPAResponse]:
        return [kelas async for kelas in self.iter_classes(filters)]

    async def assign_reviewer(
        self,
        kelas_id: str,
        id_dosen_pa: str,
        user_id: Optional[str] = None
    ) -> KelasDosenPAResponse:
        """
        Tugaskan Dosen PA ke kelas.

        Penugasan lama dihapus lalu diganti dalam satu transaksi. Pengajuan
        yang sudah ada tetap menyimpan Dosen PA lama (snapshot).
        """
        dosen = await self.dosen_repo.get_active_by_id(id_dosen_pa)
        if dosen is None:
            raise NotFoundError("Dosen", id_dosen_pa)

        kelas_tuple = await self._resolve_kelas(kelas_id)
        if kelas_tuple is None:
            raise NotFoundError("Kelas", kelas_id)

        try:
            row = await self.kelas_dosen_pa_repo.replace_assignment(
                kelas_id, *kelas_tuple, id_dosen_pa=id_dosen_pa, assigned_by=user_id
            )
        except IntegrityError:
            await self.kelas_dosen_pa_repo.session.rollback()
            logger.warning(
                "Penugasan Dosen PA bentrok dengan penulisan lain",
                extra={"kelas_id": kelas_id, "user_id": user_id}
            )
            raise ConflictError(details={"kelas_id": kelas_id})
        except SQLAlchemyError:
            await self.kelas_dosen_pa_repo.session.rollback()
            logger.error("Gagal menyimpan penugasan Dosen PA", exc_info=True, extra={"kelas_id": kelas_id})
            raise

        logger.info(
            f"Dosen PA {dosen.nama} ditugaskan ke kelas {kelas_id}",
            extra={"kelas_id": kelas_id, "user_id": user_id}
        )
        return self._build_response(kelas_id, kelas_tuple, row, {dosen.id: dosen.nama})

    async def unassign_class(self, kelas_id: str, user_id: Optional[str] = None) -> None:
        """Hapus penugasan kelas. Pengajuan yang sudah ada tidak berubah."""
        try:
            deleted = await self.kelas_dosen_pa_repo.delete(kelas_id)
        except SQLAlchemyError:
            await self.kelas_dosen_pa_repo.session.rollback()
            logger.error("Gagal menghapus penugasan Dosen PA", exc_info=True, extra={"kelas_id": kelas_id})
            raise

        if not deleted:
            raise NotFoundError("Kelas belum dikelola", kelas_id)

        logger.info("Penugasan Dosen PA dihapus", extra={"kelas_id": kelas_id, "user_id": user_id})

    async def register_class(self, data: KelasCreate, user_id: Optional[str] = None) -> KelasDosenPAResponse:
        """Tambahkan kelas ke pengelolaan sebelum ada data mahasiswanya."""
        kelas_id = build_kelas_id(data.kelas, data.prodi, data.angkatan)
        if await self._resolve_kelas(kelas_id) is not None:
            raise DuplicateClassError(kelas_id)

        try:
            row = await self.kelas_dosen_pa_repo.create(
                kelas_id, data.kelas, data.prodi, data.angkatan, created_by=user_id
            )
        except IntegrityError:
            await self.kelas_dosen_pa_repo.session.rollback()
            raise DuplicateClassError(kelas_id)
        except SQLAlchemyError:
            await self.kelas_dosen_pa_repo.session.rollback()
            logger.error("Gagal menambahkan kelas", exc_info=True, extra={"kelas_id": kelas_id})
            raise

        logger.info("Kelas ditambahkan ke pengelolaan Dosen PA", extra={"kelas_id": kelas_id, "user_id": user_id})
        return self._build_response(kelas_id, (row.kelas, row.prodi, row.angkatan), row, {})

    async def list_reviewers(self) -> List[DosenResponse]:
        """Dosen aktif yang bisa dipilih sebagai Dosen PA."""
        dosen_list = await self.dosen_repo.get_all_active()
        return [DosenResponse.model_validate(dosen) for dosen in dosen_list]

    # ===== HELPER METHODS =====

    async def _resolve_kelas(self, kelas_id: str) -> Optional[KelasTuple]:
        """Cari tuple kelas dari row penugasan atau dari Class Registry."""
        row = await self.kelas_dosen_pa_repo.get_by_kelas_id(kelas_id)
        if row is not None:
            return (row.kelas, row.prodi, row.angkatan)

        angkatan = kelas_id.rsplit("-", 1)[-1]
        for kelas_tuple in await self.mahasiswa_repo.get_distinct_kelas(angkatan=angkatan):
            if build_kelas_id(*kelas_tuple) == kelas_id:
                return kelas_tuple
        return None

    @staticmethod
    def _matches(kelas: KelasDosenPAResponse, filters: Optional[KelasFilterParams]) -> bool:
        if filters is None:
            return True
        if filters.has_dosen_pa is not None and kelas.has_dosen_pa != filters.has_dosen_pa:
            return False
        if filters.search:
            term = filters.search.lower()
            haystack = [kelas.kelas, kelas.prodi, kelas.angkatan, kelas.nama_dosen_pa or ""]
            return any(term in value.lower() for value in haystack)
        return True

    @staticmethod
    def _build_response(
        kelas_id: str,
        kelas_tuple: KelasTuple,
        row: Optional[KelasDosenPA],
        names: Dict[str, str]
    ) -> KelasDosenPAResponse:
        kelas, prodi, angkatan = kelas_tuple
        id_dosen_pa = row.id_dosen_pa if row else None
        return KelasDosenPAResponse(
            kelas_id=kelas_id,
            kelas=kelas,
            prodi=prodi,
            angkatan=angkatan,
            id_dosen_pa=id_dosen_pa,
            nama_dosen_pa=names.get(id_dosen_pa) if id_dosen_pa else None,
            is_managed=row is not None,
            has_dosen_pa=id_dosen_pa is not None,
            updated_at=(row.updated_at or row.created_at) if row else None,
            updated_by=(row.updated_by or row.created_by) if row else None
        )
