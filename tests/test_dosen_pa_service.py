"""
Unit Tests for class listing and Dosen PA assignment
"""
import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import OperationalError

from src.core.exceptions import DuplicateClassError, NotFoundError
from src.models import build_kelas_id
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.schemas.filters import KelasFilterParams
from src.schemas.kelas_dosen_pa import KelasCreate
from tests.conftest import ADMIN_ID, KELAS_ID


class TestListClasses:
    """Test the merged class list"""

    @pytest.mark.asyncio
    async def test_registry_classes_without_assignment(self, dosen_pa_service, sekretaris, mahasiswa_lain):
        kelas = await dosen_pa_service.list_classes()

        assert [k.kelas_id for k in kelas] == [KELAS_ID, '3B-TeknikKimia-2023']
        assert all(k.id_dosen_pa is None and not k.is_managed for k in kelas)

    @pytest.mark.asyncio
    async def test_iteration_is_restartable(self, dosen_pa_service, sekretaris, dosen_1):
        before = [k async for k in dosen_pa_service.iter_classes()]
        await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)
        after = [k async for k in dosen_pa_service.iter_classes()]

        assert before[0].id_dosen_pa is None
        assert after[0].id_dosen_pa == dosen_1.id
        assert after[0].nama_dosen_pa == dosen_1.nama

    @pytest.mark.asyncio
    async def test_filters(self, dosen_pa_service, sekretaris, mahasiswa_lain, dosen_1):
        await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)

        assigned = await dosen_pa_service.list_classes(KelasFilterParams(has_dosen_pa=True))
        unassigned = await dosen_pa_service.list_classes(KelasFilterParams(has_dosen_pa=False))
        by_dosen = await dosen_pa_service.list_classes(KelasFilterParams(search='budi'))

        assert [k.kelas_id for k in assigned] == [KELAS_ID]
        assert [k.kelas for k in unassigned] == ['3B']
        assert [k.kelas_id for k in by_dosen] == [KELAS_ID]

    @pytest.mark.asyncio
    async def test_first_class_yielded_after_one_batch(
        self, dosen_pa_service, sekretaris, mahasiswa_lain, monkeypatch
    ):
        repo = dosen_pa_service.mahasiswa_repo
        real_get_distinct_kelas = repo.get_distinct_kelas
        calls = []

        async def tracking_get_distinct_kelas(**kwargs):
            calls.append(kwargs)
            return await real_get_distinct_kelas(**kwargs)

        async def managed_not_read_yet(**kwargs):
            raise AssertionError('kelas dikelola dibaca sebelum data mahasiswa habis')

        monkeypatch.setattr(repo, 'get_distinct_kelas', tracking_get_distinct_kelas)
        monkeypatch.setattr(dosen_pa_service.kelas_dosen_pa_repo, 'get_page', managed_not_read_yet)

        iterator = dosen_pa_service.iter_classes(batch_size=1)
        first = await iterator.__anext__()
        await iterator.aclose()

        assert first.kelas_id == KELAS_ID
        assert calls == [{'offset': 0, 'limit': 1}]

    @pytest.mark.asyncio
    async def test_batches_cover_registry_then_managed_classes(
        self, dosen_pa_service, sekretaris, mahasiswa_lain, dosen_1
    ):
        await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)
        baru = await dosen_pa_service.register_class(
            KelasCreate(kelas='1A', prodi='Teknik Mesin', angkatan='2025'), ADMIN_ID
        )

        kelas = [k async for k in dosen_pa_service.iter_classes(batch_size=1)]

        assert [k.kelas_id for k in kelas] == [KELAS_ID, '3B-TeknikKimia-2023', baru.kelas_id]
        assert kelas[0].nama_dosen_pa == dosen_1.nama
        assert kelas[2].is_managed is True


class TestAssignReviewer:
    """Test assigning, reassigning and removing Dosen PA"""

    @pytest.mark.asyncio
    async def test_reassign_leaves_single_mapping(self, db_session, dosen_pa_service, sekretaris, dosen_1, dosen_2):
        await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)
        result = await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_2.id, ADMIN_ID)

        rows = await KelasDosenPARepository(db_session).get_page(offset=0, limit=10)
        assert len(rows) == 1
        assert rows[0].id_dosen_pa == dosen_2.id
        assert result.nama_dosen_pa == dosen_2.nama

    @pytest.mark.asyncio
    async def test_inactive_dosen_rejected(self, dosen_pa_service, sekretaris, dosen_nonaktif):
        with pytest.raises(NotFoundError):
            await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_nonaktif.id, ADMIN_ID)

    @pytest.mark.asyncio
    async def test_unknown_dosen_rejected(self, dosen_pa_service, sekretaris):
        with pytest.raises(NotFoundError):
            await dosen_pa_service.assign_reviewer(KELAS_ID, 'tidak-ada', ADMIN_ID)

    @pytest.mark.asyncio
    async def test_unknown_kelas_rejected(self, dosen_pa_service, dosen_1):
        with pytest.raises(NotFoundError):
            await dosen_pa_service.assign_reviewer('9Z-Entah-1999', dosen_1.id, ADMIN_ID)

    @pytest.mark.asyncio
    async def test_unassign_keeps_registry_class(self, dosen_pa_service, sekretaris, dosen_1):
        await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)
        await dosen_pa_service.unassign_class(KELAS_ID, ADMIN_ID)

        kelas = await dosen_pa_service.list_classes()
        assert kelas[0].kelas_id == KELAS_ID
        assert kelas[0].id_dosen_pa is None

    @pytest.mark.asyncio
    async def test_unassign_missing_mapping(self, dosen_pa_service):
        with pytest.raises(NotFoundError):
            await dosen_pa_service.unassign_class(KELAS_ID, ADMIN_ID)


class TestRegisterClass:
    """Test adding a managed class without students"""

    @pytest.mark.asyncio
    async def test_register_then_assign(self, dosen_pa_service, dosen_1):
        created = await dosen_pa_service.register_class(
            KelasCreate(kelas='1A', prodi='Teknik Mesin', angkatan='2025'), ADMIN_ID
        )
        assert created.kelas_id == build_kelas_id('1A', 'Teknik Mesin', '2025')
        assert created.is_managed is True
        assert created.has_dosen_pa is False

        assigned = await dosen_pa_service.assign_reviewer(created.kelas_id, dosen_1.id, ADMIN_ID)
        assert assigned.id_dosen_pa == dosen_1.id

    @pytest.mark.asyncio
    async def test_register_duplicate(self, dosen_pa_service, sekretaris):
        with pytest.raises(DuplicateClassError):
            await dosen_pa_service.register_class(
                KelasCreate(kelas='3A', prodi='Teknik Kimia', angkatan='2023'), ADMIN_ID
            )

    @pytest.mark.asyncio
    async def test_prodi_spacing_maps_to_same_class(self, dosen_pa_service):
        await dosen_pa_service.register_class(
            KelasCreate(kelas='1A', prodi='Teknik Mesin', angkatan='2025'), ADMIN_ID
        )

        with pytest.raises(DuplicateClassError):
            await dosen_pa_service.register_class(
                KelasCreate(kelas='1A', prodi='TeknikMesin', angkatan='2025'), ADMIN_ID
            )

    @pytest.mark.parametrize('field, value', [('kelas', '3-A'), ('prodi', 'Teknik-Kimia')])
    def test_separator_rejected(self, field, value):
        data = {'kelas': '3A', 'prodi': 'Teknik Kimia', 'angkatan': '2023', field: value}

        with pytest.raises(PydanticValidationError):
            KelasCreate(**data)

    @pytest.mark.asyncio
    async def test_database_error_rolls_back(self, dosen_pa_service, monkeypatch):
        repo = dosen_pa_service.kelas_dosen_pa_repo
        real_rollback = repo.session.rollback
        rollbacks = []

        async def failing_create(*args, **kwargs):
            raise OperationalError('INSERT INTO kelas_dosen_pa', {}, Exception('database is locked'))

        async def tracking_rollback():
            rollbacks.append(True)
            await real_rollback()

        monkeypatch.setattr(repo, 'create', failing_create)
        monkeypatch.setattr(repo.session, 'rollback', tracking_rollback)

        with pytest.raises(OperationalError):
            await dosen_pa_service.register_class(
                KelasCreate(kelas='1A', prodi='Teknik Mesin', angkatan='2025'), ADMIN_ID
            )

        assert rollbacks == [True]


class TestListReviewers:

    @pytest.mark.asyncio
    async def test_only_active_dosen(self, dosen_pa_service, dosen_1, dosen_2, dosen_nonaktif):
        reviewers = await dosen_pa_service.list_reviewers()

        assert [d.nama for d in reviewers] == ['Budi Santoso', 'Citra Lestari']
