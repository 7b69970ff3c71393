"""
Kompensasi API - Test Configuration and Fixtures
"""
import os
from datetime import timedelta
from typing import AsyncGenerator, Dict
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['PROJECT_NAME'] = 'Kompensasi API Test'
os.environ['SERVICE_NAME'] = 'kompensasi-test'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['DATABASE_URI'] = 'sqlite+aiosqlite:///./test_kompensasi.db'
os.environ['LOG_DIRECTORY'] = './test_logs'
os.environ['HISTORY_STREAM_BATCH_SIZE'] = '2'
os.environ['CLASS_LIST_BATCH_SIZE'] = '2'

from main import app
from src.core.database import engine, async_session, get_db
from src.auth.jwt import create_access_token
from src.models import Dosen, Mahasiswa, UserRole, build_kelas_id
from src.repositories.dosen import DosenRepository
from src.repositories.kelas_dosen_pa import KelasDosenPARepository
from src.repositories.kompen_info import KompenInfoRepository
from src.repositories.kompensasi import KompensasiRepository
from src.repositories.mahasiswa import MahasiswaRepository
from src.services.dosen_pa import DosenPAService
from src.services.kompen_info import KompenInfoService
from src.services.kompensasi import KompensasiService
from src.services.ringkasan_kompensasi import RingkasanKompensasiService
from src.schemas.kompen_info import KompenInfoOpen
from src.models.kompensasi_enums import SemesterType

fake = Faker('id_ID')

KELAS, PRODI, ANGKATAN = '3A', 'Teknik Kimia', '2023'
KELAS_ID = build_kelas_id(KELAS, PRODI, ANGKATAN)  # 3A-TeknikKimia-2023
ADMIN_ID = 'admin-1'


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


@pytest.fixture
def sqlite_foreign_keys():
    """Enforce foreign keys on every new SQLite connection during the test"""
    def _enable(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    event.listen(engine.sync_engine, 'connect', _enable)
    yield
    event.remove(engine.sync_engine, 'connect', _enable)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ===== SEED DATA =====

async def _add(session: AsyncSession, obj):
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


@pytest.fixture
async def sekretaris(db_session: AsyncSession) -> Mahasiswa:
    """Sekretaris kelas 3A Teknik Kimia 2023"""
    return await _add(db_session, Mahasiswa(
        nim='2023001',
        nama=fake.name(),
        kelas=KELAS,
        prodi=PRODI,
        angkatan=ANGKATAN,
        jabatan_kelas='Sekretaris'
    ))


@pytest.fixture
async def mahasiswa_lain(db_session: AsyncSession) -> Mahasiswa:
    """Mahasiswa kelas lain (3B Teknik Kimia 2023)"""
    return await _add(db_session, Mahasiswa(
        nim='2023002',
        nama=fake.name(),
        kelas='3B',
        prodi=PRODI,
        angkatan=ANGKATAN,
        jabatan_kelas='Sekretaris'
    ))


@pytest.fixture
async def dosen_1(db_session: AsyncSession) -> Dosen:
    return await _add(db_session, Dosen(nip='198001012005011001', nama='Budi Santoso', prodi=PRODI))


@pytest.fixture
async def dosen_2(db_session: AsyncSession) -> Dosen:
    return await _add(db_session, Dosen(nip='198502022010012002', nama='Citra Lestari', prodi=PRODI))


@pytest.fixture
async def dosen_nonaktif(db_session: AsyncSession) -> Dosen:
    return await _add(db_session, Dosen(nip='197001012000011003', nama='Dedi Pensiun', is_active=False))


# ===== SERVICES =====

@pytest.fixture
def kompen_info_service(db_session: AsyncSession) -> KompenInfoService:
    return KompenInfoService(KompenInfoRepository(db_session))


@pytest.fixture
def dosen_pa_service(db_session: AsyncSession) -> DosenPAService:
    return DosenPAService(
        KelasDosenPARepository(db_session),
        MahasiswaRepository(db_session),
        DosenRepository(db_session)
    )


@pytest.fixture
def kompensasi_service(db_session: AsyncSession) -> KompensasiService:
    return KompensasiService(
        KompensasiRepository(db_session),
        KompenInfoRepository(db_session),
        KelasDosenPARepository(db_session),
        DosenRepository(db_session),
        MahasiswaRepository(db_session)
    )


@pytest.fixture
def ringkasan_service(db_session: AsyncSession) -> RingkasanKompensasiService:
    return RingkasanKompensasiService(KompensasiRepository(db_session))


def sesi_data(**overrides) -> KompenInfoOpen:
    data = {
        'semester': SemesterType.GANJIL,
        'tahun_ajaran': '2024/2025',
        'nomor_surat': '123/PL/2024',
    }
    data.update(overrides)
    return KompenInfoOpen(**data)


@pytest.fixture
async def sesi_aktif(kompen_info_service: KompenInfoService):
    """Sesi kompensasi yang sedang dibuka"""
    return await kompen_info_service.open_session(sesi_data(), ADMIN_ID)


@pytest.fixture
async def kelas_siap(sekretaris, dosen_1, sesi_aktif, dosen_pa_service: DosenPAService):
    """Sesi aktif dan kelas 3A sudah punya Dosen PA"""
    await dosen_pa_service.assign_reviewer(KELAS_ID, dosen_1.id, ADMIN_ID)
    return KELAS_ID


# ===== AUTH HEADERS =====

def make_headers(role: UserRole, sub: str, expires_delta: timedelta = None, **claims) -> Dict[str, str]:
    """Generate authentication headers for a token issued by the identity provider"""
    token_data = {'sub': sub, 'role': role.value, 'nama': fake.name(), **claims}
    token = create_access_token(token_data, expires_delta)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return make_headers(UserRole.ADMIN, ADMIN_ID)


@pytest.fixture
def sekretaris_headers(sekretaris: Mahasiswa) -> Dict[str, str]:
    return make_headers(
        UserRole.SEKRETARIS,
        sekretaris.id,
        kelas=sekretaris.kelas,
        prodi=sekretaris.prodi,
        angkatan=sekretaris.angkatan
    )


@pytest.fixture
def dosen_headers(dosen_1: Dosen) -> Dict[str, str]:
    return make_headers(UserRole.DOSEN, dosen_1.id)
