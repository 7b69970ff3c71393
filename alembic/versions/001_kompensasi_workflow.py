"""kompensasi workflow tables

Revision ID: 001_kompensasi_workflow
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_kompensasi_workflow'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLEnum menyimpan nama member, bukan value
SEMESTER_TYPE = postgresql.ENUM('GANJIL', 'GENAP', name='semester_type', create_type=False)
KOMPENSASI_STATUS = postgresql.ENUM(
    'PENDING_ADMIN_REVIEW', 'ADMIN_VERIFIED', 'ADMIN_REJECTED',
    name='kompensasi_status', create_type=False
)


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('updated_by', sa.String(length=36), nullable=True),
    ]


def _table_exists(connection, table_name: str) -> bool:
    return connection.execute(
        sa.text("SELECT 1 FROM information_schema.tables WHERE table_name = :name"),
        {"name": table_name}
    ).fetchone() is not None


def upgrade() -> None:
    connection = op.get_bind()

    # Enum types (only if not exists)
    SEMESTER_TYPE.create(connection, checkfirst=True)
    KOMPENSASI_STATUS.create(connection, checkfirst=True)

    # Read-only sources: mahasiswa (Class Registry) dan dosen (reviewer directory)
    if not _table_exists(connection, 'mahasiswa'):
        op.create_table('mahasiswa',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('nim', sa.String(length=20), nullable=False),
        sa.Column('nama', sa.String(length=200), nullable=False),
        sa.Column('kelas', sa.String(length=20), nullable=False),
        sa.Column('prodi', sa.String(length=100), nullable=False),
        sa.Column('angkatan', sa.String(length=4), nullable=False),
        sa.Column('jabatan_kelas', sa.String(length=50), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_mahasiswa_nim'), 'mahasiswa', ['nim'], unique=True)
        op.create_index(op.f('ix_mahasiswa_nama'), 'mahasiswa', ['nama'], unique=False)
        op.create_index(op.f('ix_mahasiswa_kelas'), 'mahasiswa', ['kelas'], unique=False)
        op.create_index(op.f('ix_mahasiswa_created_at'), 'mahasiswa', ['created_at'], unique=False)

    if not _table_exists(connection, 'dosen'):
        op.create_table('dosen',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('nip', sa.String(length=30), nullable=True),
        sa.Column('nama', sa.String(length=200), nullable=False),
        sa.Column('prodi', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_dosen_nip'), 'dosen', ['nip'], unique=False)
        op.create_index(op.f('ix_dosen_nama'), 'dosen', ['nama'], unique=False)
        op.create_index(op.f('ix_dosen_created_at'), 'dosen', ['created_at'], unique=False)

    # Sesi kompensasi (satu row)
    op.create_table('kompen_info',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column('start_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('semester', SEMESTER_TYPE, nullable=False),
    sa.Column('tahun_ajaran', sa.String(length=20), nullable=False, server_default=''),
    sa.Column('nomor_surat', sa.String(length=100), nullable=False, server_default=''),
    *_audit_columns(),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_kompen_info_created_at'), 'kompen_info', ['created_at'], unique=False)

    # Penugasan Dosen PA per kelas
    op.create_table('kelas_dosen_pa',
    sa.Column('kelas_id', sa.String(length=150), nullable=False),
    sa.Column('kelas', sa.String(length=20), nullable=False),
    sa.Column('prodi', sa.String(length=100), nullable=False),
    sa.Column('angkatan', sa.String(length=4), nullable=False),
    sa.Column('id_dosen_pa', sa.String(length=36), nullable=True),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['id_dosen_pa'], ['dosen.id'], ),
    sa.PrimaryKeyConstraint('kelas_id')
    )
    op.create_index(op.f('ix_kelas_dosen_pa_id_dosen_pa'), 'kelas_dosen_pa', ['id_dosen_pa'], unique=False)
    op.create_index(op.f('ix_kelas_dosen_pa_created_at'), 'kelas_dosen_pa', ['created_at'], unique=False)

    # Pengajuan kompensasi
    op.create_table('kompensasi',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('kelas_id', sa.String(length=150), nullable=False),
    sa.Column('id_sekretaris', sa.String(length=36), nullable=False),
    sa.Column('id_dosen_pa', sa.String(length=36), nullable=False),
    sa.Column('status', KOMPENSASI_STATUS, nullable=False),
    sa.Column('semester', SEMESTER_TYPE, nullable=True),
    sa.Column('tahun_ajaran', sa.String(length=20), nullable=True),
    sa.Column('catatan_admin', sa.String(length=1000), nullable=True),
    *_audit_columns(),
    sa.ForeignKeyConstraint(['id_sekretaris'], ['mahasiswa.id'], ),
    sa.ForeignKeyConstraint(['id_dosen_pa'], ['dosen.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_kompensasi_kelas_id'), 'kompensasi', ['kelas_id'], unique=False)
    op.create_index(op.f('ix_kompensasi_id_sekretaris'), 'kompensasi', ['id_sekretaris'], unique=False)
    op.create_index(op.f('ix_kompensasi_id_dosen_pa'), 'kompensasi', ['id_dosen_pa'], unique=False)
    op.create_index(op.f('ix_kompensasi_status'), 'kompensasi', ['status'], unique=False)
    op.create_index(op.f('ix_kompensasi_created_at'), 'kompensasi', ['created_at'], unique=False)

    # Maksimal satu pengajuan pending per kelas
    op.create_index(
        'uq_kompensasi_pending_per_kelas',
        'kompensasi',
        ['kelas_id'],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING_ADMIN_REVIEW'")
    )


def downgrade() -> None:
    op.drop_index('uq_kompensasi_pending_per_kelas', table_name='kompensasi')
    op.drop_index(op.f('ix_kompensasi_created_at'), table_name='kompensasi')
    op.drop_index(op.f('ix_kompensasi_status'), table_name='kompensasi')
    op.drop_index(op.f('ix_kompensasi_id_dosen_pa'), table_name='kompensasi')
    op.drop_index(op.f('ix_kompensasi_id_sekretaris'), table_name='kompensasi')
    op.drop_index(op.f('ix_kompensasi_kelas_id'), table_name='kompensasi')
    op.drop_table('kompensasi')

    op.drop_index(op.f('ix_kelas_dosen_pa_created_at'), table_name='kelas_dosen_pa')
    op.drop_index(op.f('ix_kelas_dosen_pa_id_dosen_pa'), table_name='kelas_dosen_pa')
    op.drop_table('kelas_dosen_pa')

    op.drop_index(op.f('ix_kompen_info_created_at'), table_name='kompen_info')
    op.drop_table('kompen_info')

    # mahasiswa dan dosen dimiliki sistem akademik, tidak di-drop

    connection = op.get_bind()
    KOMPENSASI_STATUS.drop(connection, checkfirst=True)
    SEMESTER_TYPE.drop(connection, checkfirst=True)
