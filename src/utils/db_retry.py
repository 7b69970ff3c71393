"""Retry sekali untuk operasi baca yang idempotent."""

import functools
import logging

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)


def _is_transient(error: Exception) -> bool:
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


def retry_read_once(func):
    """
    Decorator untuk method repository yang hanya membaca data.

    Error koneksi / transaksi yang transient di-retry tepat satu kali setelah
    session di-rollback. Jangan dipakai untuk operasi tulis: caller harus
    memanggil ulang secara eksplisit agar tidak terjadi side effect ganda.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except DBAPIError as e:
            if not _is_transient(e):
                raise
            logger.warning(f"Transient database error on {func.__qualname__}, retrying once: {e}")
            await self.session.rollback()
            return await func(self, *args, **kwargs)

    return wrapper
