import logging
import threading
from contextlib import contextmanager

import mysql.connector
from mysql.connector import pooling

from cnc_dashboard.errors import StoreUnavailable
from cnc_dashboard.seed import machine_insert_params, program_insert_params

logger = logging.getLogger(__name__)

_pool = None
_pool_lock = threading.Lock()


class ConnectionPool:
    """Bounded pool of MySQL connections.

    ``MySQLConnectionPool`` fails immediately when it is exhausted; the
    semaphore makes callers wait up to ``acquire_timeout`` seconds for a free
    connection instead.
    """

    def __init__(self, db_config, pool_size=5, acquire_timeout=10, pool_name='cnc_dashboard'):
        if not 1 <= pool_size <= pooling.CNX_POOL_MAXSIZE:
            raise ValueError(f'DB_POOL_SIZE musi być w zakresie 1-{pooling.CNX_POOL_MAXSIZE}, podano {pool_size}')
        self.pool_size = pool_size
        self.acquire_timeout = acquire_timeout
        self._slots = threading.BoundedSemaphore(pool_size)
        try:
            self._pool = pooling.MySQLConnectionPool(pool_name=pool_name, pool_size=pool_size, **db_config)
        except mysql.connector.Error as e:
            raise StoreUnavailable(f'Nie można utworzyć puli połączeń: {e}', cause=e) from e

    @contextmanager
    def connection(self):
        if not self._slots.acquire(timeout=self.acquire_timeout):
            raise StoreUnavailable(f'Brak wolnego połączenia po {self.acquire_timeout}s')
        try:
            try:
                conn = self._pool.get_connection()
            except mysql.connector.Error as e:
                raise StoreUnavailable(f'Błąd połączenia z bazą: {e}', cause=e) from e
            try:
                yield conn
            finally:
                conn.close()
        finally:
            self._slots.release()

    def close(self):
        try:
            self._pool._remove_connections()
        except mysql.connector.Error:
            logger.exception('Error while closing pooled connections')


def init_pool(db_config, pool_size=5, acquire_timeout=10):
    """Create the process-wide pool (connects eagerly)."""
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = ConnectionPool(db_config, pool_size=pool_size, acquire_timeout=acquire_timeout)
    return _pool


def get_pool():
    if _pool is None:
        raise StoreUnavailable('Pula połączeń nie została zainicjalizowana')
    return _pool


def close_pool():
    global _pool
    with _pool_lock:
        if _pool is not None:
            _pool.close()
            _pool = None
            logger.info('Database pool closed')


@contextmanager
def get_db_connection():
    """Borrow a pooled connection for the duration of the ``with`` block."""
    with get_pool().connection() as conn:
        yield conn


def _create_tables(cursor):
    """Create both tables if they don't exist."""
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS machines (
            id VARCHAR(64) PRIMARY KEY,
            name TEXT NOT NULL,
            status VARCHAR(32) NOT NULL,
            work_time INT DEFAULT 0,
            idle_time INT DEFAULT 0,
            emergency_time INT DEFAULT 0
        )
    """)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS production_programs (
            id VARCHAR(64) PRIMARY KEY,
            program_name TEXT NOT NULL,
            machine_id VARCHAR(64) NOT NULL,
            start_date DATETIME NOT NULL,
            end_date DATETIME NULL,
            work_time INT DEFAULT 0,
            idle_time INT DEFAULT 0,
            status VARCHAR(64) NOT NULL,
            FOREIGN KEY (machine_id) REFERENCES machines(id)
        )
    """)


def _seed_sample_data(cursor):
    """Insert the sample machines and programs when ``machines`` is empty.

    Returns True when rows were inserted.
    """
    cursor.execute("SELECT COUNT(*) FROM machines")
    row = cursor.fetchone()
    if row and int(row[0]) > 0:
        logger.info('Database already contains data - skipping seed')
        return False

    logger.info('Seeding database with sample data...')
    cursor.executemany(
        "INSERT INTO machines (id, name, status, work_time, idle_time, emergency_time) "
        "VALUES (%s, %s, %s, %s, %s, %s)",
        machine_insert_params(),
    )
    cursor.executemany(
        "INSERT INTO production_programs "
        "(id, program_name, machine_id, start_date, end_date, work_time, idle_time, status) "
        "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
        program_insert_params(),
    )
    logger.info('Sample machines and production programs inserted')
    return True


def setup_database():
    """Create tables and seed them on first run.

    Raises:
        StoreUnavailable: the database could not be reached or initialized
    """
    logger.info('Attempting to connect to database...')
    with get_db_connection() as conn:
        cursor = None
        try:
            cursor = conn.cursor()
            _create_tables(cursor)
            logger.info('Tables machines and production_programs ready')
            _seed_sample_data(cursor)
            conn.commit()
        except mysql.connector.Error as e:
            try:
                conn.rollback()
            except mysql.connector.Error:
                pass
            raise StoreUnavailable(f'Inicjalizacja bazy nie powiodła się: {e}', cause=e) from e
        finally:
            if cursor is not None:
                cursor.close()
    logger.info('Database initialization completed successfully')
