"""Pytest configuration and fixtures for test suite."""

import pytest
import sys
import os
from contextlib import contextmanager
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from cnc_dashboard.core.state import AppState
from cnc_dashboard.seed import SEED_MACHINES, SEED_PROGRAMS
from cnc_dashboard.services.production_repository import (
    EXPORT_QUERY, MACHINES_QUERY, PROGRAMS_QUERY, ProductionRepository,
)


def machine_rows():
    """Seed machines as a dictionary cursor returns them from MySQL."""
    return [
        {'id': m.id, 'name': m.name, 'status': m.status.value, 'work_time': m.work_time,
         'idle_time': m.idle_time, 'emergency_time': m.emergency_time}
        for m in SEED_MACHINES
    ]


def program_rows():
    return [
        {'id': p.id, 'program_name': p.program_name, 'machine_id': p.machine_id,
         'start_date': p.start_date, 'end_date': p.end_date, 'work_time': p.work_time,
         'idle_time': p.idle_time, 'status': p.status.value}
        for p in SEED_PROGRAMS
    ]


# WHERE clauses in the order the query builders emit them
PROGRAM_CONDITIONS = (
    ('start_date >= %s', lambda row, value: row['start_date'] >= value),
    ('start_date <= %s', lambda row, value: row['start_date'] <= value),
    ('machine_id = %s', lambda row, value: row['machine_id'] == value),
)


def filtered_program_rows(query, params):
    rows = program_rows()
    remaining = list(params or ())
    for clause, keep in PROGRAM_CONDITIONS:
        if clause in query:
            value = remaining.pop(0)
            rows = [r for r in rows if keep(r, value)]
    return sorted(rows, key=lambda r: r['start_date'], reverse=True)


def export_rows(query, params):
    names = {m['id']: m['name'] for m in machine_rows()}
    return [
        {'program_name': r['program_name'], 'start_date': r['start_date'], 'end_date': r['end_date'],
         'work_time': r['work_time'], 'idle_time': r['idle_time'], 'status': r['status'],
         'machine_name': names[r['machine_id']]}
        for r in filtered_program_rows(query, params)
    ]


class FakeDatabase:
    """Stands in for the MySQL pool: answers the three queries from the seed rows.

    WHERE conditions are applied to the seed rows with the bound params.
    Every executed (query, params) pair is recorded in ``executed``.
    """

    def __init__(self, error=None):
        self.error = error
        self.executed = []
        self.rows_override = None

    def _rows_for(self, query, params):
        if self.rows_override is not None:
            return self.rows_override
        if query.startswith(MACHINES_QUERY):
            return sorted(machine_rows(), key=lambda r: r['name'])
        if query.startswith(PROGRAMS_QUERY):
            return filtered_program_rows(query, params)
        if query.startswith(EXPORT_QUERY):
            return export_rows(query, params)
        return []

    @contextmanager
    def connection(self):
        if self.error is not None:
            raise self.error
        conn = MagicMock()
        cursor = MagicMock()
        conn.cursor.return_value = cursor

        def execute(query, params=()):
            self.executed.append((query, params))
            cursor.fetchall.return_value = self._rows_for(query, params)

        cursor.execute.side_effect = execute
        yield conn


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def repository(state, fake_db):
    return ProductionRepository(state, connection_factory=fake_db.connection)


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / 'public'
    public.mkdir()
    (public / 'index.html').write_text('<html><body>dashboard</body></html>', encoding='utf-8')
    (public / 'app.js').write_text('console.log("cnc");', encoding='utf-8')
    return str(public)


@pytest.fixture
def app(state, repository, static_dir, tmp_path):
    """Flask app backed by the fake database, no pool and no bootstrap."""
    from cnc_dashboard.core.factory import create_app

    app = create_app(state=state, repository=repository, init_db=False,
                     static_dir=static_dir, log_dir=str(tmp_path / 'logs'))
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create a test client for making requests to the app."""
    return app.test_client()


@pytest.fixture
def fallback_app(static_dir, tmp_path):
    """Flask app started in fallback mode."""
    from cnc_dashboard.core.factory import create_app

    state = AppState(fallback_mode=True, fallback_reason='test')
    app = create_app(state=state, init_db=False, static_dir=static_dir, log_dir=str(tmp_path / 'logs'))
    app.config['TESTING'] = True
    return app


@pytest.fixture
def fallback_client(fallback_app):
    return fallback_app.test_client()


@pytest.fixture
def mock_db_connection():
    """Create a mock database connection."""
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor
