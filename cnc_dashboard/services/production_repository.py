"""Data access: parameterized queries against MySQL with in-memory fallback.

Every query uses %s placeholders. When the application runs in fallback mode,
or a single query fails, the FallbackStore answers with the same filter
semantics and ordering as the SQL below.
"""
import logging
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

import mysql.connector

from cnc_dashboard import db
from cnc_dashboard.core.state import AppState
from cnc_dashboard.dto.machine import MachineDTO
from cnc_dashboard.dto.program import ExportRowDTO, ProductionProgramDTO, ProgramFilter
from cnc_dashboard.errors import StoreUnavailable
from cnc_dashboard.services.fallback_store import FallbackStore

logger = logging.getLogger(__name__)

SOURCE_DATABASE = 'database'
SOURCE_FALLBACK = 'fallback'

MACHINES_QUERY = (
    "SELECT id, name, status, work_time, idle_time, emergency_time "
    "FROM machines ORDER BY name"
)
PROGRAMS_QUERY = (
    "SELECT id, program_name, machine_id, start_date, end_date, work_time, idle_time, status "
    "FROM production_programs"
)
EXPORT_QUERY = (
    "SELECT pp.program_name, pp.start_date, pp.end_date, pp.work_time, pp.idle_time, "
    "pp.status, m.name AS machine_name "
    "FROM production_programs pp JOIN machines m ON pp.machine_id = m.id"
)


class FetchResult(NamedTuple):
    rows: List[Any]
    source: str

    @property
    def from_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


def build_program_conditions(program_filter: Optional[ProgramFilter], prefix: str = '') -> Tuple[str, tuple]:
    """Return ``(' WHERE ...', params)`` for the filter, or ``('', ())`` when it is empty."""
    if program_filter is None:
        return '', ()
    conditions = []
    params = []
    if program_filter.start_date is not None:
        conditions.append(f'{prefix}start_date >= %s')
        params.append(program_filter.start_date)
    if program_filter.end_date is not None:
        conditions.append(f'{prefix}start_date <= %s')
        params.append(program_filter.end_date)
    if program_filter.machine_id:
        conditions.append(f'{prefix}machine_id = %s')
        params.append(program_filter.machine_id)
    if not conditions:
        return '', ()
    return ' WHERE ' + ' AND '.join(conditions), tuple(params)


def build_programs_query(program_filter: Optional[ProgramFilter] = None) -> Tuple[str, tuple]:
    where, params = build_program_conditions(program_filter)
    return PROGRAMS_QUERY + where + ' ORDER BY start_date DESC', params


def build_export_query(program_filter: Optional[ProgramFilter] = None) -> Tuple[str, tuple]:
    where, params = build_program_conditions(program_filter, prefix='pp.')
    return EXPORT_QUERY + where + ' ORDER BY pp.start_date DESC', params


class ProductionRepository:
    """Read-only access to machines and production programs."""

    def __init__(self, state: AppState, fallback: Optional[FallbackStore] = None,
                 connection_factory: Optional[Callable] = None):
        self.state = state
        self.fallback = fallback or FallbackStore()
        self._connection_factory = connection_factory or db.get_db_connection

    def list_machines(self) -> FetchResult:
        return self._fetch(
            'machines',
            lambda: (MACHINES_QUERY, ()),
            MachineDTO.from_db_row,
            self.fallback.list_machines,
        )

    def list_programs(self, program_filter: Optional[ProgramFilter] = None) -> FetchResult:
        return self._fetch(
            'production programs',
            lambda: build_programs_query(program_filter),
            ProductionProgramDTO.from_db_row,
            lambda: self.fallback.list_programs(program_filter),
        )

    def list_programs_for_export(self, program_filter: Optional[ProgramFilter] = None) -> FetchResult:
        return self._fetch(
            'export rows',
            lambda: build_export_query(program_filter),
            ExportRowDTO.from_db_row,
            lambda: self.fallback.list_programs_for_export(program_filter),
        )

    def snapshot(self):
        """Unfiltered programs and machines from one store, for the statistics.

        If only one of the two queries had to fall back, both are taken from
        the FallbackStore so the figures never mix sources.
        """
        programs = self.list_programs()
        machines = self.list_machines()
        if programs.source != machines.source:
            logger.warning('Statistics sources diverged (programs=%s, machines=%s), using sample data',
                           programs.source, machines.source)
            return self.fallback.list_programs(), self.fallback.list_machines(), SOURCE_FALLBACK
        return programs.rows, machines.rows, programs.source

    def _fetch(self, what, build_query, map_row, fallback_rows) -> FetchResult:
        if self.state.fallback_mode:
            return FetchResult(fallback_rows(), SOURCE_FALLBACK)
        try:
            query, params = build_query()
            rows = self._query(query, params)
            return FetchResult([map_row(r) for r in rows], SOURCE_DATABASE)
        except StoreUnavailable as e:
            logger.error('Error fetching %s, serving sample data instead: %s', what, e)
            return FetchResult(fallback_rows(), SOURCE_FALLBACK)

    def _query(self, query, params):
        try:
            with self._connection_factory() as conn:
                cursor = conn.cursor(dictionary=True)
                try:
                    cursor.execute(query, params)
                    return cursor.fetchall()
                finally:
                    cursor.close()
        except mysql.connector.Error as e:
            raise StoreUnavailable(f'Zapytanie nie powiodło się: {e}', cause=e) from e

    def ping(self):
        """Round-trip ``SELECT 1``; raises StoreUnavailable on failure."""
        self._query('SELECT 1', ())
