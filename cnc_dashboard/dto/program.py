from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from cnc_dashboard.dto.machine import coerce_status, status_value
from cnc_dashboard.utils.timestamps import to_datetime, format_iso_instant


class ProgramStatus(str, Enum):
    COMPLETED = 'zakończono_pomyślnie'
    EMERGENCY = 'emergency'


PROGRAM_COLUMNS = ('id', 'program_name', 'machine_id', 'start_date', 'end_date',
                   'work_time', 'idle_time', 'status')

EXPORT_COLUMNS = ('program_name', 'start_date', 'end_date', 'work_time', 'idle_time',
                  'status', 'machine_name')


@dataclass(frozen=True)
class ProgramFilter:
    """Optional, independently combinable (AND) constraints on programs."""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    machine_id: Optional[str] = None

    def matches(self, program: "ProductionProgramDTO") -> bool:
        if self.start_date is not None and program.start_date < self.start_date:
            return False
        if self.end_date is not None and program.start_date > self.end_date:
            return False
        if self.machine_id and program.machine_id != self.machine_id:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        return self.start_date is None and self.end_date is None and not self.machine_id


@dataclass
class ProductionProgramDTO:
    id: Optional[str] = None
    program_name: Optional[str] = None
    machine_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    work_time: int = 0
    idle_time: int = 0
    status: Union[ProgramStatus, str, None] = None

    def __post_init__(self):
        self.status = coerce_status(ProgramStatus, self.status)
        self.start_date = to_datetime(self.start_date)
        self.end_date = to_datetime(self.end_date)

    @classmethod
    def from_db_row(cls, row: Any, columns: Optional[Tuple[str, ...]] = None) -> "ProductionProgramDTO":
        if row is None:
            return cls()
        if not isinstance(row, dict):
            row = dict(zip(columns or PROGRAM_COLUMNS, row))
        return cls(
            id=row.get('id'),
            program_name=row.get('program_name'),
            machine_id=row.get('machine_id'),
            start_date=row.get('start_date'),
            end_date=row.get('end_date'),
            work_time=int(row.get('work_time') or 0),
            idle_time=int(row.get('idle_time') or 0),
            status=row.get('status'),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == ProgramStatus.COMPLETED

    @property
    def is_emergency(self) -> bool:
        return self.status == ProgramStatus.EMERGENCY

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'program_name': self.program_name,
            'machine_id': self.machine_id,
            'start_date': format_iso_instant(self.start_date) or None,
            'end_date': format_iso_instant(self.end_date) or None,
            'work_time': self.work_time,
            'idle_time': self.idle_time,
            'status': status_value(self.status),
        }


@dataclass
class ExportRowDTO:
    """A program joined with the display name of its machine."""
    program_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    work_time: int = 0
    idle_time: int = 0
    status: Union[ProgramStatus, str, None] = None
    machine_name: Optional[str] = None

    def __post_init__(self):
        self.status = coerce_status(ProgramStatus, self.status)
        self.start_date = to_datetime(self.start_date)
        self.end_date = to_datetime(self.end_date)

    @classmethod
    def from_db_row(cls, row: Any, columns: Optional[Tuple[str, ...]] = None) -> "ExportRowDTO":
        if row is None:
            return cls()
        if not isinstance(row, dict):
            row = dict(zip(columns or EXPORT_COLUMNS, row))
        return cls(
            program_name=row.get('program_name'),
            start_date=row.get('start_date'),
            end_date=row.get('end_date'),
            work_time=int(row.get('work_time') or 0),
            idle_time=int(row.get('idle_time') or 0),
            status=row.get('status'),
            machine_name=row.get('machine_name'),
        )

    @classmethod
    def from_program(cls, program: ProductionProgramDTO, machine_name: Optional[str]) -> "ExportRowDTO":
        return cls(
            program_name=program.program_name,
            start_date=program.start_date,
            end_date=program.end_date,
            work_time=program.work_time,
            idle_time=program.idle_time,
            status=program.status,
            machine_name=machine_name,
        )

    def as_csv_fields(self):
        return [
            self.program_name or '',
            format_iso_instant(self.start_date),
            format_iso_instant(self.end_date),
            str(self.work_time),
            str(self.idle_time),
            status_value(self.status) or '',
            self.machine_name or '',
        ]
