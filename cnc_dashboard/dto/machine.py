from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class MachineStatus(str, Enum):
    WORKING = 'working'
    IDLE = 'idle'
    EMERGENCY = 'emergency'


def coerce_status(enum_cls, value):
    """Map a raw status string onto ``enum_cls``; unknown values stay plain strings.

    The column is free text in the database, so an unexpected value must not
    break serialization of the whole response.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def status_value(status):
    return status.value if isinstance(status, Enum) else status


MACHINE_COLUMNS = ('id', 'name', 'status', 'work_time', 'idle_time', 'emergency_time')


@dataclass
class MachineDTO:
    id: Optional[str] = None
    name: Optional[str] = None
    status: Union[MachineStatus, str, None] = None
    work_time: int = 0
    idle_time: int = 0
    emergency_time: int = 0

    def __post_init__(self):
        self.status = coerce_status(MachineStatus, self.status)

    @classmethod
    def from_db_row(cls, row: Any, columns: Optional[Tuple[str, ...]] = None) -> "MachineDTO":
        """
        Build the DTO from a cursor row.

        Accepts a dict (``cursor(dictionary=True)``) or a tuple; tuples are
        mapped through ``columns`` or, when absent, the table's column order.
        """
        if row is None:
            return cls()
        if not isinstance(row, dict):
            row = dict(zip(columns or MACHINE_COLUMNS, row))
        return cls(
            id=row.get('id'),
            name=row.get('name'),
            status=row.get('status'),
            work_time=int(row.get('work_time') or 0),
            idle_time=int(row.get('idle_time') or 0),
            emergency_time=int(row.get('emergency_time') or 0),
        )

    @property
    def is_working(self) -> bool:
        return self.status == MachineStatus.WORKING

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'status': status_value(self.status),
            'work_time': self.work_time,
            'idle_time': self.idle_time,
            'emergency_time': self.emergency_time,
        }

    def __repr__(self) -> str:
        return f"MachineDTO(id={self.id}, name={self.name}, status={status_value(self.status)})"
