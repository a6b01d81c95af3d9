"""Sample dataset inserted into an empty database and served in fallback mode."""
from datetime import datetime

from cnc_dashboard.dto.machine import MachineDTO, MachineStatus
from cnc_dashboard.dto.program import ProductionProgramDTO, ProgramStatus


SEED_MACHINES = (
    MachineDTO('machine-1', 'NEXT VECTOR-01', MachineStatus.WORKING, 452, 15, 0),
    MachineDTO('machine-2', 'NEXT VECTOR-02', MachineStatus.IDLE, 405, 62, 0),
    MachineDTO('machine-3', 'NEXT VECTOR-03', MachineStatus.EMERGENCY, 318, 125, 24),
)

SEED_PROGRAMS = (
    ProductionProgramDTO('prog-1', 'NESTING_KITCHEN_001', 'machine-1',
                         datetime(2024, 1, 15, 8, 30, 0), datetime(2024, 1, 15, 12, 45, 30),
                         250, 5, ProgramStatus.COMPLETED),
    ProductionProgramDTO('prog-2', 'FURNITURE_CUTTING_055', 'machine-2',
                         datetime(2024, 1, 15, 13, 15, 0), datetime(2024, 1, 15, 16, 22, 15),
                         175, 12, ProgramStatus.COMPLETED),
    ProductionProgramDTO('prog-3', 'DOOR_PANELS_089', 'machine-3',
                         datetime(2024, 1, 15, 9, 45, 0), datetime(2024, 1, 15, 11, 23, 45),
                         75, 3, ProgramStatus.EMERGENCY),
    ProductionProgramDTO('prog-4', 'CABINET_PARTS_134', 'machine-1',
                         datetime(2024, 1, 14, 14, 20, 0), datetime(2024, 1, 14, 18, 35, 30),
                         248, 7, ProgramStatus.COMPLETED),
    ProductionProgramDTO('prog-5', 'SHELVING_NESTING_078', 'machine-2',
                         datetime(2024, 1, 14, 10, 15, 0), datetime(2024, 1, 14, 13, 42, 15),
                         198, 9, ProgramStatus.COMPLETED),
)


def machine_insert_params():
    return [(m.id, m.name, m.status.value, m.work_time, m.idle_time, m.emergency_time)
            for m in SEED_MACHINES]


def program_insert_params():
    return [(p.id, p.program_name, p.machine_id, p.start_date, p.end_date,
             p.work_time, p.idle_time, p.status.value)
            for p in SEED_PROGRAMS]
