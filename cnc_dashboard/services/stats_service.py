# services/stats_service.py
import math
from typing import Dict, Iterable

from cnc_dashboard.dto.machine import MachineDTO
from cnc_dashboard.dto.program import ProductionProgramDTO


def round_half_up(value: float) -> int:
    """Round .5 towards +inf (189.5 -> 190), unlike the built-in round()."""
    return int(math.floor(value + 0.5))


def compute_statistics(programs: Iterable[ProductionProgramDTO], machines: Iterable[MachineDTO]) -> Dict[str, int]:
    """Liczy wskaźniki dla dashboardu z pełnej listy programów i maszyn."""
    programs = list(programs)
    machines = list(machines)

    completed = sum(1 for p in programs if p.is_completed)
    emergency_count = sum(1 for p in programs if p.is_emergency)
    total_work_time = sum(p.work_time for p in programs)
    total_downtime = sum(p.idle_time for p in programs)
    avg_work_time = total_work_time / len(programs) if programs else 0

    working_machines = sum(1 for m in machines if m.is_working)
    total_machines = len(machines)
    efficiency = (working_machines / total_machines) * 100 if total_machines else 0

    return {
        'totalProduction': completed,
        'avgWorkTime': round_half_up(avg_work_time),
        'totalDowntime': total_downtime,
        'emergencyCount': emergency_count,
        'workingMachines': working_machines,
        'totalMachines': total_machines,
        'efficiency': round_half_up(efficiency),
    }
