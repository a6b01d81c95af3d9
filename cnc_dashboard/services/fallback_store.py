"""In-memory copy of the sample dataset, used when the database is unreachable."""
from typing import Dict, List, Iterable, Optional

from cnc_dashboard.dto.machine import MachineDTO
from cnc_dashboard.dto.program import ExportRowDTO, ProductionProgramDTO, ProgramFilter
from cnc_dashboard.seed import SEED_MACHINES, SEED_PROGRAMS


class FallbackStore:
    """Answers the same three queries as the database, with identical ordering."""

    def __init__(self, machines: Optional[Iterable[MachineDTO]] = None,
                 programs: Optional[Iterable[ProductionProgramDTO]] = None):
        self._machines = list(machines if machines is not None else SEED_MACHINES)
        self._programs = list(programs if programs is not None else SEED_PROGRAMS)

    def list_machines(self) -> List[MachineDTO]:
        return sorted(self._machines, key=lambda m: m.name or '')

    def list_programs(self, program_filter: Optional[ProgramFilter] = None) -> List[ProductionProgramDTO]:
        program_filter = program_filter or ProgramFilter()
        matching = [p for p in self._programs if program_filter.matches(p)]
        return sorted(matching, key=lambda p: p.start_date, reverse=True)

    def list_programs_for_export(self, program_filter: Optional[ProgramFilter] = None) -> List[ExportRowDTO]:
        names = self.machine_names()
        return [
            ExportRowDTO.from_program(p, names.get(p.machine_id, p.machine_id))
            for p in self.list_programs(program_filter)
        ]

    def machine_names(self) -> Dict[str, str]:
        return {m.id: m.name for m in self._machines}
