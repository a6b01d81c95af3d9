from typing import Any, Callable

from cnc_dashboard.dto.program import ProgramFilter
from cnc_dashboard.errors import FilterValueInvalid
from cnc_dashboard.utils.timestamps import parse_iso_instant


def optional_field(args: Any, key: str, *, default: Any = None, cast: Callable[[str], Any] | None = None) -> Any:
    """
    Extract an optional query parameter; blank values count as missing.
    If `cast` fails, FilterValueInvalid is raised with the offending field.
    """
    if args is None:
        return default
    val = args.get(key)
    if val is None or (isinstance(val, str) and val.strip() == ''):
        return default
    if cast:
        try:
            return cast(val)
        except (TypeError, ValueError, OverflowError):
            raise FilterValueInvalid(key, val)
    return val


def parse_program_filter(args: Any) -> ProgramFilter:
    """Build a ProgramFilter from `startDate`, `endDate` and `machineId` query parameters."""
    return ProgramFilter(
        start_date=optional_field(args, 'startDate', cast=parse_iso_instant),
        end_date=optional_field(args, 'endDate', cast=parse_iso_instant),
        machine_id=optional_field(args, 'machineId'),
    )
