"""
Eksport programów produkcyjnych do CSV
"""
import csv
from io import StringIO
from typing import Iterable

from cnc_dashboard.dto.program import ExportRowDTO

CSV_HEADERS = [
    "Nazwa Programu",
    "Data Rozpoczęcia",
    "Data Zakończenia",
    "Czas Pracy (minuty)",
    "Czas Postoju (minuty)",
    "Rodzaj Zakończenia",
    "Maszyna",
]

CSV_FILENAME = 'production-data.csv'
CSV_FALLBACK_FILENAME = 'production-data-fallback.csv'


def format_programs_csv(rows: Iterable[ExportRowDTO]) -> str:
    """Header plus one fully quoted line per row, lines joined with a bare newline.

    Embedded double quotes are doubled by the csv module.
    """
    buffer = StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow(row.as_csv_fields())
    # no trailing newline after the last row
    return buffer.getvalue()[:-1]
