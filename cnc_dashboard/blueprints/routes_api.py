from flask import Blueprint, current_app, jsonify, request, make_response

from cnc_dashboard.services.csv_export import CSV_FALLBACK_FILENAME, CSV_FILENAME, format_programs_csv
from cnc_dashboard.services.stats_service import compute_statistics
from cnc_dashboard.utils.validation import parse_program_filter

api_bp = Blueprint('api', __name__)

DATA_SOURCE_HEADER = 'X-Data-Source'


def _repository():
    return current_app.extensions['production_repository']


def _json_rows(result):
    response = jsonify([row.to_dict() for row in result.rows])
    response.headers[DATA_SOURCE_HEADER] = result.source
    return response


@api_bp.route('/machines', methods=['GET'])
def list_machines():
    """Wszystkie maszyny posortowane po nazwie"""
    return _json_rows(_repository().list_machines())


@api_bp.route('/production-programs', methods=['GET'])
def list_production_programs():
    """Programy produkcyjne z opcjonalnymi filtrami startDate, endDate, machineId"""
    program_filter = parse_program_filter(request.args)
    return _json_rows(_repository().list_programs(program_filter))


@api_bp.route('/export/csv', methods=['GET'])
def export_csv():
    """
    Eksport przefiltrowanych programów do pliku CSV.

    Gdy baza zawiedzie w trakcie zapytania, plik pochodzi z danych
    przykładowych i nosi nazwę production-data-fallback.csv.
    """
    program_filter = parse_program_filter(request.args)
    state = current_app.extensions['app_state']
    result = _repository().list_programs_for_export(program_filter)

    # in startup fallback mode the regular file name is kept
    filename = CSV_FALLBACK_FILENAME if result.from_fallback and not state.fallback_mode else CSV_FILENAME
    response = make_response(format_programs_csv(result.rows))
    response.headers['Content-Type'] = 'text/csv; charset=utf-8'
    response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    response.headers[DATA_SOURCE_HEADER] = result.source
    current_app.logger.info('CSV export: %s rows from %s', len(result.rows), result.source)
    return response


@api_bp.route('/stats', methods=['GET'])
def get_stats():
    """Statystyki produkcji liczone z pełnych (niefiltrowanych) danych"""
    programs, machines, source = _repository().snapshot()
    response = jsonify(compute_statistics(programs, machines))
    response.headers[DATA_SOURCE_HEADER] = source
    return response
