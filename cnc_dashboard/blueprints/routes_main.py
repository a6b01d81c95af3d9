import os
from datetime import datetime, timezone

from flask import Blueprint, abort, current_app, jsonify, send_from_directory

from cnc_dashboard.errors import StoreUnavailable
from cnc_dashboard.utils.timestamps import format_iso_instant

main_bp = Blueprint('main', __name__)


@main_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint for container orchestration (Docker, Render).
    Reports whether the database answers and which data source is active.
    """
    state = current_app.extensions['app_state']
    if state.fallback_mode:
        db_status = 'fallback'
    else:
        try:
            current_app.extensions['production_repository'].ping()
            db_status = 'healthy'
        except StoreUnavailable as e:
            db_status = f'error: {e}'

    health_data = {
        'status': 'ok' if db_status == 'healthy' else 'degraded',
        'timestamp': format_iso_instant(datetime.now(timezone.utc)),
        'service': current_app.config.get('SERVICE_NAME', 'cnc-dashboard'),
        'db': db_status,
        'mode': state.mode,
        'version': current_app.config.get('VERSION', 'unknown'),
    }
    status_code = 200 if db_status == 'healthy' else 503
    return jsonify(health_data), status_code


@main_bp.route('/', defaults={'path': ''}, methods=['GET'])
@main_bp.route('/<path:path>', methods=['GET'])
def serve_spa(path):
    """Static assets of the dashboard; every other path gets index.html."""
    if path == 'api' or path.startswith('api/'):
        abort(404, description=f'Nieznany endpoint API: /{path}')

    static_dir = current_app.config['STATIC_DIR']
    if path and os.path.isfile(os.path.join(static_dir, path)):
        return send_from_directory(static_dir, path)
    return send_from_directory(static_dir, 'index.html')
