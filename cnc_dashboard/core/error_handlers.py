"""Error handlers and logging configuration."""

import os
import logging
from logging.handlers import RotatingFileHandler
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from cnc_dashboard.errors import FilterValueInvalid, StoreUnavailable


class NoiseFilter(logging.Filter):
    """Filter to suppress noisy 404/405 errors for paths bots and browsers request on their own."""

    def filter(self, record):
        try:
            msg = record.getMessage()
        except Exception:
            return True

        if record.levelno >= logging.ERROR and (
            ('404 Not Found' in msg or '405 Method Not Allowed' in msg)
        ):
            noisy_paths = ['/favicon.ico', '/.well-known/', '/static/']
            for p in noisy_paths:
                if p in msg:
                    return False
        return True


def setup_logging(app, log_dir=None):
    """Configure application logging.

    Sets up:
    - rotating file handler in logs/app.log (10 MB, 5 backups)
    - noise filter on it and on werkzeug
    - the package logger (parent of app.logger), werkzeug and waitress
      attached to the same handler

    Console output is left to the root logger configured by the server.

    Args:
        app: Flask application instance
        log_dir: directory for log files (defaults to LOG_DIR from config)
    """
    from cnc_dashboard.config import LOG_DIR

    logs_dir = log_dir or LOG_DIR
    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    # delay=True so the file is opened on first emit
    handler = RotatingFileHandler(os.path.join(logs_dir, 'app.log'), maxBytes=10 * 1024 * 1024,
                                  backupCount=5, encoding='utf-8', delay=True)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s [pid=%(process)d] %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'))

    noise_filter = NoiseFilter()
    handler.addFilter(noise_filter)
    logging.getLogger('werkzeug').addFilter(noise_filter)

    package_logger = logging.getLogger('cnc_dashboard')
    package_logger.setLevel(logging.DEBUG)
    app.logger.setLevel(logging.DEBUG)
    for logger in (package_logger, logging.getLogger('werkzeug'), logging.getLogger('waitress')):
        # replace the handler from a previous create_app() in the same process
        for old in [h for h in logger.handlers if getattr(h, '_cnc_dashboard', False)]:
            logger.removeHandler(old)
            old.close()
        logger.addHandler(handler)
    handler._cnc_dashboard = True

    return handler


def _json_error(message, status_code, **extra):
    payload = {'error': message}
    payload.update(extra)
    return jsonify(payload), status_code


def register_error_handlers(app):
    """Register global error handlers; every error is answered with JSON.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(FilterValueInvalid)
    def handle_invalid_filter(error):
        app.logger.info('Rejected filter on %s: %s', request.path, error)
        return _json_error(str(error), 400, field=error.field)

    @app.errorhandler(StoreUnavailable)
    def handle_store_unavailable(error):
        app.logger.error('Store unavailable on %s %s: %s', request.method, request.path, error)
        return _json_error('Baza danych jest niedostępna', 503)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code is None or error.code < 400:
            # routing redirects (e.g. trailing slash) keep their own response
            return error
        return _json_error(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle uncaught exceptions with logging and a generic 500 body."""
        app.logger.exception('Unhandled exception on %s %s: %s: %s',
                             request.method, request.path, error.__class__.__name__, error)
        return _json_error('Wewnętrzny błąd serwera', 500)
