"""Flask application factory."""

import os
from flask import Flask

from cnc_dashboard import config, db
from cnc_dashboard.blueprints.routes_api import api_bp
from cnc_dashboard.blueprints.routes_main import main_bp
from cnc_dashboard.core.error_handlers import setup_logging, register_error_handlers
from cnc_dashboard.core.middleware import register_middleware
from cnc_dashboard.core.state import AppState
from cnc_dashboard.errors import StoreUnavailable
from cnc_dashboard.services.fallback_store import FallbackStore
from cnc_dashboard.services.production_repository import ProductionRepository


def create_app(state=None, repository=None, init_db=True, static_dir=None, log_dir=None):
    """Create and configure Flask application.

    Args:
        state: AppState to use (a fresh one in database mode by default)
        repository: ProductionRepository override (useful for testing)
        init_db: whether to open the pool and bootstrap the database; on
            failure the state is switched to fallback mode
        static_dir: directory holding the dashboard's index.html
        log_dir: directory for rotating log files

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__, static_folder=None)
    app.config['VERSION'] = config.VERSION
    app.config['SERVICE_NAME'] = config.SERVICE_NAME
    app.config['STATIC_DIR'] = os.path.abspath(static_dir or config.STATIC_DIR)
    app.json.ensure_ascii = False

    # Set up logging and error handlers BEFORE any routes or blueprints
    setup_logging(app, log_dir=log_dir)
    register_error_handlers(app)
    register_middleware(app)

    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(main_bp)

    state = state or AppState()
    if init_db and not state.fallback_mode:
        bootstrap_store(app, state)

    app.extensions['app_state'] = state
    app.extensions['production_repository'] = repository or ProductionRepository(state, FallbackStore())
    return app


def bootstrap_store(app, state):
    """Open the pool and create/seed tables; degrade to fallback mode on failure."""
    try:
        db_config = config.build_db_config(config.require_database_url(), config.APP_ENV)
        db.init_pool(db_config, pool_size=config.DB_POOL_SIZE, acquire_timeout=config.DB_CONNECT_TIMEOUT)
        db.setup_database()
        app.logger.info('Using MySQL database')
    except (StoreUnavailable, ValueError) as e:
        app.logger.error('Database initialization failed: %s', e)
        app.logger.warning('Application will run with sample data in memory. '
                           'To fix: set a correct DATABASE_URL in environment variables')
        state.enable_fallback(e)
