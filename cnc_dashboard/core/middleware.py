"""Middleware functions for request/response processing."""

import os
from flask import request


def register_middleware(app):
    """Register all middleware functions with the Flask app.

    Args:
        app: Flask application instance
    """
    app.before_request(log_request_info(app))
    app.after_request(add_api_headers(app))
    app.after_request(add_cache_headers(app))


def _is_static_path(p):
    return p.startswith('/static/') or p == '/favicon.ico' or p.startswith('/.well-known')


def log_request_info(app):
    """Middleware: log incoming requests (except static/well-known paths).

    Returns:
        Middleware function for before_request
    """
    def middleware():
        p = request.path or ''
        if _is_static_path(p):
            return
        # full_path includes the query string (?startDate=...)
        full = getattr(request, 'full_path', None) or p
        app.logger.debug('Incoming request (pid=%s): %s %s', os.getpid(), request.method, full)
    return middleware


def add_api_headers(app):
    """Middleware: permissive CORS and no caching on /api responses.

    Returns:
        Middleware function for after_request
    """
    def middleware(response):
        if (request.path or '').startswith('/api/'):
            response.headers['Access-Control-Allow-Origin'] = '*'
            response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
            response.headers['Access-Control-Allow-Methods'] = 'GET, OPTIONS'
            response.headers['Cache-Control'] = 'no-store'
        return response
    return middleware


def add_cache_headers(app):
    """Middleware: add caching headers for static assets and favicon.

    Returns:
        Middleware function for after_request
    """
    def middleware(response):
        if _is_static_path(request.path or ''):
            # cache for 1 day
            response.headers['Cache-Control'] = 'public, max-age=86400'
        return response
    return middleware
