from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os

db = SQLAlchemy()

LOG_FORMAT = '%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s'


def configure_logging(app):
    """Attach a request-aware stream handler to the root logger once"""
    from tooltracker.middleware.request_id import RequestIdFilter

    root = logging.getLogger()
    if not any(getattr(handler, 'is_tooltracker_handler', False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(RequestIdFilter())
        handler.is_tooltracker_handler = True
        root.addHandler(handler)

    root.setLevel(app.config.get('LOG_LEVEL', 'INFO'))


def create_app(config_name=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config.get(config_name, config['default']))
    app.json.sort_keys = app.config['JSON_SORT_KEYS']

    configure_logging(app)

    # Initialize extensions
    from tooltracker.extensions import limiter
    db.init_app(app)
    limiter.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    from tooltracker.middleware import RequestIdMiddleware
    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    from tooltracker.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from tooltracker.routes.jobs import jobs_bp
    from tooltracker.routes.tools import tools_bp
    from tooltracker.routes.assignments import assignments_bp
    from tooltracker.routes.queries import queries_bp

    api_prefix = app.config['API_PREFIX']
    app.register_blueprint(jobs_bp, url_prefix=f'{api_prefix}/jobs')
    app.register_blueprint(tools_bp, url_prefix=f'{api_prefix}/tools')
    app.register_blueprint(assignments_bp, url_prefix=f'{api_prefix}/assignments')
    app.register_blueprint(queries_bp, url_prefix=f'{api_prefix}/queries')

    from tooltracker.commands import register_commands
    register_commands(app)

    # Health check endpoint
    @app.route('/health')
    @limiter.exempt
    def health():
        return {'status': 'healthy', 'service': 'tooltracker'}, 200

    # Create all database tables
    from tooltracker import models  # noqa: F401
    with app.app_context():
        db.create_all()

    return app
