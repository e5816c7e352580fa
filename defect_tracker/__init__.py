"""Construction-site defect tracker backend"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

db = SQLAlchemy()

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s'


def configure_logging(app):
    """Route application logs through one handler tagged with the request id"""
    from defect_tracker.middleware import RequestIdFilter

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    package_logger = logging.getLogger('defect_tracker')
    package_logger.handlers = [handler]
    package_logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    package_logger.propagate = False


def init_sentry(app):
    """Sentry error monitoring (optional -- only active when SENTRY_DSN is set)"""
    dsn = app.config.get('SENTRY_DSN')
    if not dsn or app.testing:
        return
    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=0.1,
    )


def register_error_handlers(app):
    """Render every failure in the {"success": false, "error": ...} envelope"""
    from defect_tracker.errors import DefectTrackerError

    @app.errorhandler(DefectTrackerError)
    def handle_domain_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({'success': False, 'error': 'Request body too large'}), 413

    @app.errorhandler(429)
    def ratelimit_handler(error):
        return jsonify({
            'success': False,
            'error': 'Too many requests. Please try again later.',
        }), 429

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        logger.exception("Unhandled error")
        return jsonify({'success': False, 'error': 'Something went wrong!'}), 500


def register_commands(app):
    from defect_tracker.cli import init_db_command, create_manager_command, db_migrate_command, watch_notifications_command

    app.cli.add_command(init_db_command)
    app.cli.add_command(create_manager_command)
    app.cli.add_command(db_migrate_command)
    app.cli.add_command(watch_notifications_command)


def create_app(config_name=None):
    """Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    app.config.from_object(config.get(config_name, config['default']))

    configure_logging(app)
    init_sentry(app)

    # Initialize extensions
    from defect_tracker.extensions import limiter
    from defect_tracker.middleware import RequestIdMiddleware

    db.init_app(app)
    limiter.init_app(app)
    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}}, supports_credentials=True)
    app.wsgi_app = RequestIdMiddleware(app.wsgi_app)

    # Register blueprints
    from defect_tracker.routes import auth_bp, defects_bp, members_bp, users_bp, health_bp

    api_prefix = app.config['API_PREFIX']
    app.register_blueprint(health_bp, url_prefix=api_prefix)
    app.register_blueprint(auth_bp, url_prefix=f'{api_prefix}/auth')
    app.register_blueprint(defects_bp, url_prefix=f'{api_prefix}/defects')
    app.register_blueprint(members_bp, url_prefix=f'{api_prefix}/members')
    app.register_blueprint(users_bp, url_prefix=f'{api_prefix}/users')

    register_error_handlers(app)
    register_commands(app)

    # Make sure every table exists
    from defect_tracker import models  # noqa: F401
    with app.app_context():
        db.create_all()

    logger.debug("Application created with %s config", config_name)
    return app
