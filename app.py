"""
app.py — Flask entry point for the harvest plan application.

Initializes the Flask app, loads the plan defaults into app.config,
enables CSRF protection, configures logging and registers the route
blueprints.

Run: python app.py → localhost:5000
"""

import logging
import os
from flask import Flask
from flask_wtf.csrf import CSRFProtect

from config import PLAN_DEFAULTS
from routes.plan import plan_bp
from routes.export import export_bp

# Module loggers whose level follows app.config['LOG_LEVEL']
APP_LOGGERS = ('plan_engine', 'utils.validators')


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.secret_key = os.environ.get('SECRET_KEY', 'harvest-plan-local-app-secret-key')
    app.config['WTF_CSRF_CHECK_DEFAULT'] = True
    app.config['PLAN_DEFAULTS'] = dict(PLAN_DEFAULTS)
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')

    if test_config:
        app.config.update(test_config)

    CSRFProtect(app)

    level = app.config['LOG_LEVEL']
    app.logger.setLevel(level)
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    # Register blueprints
    app.register_blueprint(plan_bp)
    app.register_blueprint(export_bp)

    app.logger.debug("Harvest plan app ready (defaults: %s)", app.config['PLAN_DEFAULTS'])
    return app


if __name__ == '__main__':
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
