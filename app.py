"""
Devfolio - Main Application Entry Point
Application Factory Pattern: extensions, blueprints, error handlers and hooks
are wired here; all route handling lives in the blueprints.
"""

import logging
import os
from datetime import datetime
from flask import Flask, render_template, request, jsonify
from config import get_config
from extensions import db, init_extensions
from utils.errors import AccessError
from utils.helpers import format_blog_content, format_date

# Import all blueprints
from blueprints.api import api_bp
from blueprints.auth import auth_bp
from blueprints.pages import pages_bp
from blueprints.dashboard import dashboard_bp
from blueprints.portfolio import portfolio_bp


def create_app(config_name=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(get_config(config_name))

    configure_logging(app)

    # Initialize extensions with app
    initialize_extensions(app)

    # Register Jinja filters
    app.jinja_env.filters['blog_content'] = format_blog_content
    app.jinja_env.filters['date'] = format_date

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    return app


def configure_logging(app):
    """Apply LOG_LEVEL to the app logger"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    init_extensions(app)

    # Models must be imported before create_all
    import models  # noqa: F401

    # Create tables if they don't exist
    with app.app_context():
        try:
            from sqlalchemy import text
            db.create_all()
            # Verify connection
            db.session.execute(text('SELECT 1'))
            app.logger.info("✓ Database initialized successfully")
        except Exception as e:
            app.logger.error(f"✗ Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(dashboard_bp)
    # Catch-all /<username> routes go last
    app.register_blueprint(portfolio_bp)


def wants_json():
    return request.path.startswith('/api/')


def register_error_handlers(app):
    """Register custom error handlers"""

    @app.errorhandler(400)
    def bad_request(e):
        if wants_json():
            return jsonify({'error': 'Bad request', 'kind': 'validation'}), 400
        return render_template('errors/400.html'), 400

    @app.errorhandler(404)
    def page_not_found(e):
        if wants_json():
            return jsonify({'error': 'Not found', 'kind': 'not_found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        if wants_json():
            return jsonify({'error': 'Method not allowed'}), 405
        return render_template('errors/404.html'), 405

    @app.errorhandler(AccessError)
    def access_error(e):
        if wants_json():
            return jsonify(e.to_dict()), e.status
        if e.status == 404:
            return render_template('errors/404.html'), 404
        return render_template('errors/500.html', message=e.message), e.status

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        if wants_json():
            return jsonify({'error': 'Internal server error', 'kind': 'transient'}), 500
        return render_template('errors/500.html'), 500


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.context_processor
    def inject_global_vars():
        return {
            'current_year': datetime.now().year,
            'site_name': 'Devfolio',
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "img-src * data:; "
            "style-src 'self' 'unsafe-inline'; "
            "frame-ancestors 'none';"
        )
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


if __name__ == '__main__':
    env = os.environ.get('FLASK_ENV', 'development')
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=(env == 'development')
    )
