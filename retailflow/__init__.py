"""Flask application factory."""
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from retailflow.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Sentry error tracking in production
    sentry_dsn = app.config.get('SENTRY_DSN') or os.getenv('SENTRY_DSN')
    if sentry_dsn and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis cache for reports
    from retailflow.services.cache_service import init_cache
    init_cache(app)

    # Role of the last logged-in user
    from retailflow.services.session_store import init_session_store
    init_session_store(app)

    # Prometheus metrics instrumentation
    from retailflow.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database (remote with retries, then local fallback)
    init_db(app)

    from retailflow.middleware import load_current_user, add_cors_headers

    @app.before_request
    def before_request_handler():
        """Load the bearer-token user for each request."""
        load_current_user()

    app.after_request(add_cors_headers)

    # Error Handlers
    from retailflow.exceptions import RetailError

    @app.errorhandler(RetailError)
    def handle_retail_error(error):
        """Handle application exceptions as JSON."""
        if error.status_code >= 500:
            app.logger.error(f"RetailError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"RetailError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.name}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        import traceback
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from retailflow.blueprints.main import main_bp
    from retailflow.blueprints.users import users_bp
    from retailflow.blueprints.catalog import catalog_bp
    from retailflow.blueprints.suppliers import suppliers_bp
    from retailflow.blueprints.customers import customers_bp
    from retailflow.blueprints.code_formats import code_formats_bp
    from retailflow.blueprints.purchase_orders import purchase_orders_bp
    from retailflow.blueprints.invoices import invoices_bp
    from retailflow.blueprints.reports import reports_bp
    from retailflow.blueprints.metrics import metrics_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(suppliers_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(code_formats_bp)
    app.register_blueprint(purchase_orders_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from retailflow.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
