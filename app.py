import logging
from flask import Flask, request, jsonify
from flasgger import Swagger
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import db, bcrypt, migrate, cors
from models.user_model import User

from routes.auth_routes import auth_bp, init_auth_routes
from routes.blog_routes import blog_bp
from routes.consultation_routes import consultation_bp
from routes.site_data_routes import site_data_bp
from routes.section_items_routes import portfolio_bp, gallery_bp
from routes.upload_routes import upload_bp, uploads_static_bp
from routes.health_routes import health_bp
from services.auth_service import AuthService
from utils.errors import internal_error_body


def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(level)

    @app.after_request
    def log_request(response):
        app.logger.info(f"{request.remote_addr} {request.method} {request.full_path.rstrip('?')} {response.status_code}")
        return response


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'message': 'API endpoint not found'}), 404
        return jsonify({'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({'message': 'Request body too large'}), 413

    @app.errorhandler(Exception)
    def unhandled(error):
        if isinstance(error, HTTPException):
            return jsonify({'message': error.description}), error.code
        db.session.rollback()
        app.logger.error(f"Unhandled error on {request.method} {request.path}: {str(error)}", exc_info=True)
        return jsonify(internal_error_body(error)), 500


def seed_bootstrap_admin(app):
    if not app.config.get('SEED_BOOTSTRAP_ADMIN', True):
        return
    if User.query.filter_by(is_bootstrap=True).first() is None:
        user = AuthService.ensure_bootstrap_admin(
            app.config['BOOTSTRAP_ADMIN_USERNAME'],
            app.config['BOOTSTRAP_ADMIN_EMAIL'],
            app.config['BOOTSTRAP_ADMIN_PASSWORD'],
        )
        app.logger.warning(f"Seeded bootstrap admin '{user.username}', change its password")


def create_app(config_object=None, **overrides):
    app = Flask(__name__)

    # Config
    app.config.from_object(config_object or Config)
    app.config.update(overrides)
    configure_logging(app)

    # CORS Configuration
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "OPTIONS", "PUT", "DELETE"],
            "allow_headers": ["Authorization", "Content-Type"],
            "supports_credentials": True,
            "expose_headers": ["Authorization"]
        }
    })

    Swagger(app)

    # Init extensions
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    init_auth_routes(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(blog_bp, url_prefix="/api/blog")
    app.register_blueprint(consultation_bp, url_prefix="/api/consultations")
    app.register_blueprint(site_data_bp, url_prefix="/api/site-data")
    app.register_blueprint(portfolio_bp, url_prefix="/api/portfolio")
    app.register_blueprint(gallery_bp, url_prefix="/api/gallery")
    app.register_blueprint(upload_bp, url_prefix="/api/upload")
    app.register_blueprint(uploads_static_bp)
    app.register_blueprint(health_bp, url_prefix="/api")
    register_error_handlers(app)

    with app.app_context():
        db.create_all()
        seed_bootstrap_admin(app)

    app.logger.info(f"App created for environment '{app.config['ENVIRONMENT']}'")
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config['ENVIRONMENT'] == 'development', host="localhost", port=5000)
