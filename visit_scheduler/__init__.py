import logging

from flask import Flask
from flask_cors import CORS
from .extensions import db
from config import Config


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    CORS(app, origins=app.config.get('CORS_ORIGINS', '*'))
    db.init_app(app)

    # Blueprints
    from .routes.health_routes import health_bp
    from .routes.master_routes import master_bp
    from .routes.appointment_routes import appointment_bp
    from .routes.draft_routes import draft_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(master_bp)
    app.register_blueprint(appointment_bp)
    app.register_blueprint(draft_bp)

    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

    return app
