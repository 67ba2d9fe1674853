# app/__init__.py
import logging

from flask import Flask, jsonify
from .models import db

# Loggers whose level follows LOG_LEVEL
APP_LOGGERS = ("app", "moveware", "services")


def create_app(config_class="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_class)

    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    db.init_app(app)

    # Blueprints
    from .jobs import jobs_bp
    from .quotes import quotes_bp
    from .reviews import reviews_bp

    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    app.register_blueprint(quotes_bp, url_prefix="/api/quotes")
    app.register_blueprint(reviews_bp, url_prefix="/api/review")

    @app.route("/")
    def index():
        return jsonify({"status": "ok", "service": "moveware-quote"})

    return app
