"""WSGI entry point for the quote application.

Exposes ``app`` for gunicorn (``flask_app:app``) and creates missing tables
when run directly.
"""
from app import create_app
from app.models import db

app = create_app()

if __name__ == "__main__":  # pragma: no cover - manual run helper
    with app.app_context():
        db.create_all()
    app.run(debug=True, host="0.0.0.0", port=5000)
