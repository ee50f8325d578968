from datetime import datetime

import click
from flask import Flask
from flask_migrate import Migrate

from config import Config
from models import db
from routes import health_bp, auth_bp, users_bp
from utils.auth_context import load_current_user
from utils.errors import register_error_handlers


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)

    register_error_handlers(app)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Cache-Control"] = "no-store"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
from repositories import users as users_repository
from security.password import MAX_PASSWORD_BYTES, hash_password, password_too_long
from utils.audit import log_event

def register_cli(app):
    @app.cli.command("create-user")
    @click.argument("name")
    @click.argument("email")
    @click.password_option()
    def create_user(name, email, password):
        """Create a user without going through the API (bootstrap)."""
        if users_repository.email_is_registered(email):
            click.echo("Email is already registered")
            return
        if password_too_long(password):
            click.echo(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
            return

        user = users_repository.create_user(name, email, hash_password(password))
        log_event("USER_CREATE", user_id=user.id, entity="user", entity_id=user.id, metadata={"source": "cli"})
        click.echo(f"{user.email} created with id {user.id}")

    @app.cli.command("unlock-user")
    @click.argument("email")
    def unlock_user(email):
        """Clear the failed-login counter for EMAIL."""
        user = users_repository.get_user_by_email(email)
        if not user:
            click.echo("User not found")
            return

        users_repository.reset_attempt(email, datetime.utcnow())
        log_event("USER_UNLOCK", user_id=user.id, metadata={"email": email})
        click.echo(f"{email} unlocked")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
