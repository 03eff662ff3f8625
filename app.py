import os

import click
from flask import Flask
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash

from configs import Config, db, login
from db.models.user import JobType, User, UserRole
from blueprint import blue_print
from admin.setup import init_admin
from utils.auth import init_auth
from utils.errors import register_error_handlers
from utils.logger import setup_logging


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    setup_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    login.init_app(app)
    init_auth(login)

    register_error_handlers(app)
    init_admin(app)  # panel admin di /manage
    blue_print(app)  # daftar blueprint API
    app.cli.add_command(init_db_command)
    return app


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Buat tabel; opsional buat akun admin dari ADMIN_USERNAME/ADMIN_PASSWORD."""
    db.create_all()
    username = os.getenv("ADMIN_USERNAME")
    password = os.getenv("ADMIN_PASSWORD")
    if username and password and not User.query.filter_by(username=username).first():
        db.session.add(
            User(
                username=username,
                password_hash=generate_password_hash(password),
                name="System Admin",
                role=UserRole.ADMIN,
                job_type=JobType.ADMIN,
                is_active=True,
            )
        )
        db.session.commit()
        click.echo(f"Admin user '{username}' dibuat")
    click.echo("Database siap")


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
