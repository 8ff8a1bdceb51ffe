#!/usr/bin/env python3
"""Admin server - accessible only from local network. Port configurable via ADMIN_PORT in .env.

Cron: `flask --app admin_server daily-report` writes (and emails) today's report.
"""

import click
from flask import Flask
from gallery.admin.routes import admin_bp
from gallery.auth.routes import auth_bp
from gallery.bootstrap import init_app
from gallery.config import ADMIN_PORT
from gallery.errors import ApiError
from gallery.master.routes import master_bp
from gallery.models import ROLES, ROLE_ADMIN
from gallery.services import admin_service, report_service

app = Flask(__name__)
init_app(app)

app.register_blueprint(auth_bp)
app.register_blueprint(admin_bp)
app.register_blueprint(master_bp)

with app.app_context():
    admin_service.seed_master_admin()


@app.cli.command("daily-report")
@click.option("--date", "day", default=None, help="Day to report on (YYYY-MM-DD), defaults to today UTC.")
@click.option("--no-email", is_flag=True, help="Store the report without emailing it.")
def daily_report(day, no_email):
    """Generate the daily report."""
    try:
        report = report_service.generate_report(day, generated_by="cli", send_email=not no_email)
    except ApiError as e:
        raise click.ClickException(e.message)
    click.echo(
        f"Report for {report['date']}: {report['images_uploaded']['count']} upload(s), "
        f"{report['likes_received']} like(s), emailed={report['emailed']}"
    )


@app.cli.command("create-admin")
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", type=click.Choice(ROLES), default=ROLE_ADMIN, show_default=True)
def create_admin(username, password, role):
    """Create an admin account."""
    try:
        admin = admin_service.create_admin(username, password, role=role)
    except ApiError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created {admin.role} '{admin.username}' ({admin.id})")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=ADMIN_PORT, debug=False)
