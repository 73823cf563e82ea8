# Overview: Flask CLI command groups for session maintenance, data API checks and policy inspection.

# backend/bms/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# Session store:
# - python -m flask session init
#   Create the session_entries table if it does not exist.
# - python -m flask session cleanup --days 30
#   Delete session entries untouched for the given number of days.
#
# Data API:
# - python -m flask api ping
#   Check that the configured data API answers.
#
# Access policy inspection:
# - python -m flask policy routes purchase
#   List route prefixes granted to a role and its landing page.
# - python -m flask policy check sales /inventory/adjust
#   Check whether a role may open a path.

from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .permissions import ALL_ROLES, allowed_routes, is_route_allowed, landing_path
from .services import session_service
from .services.resource_client import ResourceClient, ResourceError


@click.group('session')
def session_group():
    """Durable session store maintenance."""


@session_group.command('init')
@with_appcontext
def init_session_store():
    db.create_all()
    click.echo("Session store ready.")


@session_group.command('cleanup')
@click.option('--days', default=30, show_default=True, type=int, help='Retention window in days')
@with_appcontext
def cleanup_sessions(days):
    deleted = session_service.cleanup_stale_entries(timedelta(days=days))
    click.echo(f"Deleted {deleted} stale session entries.")


@click.group('api')
def api_group():
    """Data API checks."""


@api_group.command('ping')
@with_appcontext
def ping_api():
    config = current_app.config
    base_url = config["DATA_API_BASE_URL"]
    with ResourceClient(base_url, timeout=config.get("DATA_API_TIMEOUT", 30),
                        transport=config.get("DATA_API_TRANSPORT")) as client:
        try:
            client.ping()
        except ResourceError as e:
            raise click.ClickException(f"{base_url} unavailable: {e}")
    click.echo(f"{base_url} OK")


@click.group('policy')
def policy_group():
    """Access policy inspection."""


@policy_group.command('routes')
@click.argument('role', type=click.Choice(ALL_ROLES))
def policy_routes(role):
    for prefix in sorted(allowed_routes(role)):
        click.echo(prefix)
    click.echo(f"landing: {landing_path(role)}")


@policy_group.command('check')
@click.argument('role')
@click.argument('path')
def policy_check(role, path):
    allowed = is_route_allowed(role, path)
    click.echo(f"{role} {path}: {'allowed' if allowed else 'denied'}")
    if not allowed:
        raise SystemExit(1)


def register_commands(app):
    app.cli.add_command(session_group)
    app.cli.add_command(api_group)
    app.cli.add_command(policy_group)
