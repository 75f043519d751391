# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/lunishop/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables that do not exist yet.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with their roles.
# - python -m flask users create --email admin@lunishop.local --password "secret1" --name Admin --role admin
#   Create a user (prompts if options are omitted).
# - python -m flask users set-role seller@lunishop.local seller
#   Change the role of an existing user.
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired and revoked session tokens older than the retention window.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import ShopError
from .permissions import Role
from .services import session_service, user_service


ASSIGNABLE_ROLES = [role.value for role in Role if role is not Role.ANONYMOUS]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables (existing tables are left alone)."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--name', prompt=True, help='First name')
@click.option('--surname', default='', help='Last name')
@click.option('--role', type=click.Choice(ASSIGNABLE_ROLES), default=Role.USER.value, show_default=True)
@with_appcontext
def create_user_cli(email, password, name, surname, role):
    """Create a user with the given role."""
    try:
        user = user_service.create_user(
            email=email,
            password=password,
            name=name,
            surname=surname,
            role=role,
        )
    except ShopError as exc:
        raise click.ClickException(exc.message)

    click.echo(f"PASS Created user {user.email} (ID: {user.id}, role: {user.role})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = user_service.list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Email':<35} {'Name':<25} {'Role'}")
    click.echo("="*80)

    for user in users:
        full_name = f"{user.name} {user.surname or ''}".strip()
        click.echo(f"{user.id:<5} {user.email:<35} {full_name:<25} {user.role}")

    click.echo("="*80 + "\n")


@users_group.command('set-role')
@click.argument('email')
@click.argument('role', type=click.Choice(ASSIGNABLE_ROLES))
@with_appcontext
def set_role_cli(email, role):
    """Change the role of an existing user."""
    try:
        user = user_service.get_user_by_email(email)
        user_service.update_user_role(user.id, role)
    except ShopError as exc:
        raise click.ClickException(exc.message)

    click.echo(f"PASS {email} is now {role}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', type=int, default=30, show_default=True)
@with_appcontext
def cleanup_sessions_cli(retention_days):
    """
    Cleanup expired and revoked session tokens.

    Default retention: 30 days.
    """
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"Deleted {deleted} session tokens older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
