# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/goodies/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (use 'flask db upgrade' for migrated deployments).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all synced users with their roles.
# - python -m flask users set-role alice@example.com Administrator
#   Give a synced user a global role (the next identity update overwrites it).
#
# Value sets:
# - python -m flask options list [roles|conditions|status|productTypes]
#   Print one value set, or all of them.

import click
from flask.cli import with_appcontext

from .choices import ENUM_OPTIONS, get_options
from .extensions import db
from .services import user_service
from .validation import NotFoundError, ValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
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

    click.echo("PASS Database reset complete. Users reappear as the identity provider sends updates.")


@click.group('users')
def users_group():
    """User inspection commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    from .models import User

    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<5} {'Nickname':<20} {'Email':<35} {'Role':<22} {'External ID'}")
    click.echo("="*100)

    for user in users:
        click.echo(
            f"{user.id:<5} {(user.nickname or '-'):<20} {user.email:<35} {user.role:<22} {user.external_id}"
        )

    click.echo("="*100 + "\n")


@users_group.command('set-role')
@click.argument('email')
@click.argument('role')
@with_appcontext
def set_role(email, role):
    """Set the global role of the user with EMAIL."""
    try:
        user = user_service.set_user_role(email=email, role=role)
    except (NotFoundError, ValidationError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS {user.email} is now {user.role}")


@click.group('options')
def options_group():
    """Closed value sets (roles, conditions, statuses, product types)."""


@options_group.command('list')
@click.argument('name', required=False)
def list_options(name):
    """Print the NAME value set, or every set when NAME is omitted."""
    if name:
        try:
            values = get_options(name)
        except ValidationError as e:
            raise click.ClickException(str(e))
        for value in values:
            click.echo(value)
        return

    for set_name, values in ENUM_OPTIONS.items():
        click.echo(f"{set_name}:")
        for value in values:
            click.echo(f"  {value}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(options_group)
