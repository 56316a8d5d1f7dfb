# Overview: Flask CLI command groups for bootstrap and user management.

# backend/parlour/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and seeds admin/admin123 if there are no users.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
# - python -m flask users create --username alice --password "s3cret" --role admin

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import User
from .services.auth_service import create_user, ensure_default_admin


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create tables and seed the default admin.

    The admin account is only created when the users table is empty.
    SECURITY: Change the default password immediately in production!
    """
    click.echo("START Initializing parlour POS...")

    db.create_all()
    click.echo("PASS Tables checked/created.")

    admin = ensure_default_admin()
    if admin is not None:
        click.echo(
            f"PASS Created default admin -> username: {admin.username}  "
            f"password: {current_app.config['DEFAULT_ADMIN_PASSWORD']}"
        )
    else:
        click.echo("PASS Users already exist, skipping admin seed.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA, ledger included!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to seed the admin.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', default='admin', show_default=True, help='Role name')
@with_appcontext
def create_user_cli(username, password, role):
    """Create a user with a bcrypt-hashed password."""
    try:
        user = create_user(username=username, password=password, role=role)
    except ValueError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created user: {user.username} with role '{user.role}' (ID: {user.id})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*50)
    click.echo(f"{'ID':<5} {'Username':<25} {'Role'}")
    click.echo("="*50)

    for user in users:
        click.echo(f"{user.id:<5} {user.username:<25} {user.role}")

    click.echo("="*50 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
