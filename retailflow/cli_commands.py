"""
Flask CLI commands for database setup.

Commands:
- flask init-db: Create tables and seed roles and code formats
- flask seed-code-formats: Insert the default code formats
- flask create-user: Create a user from the terminal
"""

import click
from retailflow.database import create_schema, get_session
from retailflow.exceptions import RetailError
from retailflow.services.auth_service import create_user, seed_roles
from retailflow.services.code_service import seed_code_formats


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create missing tables, then seed roles and code formats."""
        create_schema()
        session = get_session()
        roles = seed_roles(session)
        formats = seed_code_formats(session)
        click.echo(click.style('Database initialized.', fg='green', bold=True))
        click.echo(f'   Roles added: {roles}')
        click.echo(f'   Code formats added: {formats}')

    @app.cli.command('seed-code-formats')
    def seed_code_formats_command():
        """Insert the default code format rows that are missing."""
        added = seed_code_formats(get_session())
        click.echo(click.style(f'{added} code formats added.', fg='green'))

    @app.cli.command('create-user')
    @click.option('--username', prompt=True, help='Login name')
    @click.option('--email', prompt=True, help='Email address')
    @click.option('--role', default='admin', show_default=True, help='Existing role name')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
    def create_user_command(username, email, role, password):
        """Create a user (the role must already exist)."""
        if len(password) < 6:
            click.echo(click.style('Password must have at least 6 characters.', fg='red'))
            return

        try:
            user_id = create_user(get_session(), username, password, email, role)
        except RetailError as e:
            click.echo(click.style(f'Error creating user: {e.message}', fg='red'))
            return

        click.echo(click.style('User created.', fg='green', bold=True))
        click.echo(f'   Username: {username}')
        click.echo(f'   ID: {user_id}')
