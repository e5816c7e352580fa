"""Flask CLI commands"""
import time

import click
from flask import current_app
from flask.cli import with_appcontext

from defect_tracker import db


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo('Database tables created.')


@click.command('create-manager')
@click.argument('username')
@click.password_option()
@with_appcontext
def create_manager_command(username, password):
    """Bootstrap a Manager account."""
    from defect_tracker.errors import DefectTrackerError
    from defect_tracker.routes.auth import create_account
    from defect_tracker.utils.auth import ROLE_MANAGER

    try:
        create_account(username, password, ROLE_MANAGER)
    except DefectTrackerError as e:
        raise click.ClickException(e.message)
    click.echo(f'Manager {username} created.')


@click.command('db-migrate')
@with_appcontext
def db_migrate_command():
    """Add reminder columns to an existing defects table."""
    from defect_tracker.migrate import run_migrations

    click.echo('Running database migrations...')
    for action in run_migrations(db.engine):
        click.echo(f'  -> {action}')
    click.echo('Migration complete.')


@click.command('watch-notifications')
@click.option('--url', default='http://localhost:5000/api', show_default=True, help='API base URL')
@click.option('--token', envvar='DEFECT_TRACKER_TOKEN', required=True, help='Bearer token')
@with_appcontext
def watch_notifications_command(url, token):
    """Poll for due reminders and print them as they change."""
    from defect_tracker.poller import NotificationPoller

    def show(reminders):
        click.echo(f'{len(reminders)} reminder(s) due')
        for reminder in reminders:
            click.echo(f"  [{reminder['id']}] {reminder['name']} - {reminder['defect_type']}, "
                       f"floor {reminder['floor']} (due {reminder['notification_due_at']})")

    interval = current_app.config['NOTIFICATION_POLL_INTERVAL']
    with NotificationPoller(url, token, interval=interval, on_update=show):
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            click.echo('Stopped.')
