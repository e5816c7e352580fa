"""
Defect tracker schema migration

Adds the reminder columns to a ``defects`` table created before reminders
existed; ``db.create_all()`` never alters tables that are already there.

Usage:
    flask db-migrate

Safe to run multiple times (idempotent).
"""
import logging

from sqlalchemy import inspect, text

logger = logging.getLogger(__name__)

# Each entry: (table, column, sql_type_sqlite, sql_type_pg, default_expr | None)
COLUMN_MIGRATIONS = [
    ("defects", "notification_delay_seconds", "INTEGER", "INTEGER", "NULL"),
    ("defects", "notification_due_at", "DATETIME", "TIMESTAMP", "NULL"),
    ("defects", "is_notified", "BOOLEAN", "BOOLEAN", "FALSE"),
]


def run_migrations(engine):
    """
    Apply pending column additions

    Returns:
        list[str]: human-readable actions taken
    """
    actions = []
    is_sqlite = engine.dialect.name == 'sqlite'
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())

    pending = []
    for table, column, sqlite_type, pg_type, default in COLUMN_MIGRATIONS:
        if table not in tables:
            continue
        existing = {col['name'] for col in inspector.get_columns(table)}
        if column not in existing:
            pending.append((table, column, sqlite_type, pg_type, default))

    with engine.begin() as conn:
        for table, column, sqlite_type, pg_type, default in pending:
            sql_type = sqlite_type if is_sqlite else pg_type
            if is_sqlite and default == 'FALSE':
                default = '0'
            default_clause = f' DEFAULT {default}' if default and default != 'NULL' else ''
            conn.execute(text(f'ALTER TABLE {table} ADD COLUMN {column} {sql_type}{default_clause}'))
            actions.append(f'Added column {table}.{column}  ({sql_type}{default_clause})')
            logger.info("Added column %s.%s", table, column)

    if not actions:
        actions.append('Database is up to date -- nothing to do.')
    return actions
