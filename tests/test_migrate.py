"""
Schema migration tests
"""
from sqlalchemy import create_engine, inspect, text

from defect_tracker.migrate import run_migrations

LEGACY_DEFECTS = """
CREATE TABLE defects (
    id VARCHAR(36) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    defect_type VARCHAR(100) NOT NULL,
    floor VARCHAR(50) NOT NULL,
    axis_location VARCHAR(100) NOT NULL,
    status VARCHAR(50) NOT NULL,
    before_photo TEXT NOT NULL,
    after_photo TEXT,
    created_by VARCHAR(36),
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""


def _legacy_engine():
    engine = create_engine('sqlite://')
    with engine.begin() as conn:
        conn.execute(text(LEGACY_DEFECTS))
        conn.execute(text(
            "INSERT INTO defects VALUES ('d1', 'Crack', 'Structural', '1', 'A-1', "
            "'On Progress', 'photo', NULL, NULL, '2026-01-01 00:00:00', '2026-01-01 00:00:00')"
        ))
    return engine


class TestMigrations:

    def test_adds_reminder_columns(self):
        engine = _legacy_engine()

        actions = run_migrations(engine)

        columns = {col['name'] for col in inspect(engine).get_columns('defects')}
        assert {'notification_delay_seconds', 'notification_due_at', 'is_notified'} <= columns
        assert len(actions) == 3

    def test_existing_rows_are_not_notified(self):
        engine = _legacy_engine()
        run_migrations(engine)

        with engine.connect() as conn:
            row = conn.execute(text(
                'SELECT is_notified, notification_due_at FROM defects WHERE id = :id'
            ), {'id': 'd1'}).one()

        assert row.is_notified == 0
        assert row.notification_due_at is None

    def test_idempotent(self):
        engine = _legacy_engine()
        run_migrations(engine)

        actions = run_migrations(engine)

        assert actions == ['Database is up to date -- nothing to do.']

    def test_missing_table_is_skipped(self):
        engine = create_engine('sqlite://')

        assert run_migrations(engine) == ['Database is up to date -- nothing to do.']
