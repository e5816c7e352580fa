"""
Flask CLI command tests
"""
from defect_tracker.models import User


class TestCommands:

    def test_create_manager(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['create-manager', 'first.lead', '--password', 'SitePass123!'])

        assert result.exit_code == 0
        assert 'Manager first.lead created' in result.output
        assert User.query.filter_by(username='first.lead').one().role == 'Manager'

    def test_create_manager_duplicate(self, app, manager_user):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['create-manager', 'site.manager', '--password', 'SitePass123!'])

        assert result.exit_code != 0
        assert 'already taken' in result.output

    def test_db_migrate_up_to_date(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['db-migrate'])

        assert result.exit_code == 0
        assert 'nothing to do' in result.output

    def test_init_db(self, app):
        result = app.test_cli_runner().invoke(args=['init-db'])

        assert result.exit_code == 0
