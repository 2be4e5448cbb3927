"""Command-line interface."""

import random

import pytest
from typer.testing import CliRunner

from sydai.cli import DEMO_USERNAMES, app, seed_demo_data

runner = CliRunner()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


class TestSeed:

    def test_seed_population(self, services):
        created = seed_demo_data(services, random.Random(7))

        assert created == len(DEMO_USERNAMES) + 1
        page = services.leaderboard.get_page(0, 100)
        points = {entry.username: entry.points for entry in page.entries}
        assert points["DefaultUser"] == 500
        assert all(100 <= points[name] <= 10099 for name in DEMO_USERNAMES)

    def test_first_users_checked_in_yesterday(self, services):
        seed_demo_data(services, random.Random(7))

        for name in DEMO_USERNAMES[:5]:
            user = services.auth.get_user_by_email(f"{name.lower()}@example.com")
            assert services.checkin.status(user.id).state.value == "checked_in_previously"

    def test_seed_is_idempotent(self, services):
        seed_demo_data(services, random.Random(7))
        assert seed_demo_data(services, random.Random(7)) == 0


class TestCommands:

    def test_init(self, database_url):
        result = runner.invoke(app, ["init", "--database-url", database_url])

        assert result.exit_code == 0
        assert "Database initialized" in result.stdout

    def test_seed_then_leaderboard(self, database_url):
        seeded = runner.invoke(app, ["seed", "--database-url", database_url, "--random-seed", "1"])
        assert seeded.exit_code == 0
        assert "Created 16 demo users" in seeded.stdout

        board = runner.invoke(app, ["leaderboard", "--database-url", database_url, "--size", "20"])
        assert board.exit_code == 0
        assert "DefaultUser" in board.stdout

    def test_empty_leaderboard(self, database_url):
        result = runner.invoke(app, ["leaderboard", "--database-url", database_url])

        assert result.exit_code == 0
        assert "No users" in result.stdout

    def test_referral_stats(self, database_url):
        runner.invoke(app, ["seed", "--database-url", database_url, "--random-seed", "1"])

        result = runner.invoke(app, ["referral-stats", "1", "--database-url", database_url])

        assert result.exit_code == 0
        assert "/signup?ref=" in result.stdout

    def test_referral_stats_unknown_user(self, database_url):
        result = runner.invoke(app, ["referral-stats", "999", "--database-url", database_url])

        assert result.exit_code == 1

    def test_leaderboard_size_capped(self, database_url):
        result = runner.invoke(app, ["leaderboard", "--database-url", database_url, "--size", "150"])

        assert result.exit_code == 2
