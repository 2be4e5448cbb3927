"""Leaderboard ordering, pagination and reported population."""

import pytest

from sydai.auth.models import UserAccount
from sydai.exceptions import NotFoundError
from sydai.leaderboard.service import LEADERBOARD_MIN_TOTAL_USERS, MAX_PAGE_SIZE


@pytest.fixture
def ranked_users(make_user):
    """25 users with distinct totals: user001 has 25 points, user025 has 1."""
    return [make_user(points=25 - i) for i in range(25)]


class TestPagination:

    def test_ranks_are_absolute(self, services, ranked_users):
        pages = [services.leaderboard.get_page(page, 10) for page in range(3)]

        assert [e.rank for e in pages[0].entries] == list(range(1, 11))
        assert [e.rank for e in pages[1].entries] == list(range(11, 21))
        assert [e.rank for e in pages[2].entries] == list(range(21, 26))

    def test_ordered_by_points_descending(self, services, ranked_users):
        entries = services.leaderboard.get_page(0, 10).entries

        assert entries[0].username == "user001"
        assert entries[0].points == 25
        points = [e.points for e in entries]
        assert points == sorted(points, reverse=True)

    def test_has_more(self, services, ranked_users):
        assert services.leaderboard.get_page(0, 10).has_more is True
        assert services.leaderboard.get_page(1, 10).has_more is True
        assert services.leaderboard.get_page(2, 10).has_more is False

    def test_page_past_the_end_is_empty(self, services, ranked_users):
        page = services.leaderboard.get_page(5, 10)

        assert page.entries == []
        assert page.has_more is False

    def test_invalid_arguments(self, services):
        with pytest.raises(ValueError):
            services.leaderboard.get_page(-1, 10)
        with pytest.raises(ValueError):
            services.leaderboard.get_page(0, 0)

    def test_large_page_size(self, services, ranked_users):
        page = services.leaderboard.get_page(0, MAX_PAGE_SIZE + 50)

        assert [e.rank for e in page.entries] == list(range(1, 26))
        assert page.has_more is False

    def test_single_user_large_page(self, services, make_user):
        make_user()

        assert len(services.leaderboard.get_page(0, 150).entries) == 1


class TestOrdering:

    def test_ties_broken_by_registration_order(self, services, make_user):
        first = make_user(points=50)
        second = make_user(points=50)
        leader = make_user(points=70)

        entries = services.leaderboard.get_page(0, 10).entries

        assert [e.id for e in entries] == [leader.id, first.id, second.id]
        assert [e.rank for e in entries] == [1, 2, 3]

    def test_reflects_latest_awards(self, services, make_user):
        alice = make_user("alice", points=5)
        bob = make_user("bob", points=10)
        assert services.leaderboard.get_page().entries[0].id == bob.id

        services.ledger.award_points(alice.id, 6, operation="message")

        top = services.leaderboard.get_page().entries[0]
        assert top.id == alice.id
        assert top.points == 11

    def test_get_rank(self, services, make_user):
        first = make_user(points=50)
        second = make_user(points=50)
        make_user(points=70)

        assert services.leaderboard.get_rank(first.id).rank == 2
        assert services.leaderboard.get_rank(second.id).rank == 3

    def test_get_rank_unknown_user(self, services):
        with pytest.raises(NotFoundError):
            services.leaderboard.get_rank(999)


class TestTotalUsers:

    def test_small_population_reported_as_minimum(self, services, make_user):
        for _ in range(3):
            make_user()

        page = services.leaderboard.get_page()

        assert page.total_users == LEADERBOARD_MIN_TOTAL_USERS
        assert len(page.entries) == 3

    def test_large_population_reported_exactly(self, services):
        with services.db.session() as session:
            session.add_all(
                UserAccount(
                    username=f"bulk{i}",
                    email=f"bulk{i}@example.com",
                    password_hash="not-a-real-hash",
                    points=i % 37,
                )
                for i in range(1005)
            )

        assert services.leaderboard.get_page().total_users == 1005
