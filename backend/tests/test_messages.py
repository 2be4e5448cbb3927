"""Chat messages and the per-message point."""

import pytest

from sydai.exceptions import NotFoundError
from sydai.messages.service import CANNED_RESPONSES, WELCOME_MESSAGE, random_response

from conftest import SCRIPTED_REPLY


class TestMessageService:

    def test_send_awards_one_point(self, services, make_user):
        user = make_user(points=4)

        exchange = services.messages.send(user.id, "  hello  ")

        assert exchange.new_balance == 5
        assert exchange.message.content == "hello"
        assert exchange.message.is_from_user is True
        assert exchange.reply.content == SCRIPTED_REPLY
        assert exchange.reply.is_from_user is False
        assert services.ledger.get_balance(user.id) == 5

    def test_conversation_oldest_first(self, services, make_user, clock):
        user = make_user()
        services.messages.post_welcome(user.id)
        clock.advance(seconds=5)
        services.messages.send(user.id, "hello")

        contents = [m.content for m in services.messages.list_for_user(user.id)]

        assert contents == [WELCOME_MESSAGE, "hello", SCRIPTED_REPLY]

    def test_empty_message_rejected(self, services, make_user):
        user = make_user()

        with pytest.raises(ValueError):
            services.messages.send(user.id, "   ")

        assert services.ledger.get_balance(user.id) == 0

    def test_unknown_user_stores_nothing(self, services):
        with pytest.raises(NotFoundError):
            services.messages.send(999, "hello")

        assert services.messages.list_for_user(999) == []

    def test_random_response_is_canned(self):
        assert random_response("anything") in CANNED_RESPONSES
