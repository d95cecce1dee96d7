"""Fixtures for messages and conversations."""

from datetime import datetime, timedelta, timezone

import pytest

from bibocom.schemas.message import Conversation, Message


@pytest.fixture(scope="function")
def partner_id(faker, current_user):
    return current_user.id + faker.random_int(min=1, max=500)


@pytest.fixture(scope="function")
def make_message(faker, current_user):
    """Factory for messages between the current user and a partner."""
    counter = {"id": 0}
    start = datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)

    def _make(partner, outgoing=True, **overrides):
        counter["id"] += 1
        data = {
            "id": counter["id"],
            "sender_id": current_user.id if outgoing else partner,
            "receiver_id": partner if outgoing else current_user.id,
            "content": faker.sentence(),
            "created_at": start + timedelta(minutes=counter["id"]),
        }
        data.update(overrides)
        return Message(**data)

    return _make


@pytest.fixture(scope="function")
def make_conversation(faker):
    def _make(partner, **overrides):
        data = {
            "partner_id": partner,
            "partner_name": faker.company(),
            "last_message": faker.sentence(),
            "unread_count": faker.random_int(min=1, max=9),
        }
        data.update(overrides)
        return Conversation(**data)

    return _make
