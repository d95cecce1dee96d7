"""Tests for UserClient."""

import pytest

from bibocom.adapters.user_client import UserClient
from bibocom.core.errors import ServerError
from tests.fixtures.http_fixtures import make_response


@pytest.fixture
def client(auth, settings, http):
    return UserClient(auth, settings, http)


def test_get_profile_unwraps_data(client, http):
    http.request.return_value = make_response(200, {"data": {"firstName": "Awa"}})
    assert client.get_profile(7) == {"firstName": "Awa"}
    assert http.request.call_args[0] == ("GET", "http://api.test/api/users/7")


def test_get_partner(client, http):
    http.request.return_value = make_response(
        200, {"firstName": "Awa", "lastName": "Diop", "shopName": "Chez Awa", "role": "MERCHANT"}
    )
    partner = client.get_partner(7)
    assert partner.id == 7
    assert partner.display_name == "Chez Awa"
    assert not partner.is_placeholder


def test_get_partner_with_malformed_profile(client, http):
    http.request.return_value = make_response(200, {"data": {"firstName": {"fr": "Awa"}}})
    with pytest.raises(ServerError):
        client.get_partner(7)
