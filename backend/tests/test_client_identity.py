import pytest

from contact_api.core.client_identity import UNKNOWN_CLIENT, client_id_from
from conftest import VALID_SUBMISSION

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "forwarded, remote, expected",
    [
        ("203.0.113.7", "10.0.0.1", "203.0.113.7"),
        ("203.0.113.7, 70.41.3.18, 150.172.238.178", "10.0.0.1", "203.0.113.7"),
        ("  198.51.100.2  ,10.0.0.2", None, "198.51.100.2"),
        (None, "10.0.0.1", "10.0.0.1"),
        ("", "10.0.0.1", "10.0.0.1"),
        (" , 10.0.0.9", "10.0.0.1", "10.0.0.1"),
        (None, None, UNKNOWN_CLIENT),
        (None, "", UNKNOWN_CLIENT),
    ],
)
def test_client_id_from(forwarded, remote, expected):
    assert client_id_from(forwarded, remote) == expected


def test_forwarded_header_drives_identity_over_http(client, dispatcher):
    resp = client.post(
        "/api/contact",
        json=VALID_SUBMISSION,
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert resp.status_code == 200
    assert dispatcher.calls[0][1] == "203.0.113.7"


def test_socket_peer_used_without_forwarded_header(client, dispatcher):
    client.post("/api/contact", json=VALID_SUBMISSION)
    # TestClient reports its peer as "testclient"
    assert dispatcher.calls[0][1] == "testclient"
