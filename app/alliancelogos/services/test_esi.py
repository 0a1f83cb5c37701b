import pytest
import requests

from alliancelogos.services.esi import USER_AGENT, LogoProbeError, parse_content_length


def test_fetch_alliance_ids(make_client):
    client = make_client(ids=[99000001, 99000002])
    assert client.fetch_alliance_ids() == [99000001, 99000002]
    assert client.session.headers["User-Agent"] == USER_AGENT


def test_fetch_alliance_ids_raises_on_error_status(make_client):
    client = make_client()
    with pytest.raises(requests.HTTPError):
        client.fetch_alliance_ids()


def test_fetch_alliance_returns_none_on_error_status(make_client):
    client = make_client(details={7: 404, 8: {"ticker": "T8", "date_founded": "2020-01-01T00:00:00Z"}})
    assert client.fetch_alliance(7) is None
    assert client.fetch_alliance(8)["ticker"] == "T8"


def test_probe_logo_size_uses_head(make_client):
    client = make_client(sizes={42: 12000})
    assert client.probe_logo_size(42) == 12000
    assert client.session.urls("HEAD") == ["https://images.test/Alliance/42_128.png"]
    assert client.session.urls("GET") == []


@pytest.mark.parametrize("value", [None, "", "abc", "-1"])
def test_probe_logo_size_rejects_bad_header(make_client, value):
    client = make_client(sizes={42: value})
    with pytest.raises(LogoProbeError):
        client.probe_logo_size(42)


def test_parse_content_length_strips_whitespace():
    assert parse_content_length(" 9353 ") == 9353
