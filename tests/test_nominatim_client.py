import pytest

from core.clients.nominatim import NominatimClient
from core.exceptions import ExternalServiceError
from tests.http_fakes import FakeResponse, FakeSession


@pytest.mark.asyncio
async def test_nominatim_reverse_sends_expected_query() -> None:
    response = FakeResponse(
        status=200,
        json_data={"display_name": "Storgatan 1, Stockholm"},
    )
    session = FakeSession(get_responses=[response])

    client = NominatimClient(session)
    result = await client.reverse(59.3, 18.0)

    assert result == {"display_name": "Storgatan 1, Stockholm"}
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url.endswith("/reverse")
    assert kwargs["params"] == {
        "format": "json",
        "lat": 59.3,
        "lon": 18.0,
        "zoom": 18,
        "addressdetails": 1,
    }
    assert kwargs["headers"]["User-Agent"]


@pytest.mark.asyncio
async def test_nominatim_reverse_returns_none_on_404() -> None:
    session = FakeSession(get_responses=[FakeResponse(status=404)])

    client = NominatimClient(session)

    assert await client.reverse(0.0, 0.0) is None


@pytest.mark.asyncio
async def test_nominatim_reverse_raises_on_error() -> None:
    session = FakeSession(get_responses=[FakeResponse(status=500, text_data="boom")])

    client = NominatimClient(session)

    with pytest.raises(ExternalServiceError) as raised:
        await client.reverse(59.3, 18.0)

    assert "Nominatim reverse" in raised.value.message
    assert raised.value.details["status"] == 500


@pytest.mark.asyncio
async def test_reverse_address_uses_display_name() -> None:
    session = FakeSession(
        get_responses=[
            FakeResponse(json_data={"display_name": "Kungsgatan 2, Uppsala"}),
            FakeResponse(json_data={"error": "Unable to geocode"}),
        ],
    )

    client = NominatimClient(session)

    assert await client.reverse_address(59.8, 17.6) == "Kungsgatan 2, Uppsala"
    assert await client.reverse_address(0.0, 0.0) is None
