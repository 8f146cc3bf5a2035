# tests/test_places_client.py

import httpx
import pytest

from app.exceptions import PlacesAPIError, PlacesNotConfiguredError, ValidationError
from app.places_client import PlacesClient

SAMPLE_RESPONSE = {
    "status": "OK",
    "results": [
        {
            "name": "City Mental Health Centre",
            "vicinity": "12 Harbour Road",
            "geometry": {"location": {"lat": 12.97, "lng": 77.59}},
        },
        {
            "name": "Riverside Clinic",
            "geometry": {"location": {"lat": 12.98, "lng": 77.6}},
        },
    ],
}


def make_client(handler, api_key: str = "test-key") -> PlacesClient:
    return PlacesClient(
        api_key=api_key,
        base_url="https://places.test/api/place",
        transport=httpx.MockTransport(handler),
    )


def test_nearby_hospitals_are_mapped() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SAMPLE_RESPONSE)

    hospitals = make_client(handler).find_nearby_hospitals(12.9716, 77.5946)

    assert hospitals == [
        {
            "name": "City Mental Health Centre",
            "latitude": 12.97,
            "longitude": 77.59,
            "address": "12 Harbour Road",
        },
        {
            "name": "Riverside Clinic",
            "latitude": 12.98,
            "longitude": 77.6,
            "address": None,
        },
    ]

    (request,) = seen
    assert request.url.path == "/api/place/nearbysearch/json"
    assert request.url.params["location"] == "12.9716,77.5946"
    assert request.url.params["type"] == "hospital"
    assert request.url.params["keyword"] == "mental health"
    assert request.url.params["key"] == "test-key"


def test_zero_results_is_an_empty_list() -> None:
    client = make_client(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))
    assert client.find_nearby_hospitals(0.0, 0.0) == []


def test_error_status_is_reported() -> None:
    client = make_client(
        lambda request: httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})
    )
    with pytest.raises(PlacesAPIError, match="Error finding nearby hospitals"):
        client.find_nearby_hospitals(12.97, 77.59)


def test_http_failures_are_reported_without_retry() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, text="upstream down")

    with pytest.raises(PlacesAPIError):
        make_client(handler).find_nearby_hospitals(12.97, 77.59)
    assert len(calls) == 1

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PlacesAPIError):
        make_client(unreachable).find_nearby_hospitals(12.97, 77.59)


def test_unconfigured_client_makes_no_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = make_client(handler, api_key="")
    assert not client.is_configured
    with pytest.raises(PlacesNotConfiguredError):
        client.find_nearby_hospitals(12.97, 77.59)


def test_coordinates_are_validated() -> None:
    client = make_client(lambda request: httpx.Response(200, json=SAMPLE_RESPONSE))
    with pytest.raises(ValidationError):
        client.find_nearby_hospitals(95.0, 0.0)
    with pytest.raises(ValidationError):
        client.find_nearby_hospitals(0.0, -181.0)
