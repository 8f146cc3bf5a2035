"""
Google Places API client for the nearby-hospitals lookup.
"""
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.exceptions import PlacesAPIError, PlacesNotConfiguredError, ValidationError
from app.logger import get_logger, timed_operation

logger = get_logger(__name__)

OK_STATUSES = {"OK", "ZERO_RESULTS"}


def to_hospital(result: Dict[str, Any]) -> Dict[str, Any]:
    """Map a Nearby Search result to {name, latitude, longitude, address}."""
    location = result.get("geometry", {}).get("location", {})
    return {
        "name": result.get("name", ""),
        "latitude": location.get("lat"),
        "longitude": location.get("lng"),
        "address": result.get("vicinity"),
    }


class PlacesClient:
    """
    Client for the Places Nearby Search web service.
    A single request per lookup; failures are reported, never retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        radius_m: Optional[int] = None,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client, defaulting every option from settings."""
        self.api_key = settings.places_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.places_api_base).rstrip('/')
        self.radius_m = radius_m or settings.places_radius_m
        self.place_type = place_type or settings.places_type
        self.keyword = settings.places_keyword if keyword is None else keyword
        self.timeout = timeout or settings.places_timeout
        self._transport = transport

        logger.info(f"Places client initialized for {self.base_url}")

    @property
    def is_configured(self) -> bool:
        """Check if the client is properly configured."""
        return bool(self.api_key and self.base_url)

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Perform a GET request and return parsed JSON."""
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.get(f"{self.base_url}{path}", params=params)
            resp.raise_for_status()
            return resp.json()

    @timed_operation("find_nearby_hospitals")
    def find_nearby_hospitals(self, latitude: float, longitude: float) -> List[Dict[str, Any]]:
        """
        Find hospitals near a point, filtered by the configured keyword.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            List of {name, latitude, longitude, address} dicts

        Raises:
            ValidationError: coordinates out of range
            PlacesNotConfiguredError: no API key configured
            PlacesAPIError: transport failure or an error status from the API
        """
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise ValidationError("Latitude must be within ±90 and longitude within ±180")
        if not self.is_configured:
            raise PlacesNotConfiguredError("Places API key is not configured")

        params = {
            "location": f"{latitude},{longitude}",
            "radius": self.radius_m,
            "type": self.place_type,
            "key": self.api_key,
        }
        if self.keyword:
            params["keyword"] = self.keyword

        try:
            data = self._get("/nearbysearch/json", params)
        except httpx.HTTPError as e:
            logger.error(f"Places request failed: {e}")
            raise PlacesAPIError("Error finding nearby hospitals")

        status = data.get("status", "UNKNOWN_ERROR")
        if status not in OK_STATUSES:
            logger.error(f"Places API returned {status}: {data.get('error_message', '')}")
            raise PlacesAPIError("Error finding nearby hospitals")

        hospitals = [to_hospital(r) for r in data.get("results", [])]
        logger.info(f"Found {len(hospitals)} hospital(s) near ({latitude:.4f}, {longitude:.4f})")
        return hospitals


@lru_cache()
def get_places_client() -> PlacesClient:
    """Get a cached Places client instance."""
    return PlacesClient()
