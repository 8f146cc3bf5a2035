from typing import List

from fastapi import APIRouter, Depends

from app.places_client import PlacesClient, get_places_client
from schemas.hospitals import HospitalResponse, LocationRequest

router = APIRouter(prefix="/api", tags=["Nearby Hospitals"])


@router.post("/nearby-hospitals", response_model=List[HospitalResponse])
def nearby_hospitals(
    location: LocationRequest,
    client: PlacesClient = Depends(get_places_client),
):
    """Mental-health hospitals around a location, via the Places API."""
    return client.find_nearby_hospitals(location.latitude, location.longitude)
