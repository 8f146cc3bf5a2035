from typing import Optional

from pydantic import BaseModel


class LocationRequest(BaseModel):
    latitude: float
    longitude: float


class HospitalResponse(BaseModel):
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
