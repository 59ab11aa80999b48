"""Geographic position of a business."""
from dataclasses import dataclass
from typing import Dict, Optional, Union

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def __post_init__(self):
        low, high = LATITUDE_RANGE
        if not low <= self.latitude <= high:
            raise ValueError(f"latitude {self.latitude} is outside [{low}, {high}]")
        low, high = LONGITUDE_RANGE
        if not low <= self.longitude <= high:
            raise ValueError(f"longitude {self.longitude} is outside [{low}, {high}]")

    @classmethod
    def from_optional(cls, latitude: Optional[float], longitude: Optional[float]) -> Optional["Coordinates"]:
        """Coordinates for a business row or payload; None unless both parts are set."""
        if latitude is None or longitude is None:
            return None
        return cls(latitude=float(latitude), longitude=float(longitude))

    def as_geo(self) -> Dict[str, Union[str, float]]:
        """schema.org GeoCoordinates node."""
        return {"@type": "GeoCoordinates", "latitude": self.latitude, "longitude": self.longitude}
