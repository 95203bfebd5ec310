"""Data classes for country records."""

from dataclasses import dataclass
from typing import Optional

FeatureVector = tuple[float, float, float]


@dataclass
class Country:
    """One country's disease burden and emissions values."""
    name: str
    communicable: float
    non_communicable: float
    co2: float
    cluster: Optional[int] = None  # None until the first assignment pass

    @property
    def features(self) -> FeatureVector:
        return (self.communicable, self.non_communicable, self.co2)
