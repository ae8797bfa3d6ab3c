from typing import Optional, List

from pydantic import BaseModel, Field

from address_mapper.labels.clustering import MERGE_PX
from address_mapper.labels.projection import Viewport
from address_mapper.models.address import AddressItem


class BatchGeocodeRequest(BaseModel):
    """Newline separated addresses to geocode in one go."""
    text: str
    restrict: Optional[str] = None
    engine: Optional[str] = None
    viewport: Optional[Viewport] = None


class LabelsRequest(BaseModel):
    viewport: Viewport
    items: List[AddressItem] = Field(default_factory=list)
    merge_px: float = Field(default=MERGE_PX, gt=0)


class ManualPlacementRequest(BaseModel):
    """An item the user dropped on the map by hand."""
    item: AddressItem
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
