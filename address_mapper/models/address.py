import random
import string
from enum import Enum
from typing import Optional, List, Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 8


def new_id() -> str:
    return "".join(random.choices(ID_ALPHABET, k=ID_LENGTH))


class ItemStatus(str, Enum):
    PENDING = "pending"
    FOUND = "found"
    MANUAL = "manual"
    NOT_FOUND = "notfound"


class AddressItem(BaseModel):
    """
    One line of user input and everything learned about it.

    `marker` holds the in-memory map marker and is never serialized.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    raw: str = ""
    type: Literal["A", "B", "C", "D"] = "A"
    status: ItemStatus = ItemStatus.PENDING
    lat: Optional[float] = None
    lon: Optional[float] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    street: Optional[str] = None
    cross: Optional[List[str]] = None
    marker: Optional[Any] = Field(default=None, exclude=True)

    @property
    def located(self) -> bool:
        return self.lat is not None and self.lon is not None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StoreDocument(BaseModel):
    items: List[AddressItem] = Field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {"items": [item.to_record() for item in self.items]}


class CrossStreetCandidate(BaseModel):
    name: str
    distance: float


class CrossStreets(BaseModel):
    between: List[str] = Field(default_factory=list)
    candidates: List[CrossStreetCandidate] = Field(default_factory=list)
