from typing import List, Literal, Optional
from pydantic import BaseModel, Field

RoomCategory = Literal[
    "standard-room", "deluxe-room", "executive-suite",
    "presidential-suite", "honeymoon-suite", "family-room",
]
BedType = Literal["Single", "Double", "Queen", "King", "Twin", "Various"]

class RoomIn(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    fullDescription: str = ""
    price: int = Field(ge=0)
    imageUrl: str = "/images/room-placeholder.jpg"
    location: str = "Taguig, Metro Manila"
    category: RoomCategory
    rating: float = Field(default=4.5, ge=1, le=5)
    maxOccupancy: int = Field(default=2, ge=1)
    bedType: BedType = "Queen"
    roomSize: str = "30 sq m"
    amenities: List[str] = []
    additionalAmenities: Optional[List[str]] = None
    isAvailable: bool = True

class RoomUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    fullDescription: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    imageUrl: Optional[str] = None
    location: Optional[str] = None
    category: Optional[RoomCategory] = None
    rating: Optional[float] = Field(default=None, ge=1, le=5)
    maxOccupancy: Optional[int] = Field(default=None, ge=1)
    bedType: Optional[BedType] = None
    roomSize: Optional[str] = None
    amenities: Optional[List[str]] = None
    additionalAmenities: Optional[List[str]] = None
    isAvailable: Optional[bool] = None

# camelCase request field -> Room column
ROOM_FIELDS = {
    "title": "title",
    "description": "description",
    "fullDescription": "full_description",
    "price": "price",
    "imageUrl": "image_url",
    "location": "location",
    "category": "category",
    "rating": "rating",
    "maxOccupancy": "max_occupancy",
    "bedType": "bed_type",
    "roomSize": "room_size",
    "amenities": "amenities",
    "additionalAmenities": "additional_amenities",
    "isAvailable": "is_available",
}

def room_out(r) -> dict:
    out = {api: getattr(r, col) for api, col in ROOM_FIELDS.items()}
    out["id"] = r.id
    out["href"] = r.href
    return out
