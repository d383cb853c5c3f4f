from typing import List, Optional
from pydantic import BaseModel, Field

class ReviewCreate(BaseModel):
    bookingId: str
    rating: int = Field(ge=1, le=5)
    title: str = Field(min_length=1, max_length=100)
    comment: str = Field(min_length=1, max_length=500)
    images: List[str] = []

class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    comment: Optional[str] = Field(default=None, min_length=1, max_length=500)
    images: Optional[List[str]] = None

class ReviewStatusUpdate(BaseModel):
    status: str
