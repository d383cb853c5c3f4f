from pydantic import BaseModel, Field
from typing import Optional

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str  # plain str to allow .local and other dev domains
    password: str = Field(min_length=6)

class LoginRequest(BaseModel):
    email: str
    password: str

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None

class UserOut(BaseModel):
    id: str
    name: str
    email: str
    profilePic: str = ""
    role: str

class AuthResponse(BaseModel):
    success: bool = True
    user: UserOut
    token: str
