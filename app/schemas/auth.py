from pydantic import BaseModel, Field
from datetime import datetime


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=100)
    # Carries the plaintext password at registration; it is hashed before storage.
    password_hash: str = Field(..., min_length=1, alias="passwordHash")

    class Config:
        populate_by_name = True


class LoginRequest(BaseModel):
    username: str
    password: str


class UserSummary(BaseModel):
    id: str
    username: str
    email: str

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str
    token: str
    user: UserSummary


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class CurrentUserResponse(BaseModel):
    id: str
    username: str
    expires_at: datetime
