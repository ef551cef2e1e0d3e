from pydantic import BaseModel, Field


# Request schemas
class AdminLoginRequest(BaseModel):
    email: str = Field(..., min_length=1, examples=["admin@example.com"])
    password: str = Field(..., min_length=1, examples=["admin123"])


# Response schemas
class AdminLoginResponse(BaseModel):
    token: str
    expiresIn: int


class AdminIdentityResponse(BaseModel):
    id: int
    email: str
