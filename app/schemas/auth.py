from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    # username 또는 email
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class CsrfTokenResponse(BaseModel):
    success: bool = True
    csrfToken: str
