from pydantic import Field
from mediasignage.schemas.base import CamelModel


class RegisterIn(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6, max_length=72)
    name: str | None = None


class LoginIn(CamelModel):
    email: str
    password: str


class UserOut(CamelModel):
    id: str
    email: str
    name: str | None = None


class TokenOut(CamelModel):
    token: str
    user: UserOut
