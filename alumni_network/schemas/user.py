from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):

    idToken: Optional[str] = None


class Token(BaseModel):

    token: str


class TokenPayload(BaseModel):

    id: str
    role: Optional[str] = None
    exp: int


class SessionUser(BaseModel):

    id: str
    role: Optional[str] = None
