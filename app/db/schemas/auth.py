from typing import Optional
from pydantic import BaseModel

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class AdminInfo(BaseModel):
    username: str

class LoginResponse(BaseModel):
    success: bool = True
    token: str
    admin: AdminInfo

class VerifyResponse(BaseModel):
    valid: bool = True
    admin: AdminInfo
