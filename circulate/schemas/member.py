from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

class Identity(BaseModel):
    """The caller, as asserted by a verified session token."""
    id: int
    username: str
    admin: bool = False

class Member(BaseModel):
    id: int
    name: str
    username: str
    email: EmailStr
    phone: str
    admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
