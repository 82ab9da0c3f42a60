from pydantic import BaseModel, EmailStr, Field, field_validator

# Largest id an INTEGER column holds on every supported backend
MAX_ID = 2**31 - 1

class LendingRequest(BaseModel):
    username: str = Field(..., min_length=1)
    bookId: int = Field(..., ge=1, le=MAX_ID)

class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: EmailStr
    phone: str = Field(..., pattern=r"^[0-9]{10}$")

    @field_validator("name", "username", mode="before")
    @classmethod
    def strip(cls, value):
        return value.strip() if isinstance(value, str) else value

class SigninRequest(BaseModel):
    username: str
    password: str
