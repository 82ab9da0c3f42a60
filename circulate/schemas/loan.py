from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class Loan(BaseModel):
    id: int
    username: str
    book_id: int
    due_at: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BookReturn(BaseModel):
    id: int
    username: str
    book_id: int
    due_at: datetime
    fine: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
