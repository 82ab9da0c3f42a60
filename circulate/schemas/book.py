#!/usr/bin/env python
"""
    Book Schema for Circulate,
    including the catalog record and the admin create/update payloads.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class BookCreate(BaseModel):

    name: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    genre: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., min_length=1, max_length=50)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "The Left Hand of Darkness",
                "author": "Ursula K. Le Guin",
                "genre": "Science Fiction",
                "type": "Hardcover",
            }
        }

class BookUpdate(BaseModel):
    """Metadata only; availability belongs to the lending protocol."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    genre: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, min_length=1, max_length=50)

    class Config:
        extra = "forbid"

class Book(BookCreate):
    id: int
    available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
