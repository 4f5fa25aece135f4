from __future__ import annotations
from typing import Optional
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(default="")
    username: str = Field(index=True)
    password: str  # plaintext, compared as-is
    role: str = Field(default="user")  # free-form; "admin" unlocks admin routes
