from __future__ import annotations
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Comment(BaseModel):
    text: str = ""
    date: datetime = PydanticField(default_factory=utcnow)
    user: Optional[int] = None  # commenter's User.id


class Issue(BaseModel):
    ordinal: int
    title: str = ""
    text: str = ""
    created: datetime = PydanticField(default_factory=utcnow)
    progress: str = "Open"
    severity: int = 1
    assigned: Optional[int] = None  # User.id
    comments: List[Comment] = PydanticField(default_factory=list)


class Project(SQLModel, table=True):
    """A project document. Issues and their comments live inside it as JSON."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    title: str
    issues: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    def get_issues(self) -> List[Issue]:
        return [Issue.model_validate(doc) for doc in (self.issues or [])]

    def set_issues(self, issues: List[Issue]) -> None:
        # Assign a fresh list so the JSON column is flagged dirty
        self.issues = [i.model_dump(mode="json") for i in issues]
