from __future__ import annotations
from typing import Dict, Iterable, List, Optional
from sqlmodel import Session, select

from ..accounts.models import User
from ..exceptions import NotFound
from .models import Issue, Project


def list_projects(s: Session) -> List[Project]:
    return list(s.exec(select(Project)).all())


def find_project(s: Session, name: str) -> Optional[Project]:
    return s.exec(select(Project).where(Project.name == name)).first()


def get_project(s: Session, name: str) -> Project:
    project = find_project(s, name)
    if project is None:
        raise NotFound("Project", name)
    return project


def add_project(s: Session, name: str, title: str) -> Project:
    project = Project(name=name, title=title, issues=[])
    s.add(project)
    s.commit()
    s.refresh(project)
    return project


def save_project(s: Session, project: Project) -> Project:
    """Write the whole project document back, embedded issues included."""
    s.add(project)
    s.commit()
    s.refresh(project)
    return project


def remove_project(s: Session, name: str) -> bool:
    project = find_project(s, name)
    if project is None:
        return False
    s.delete(project)
    s.commit()
    return True


def list_users(s: Session) -> List[User]:
    return list(s.exec(select(User)).all())


def find_user_by_username(s: Session, username: str) -> Optional[User]:
    return s.exec(select(User).where(User.username == username)).first()


def resolve_users(s: Session, ids: Iterable[Optional[int]]) -> Dict[int, User]:
    """Batch-load the users behind a set of stored ids."""
    wanted = {i for i in ids if i is not None}
    if not wanted:
        return {}
    users = s.exec(select(User).where(User.id.in_(wanted))).all()
    return {u.id: u for u in users}


def referenced_user_ids(issues: List[Issue]) -> List[int]:
    ids = []
    for issue in issues:
        if issue.assigned is not None:
            ids.append(issue.assigned)
        for comment in issue.comments:
            if comment.user is not None:
                ids.append(comment.user)
    return ids
