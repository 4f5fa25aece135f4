from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from ..auth import ADMIN, require
from ..db import get_session
from ..exceptions import NotFound, ValidationFailed
from ..models import RequestContext
from ..utils import slugify
from .. import views
from . import issues as issue_ops
from . import store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects")


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


@router.get("", response_class=HTMLResponse)
async def list_projects(ctx: RequestContext = Depends(require())):
    with get_session() as s:
        projects = store.list_projects(s)
    return views.projects_page(ctx, projects)


@router.post("")
async def create_project(title: str = Form(...), ctx: RequestContext = Depends(require(ADMIN))):
    name = slugify(title)
    if not name.strip("-"):
        raise ValidationFailed("Project title needs at least one letter or digit", field="title")
    # A taken slug fails on the unique index and surfaces as a StorageError
    with get_session() as s:
        store.add_project(s, name=name, title=title)
    logger.info("Created project %s", name)
    return _see_other("/projects")


@router.get("/{name}", response_class=HTMLResponse)
async def view_project(name: str, ctx: RequestContext = Depends(require())):
    with get_session() as s:
        project = store.get_project(s, name)
        issues = project.get_issues()
        users_by_id = store.resolve_users(s, (i.assigned for i in issues))
    return views.project_page(ctx, project, issues, users_by_id)


@router.get("/{name}/delete")
async def delete_project(name: str, ctx: RequestContext = Depends(require(ADMIN))):
    with get_session() as s:
        if not store.remove_project(s, name):
            raise NotFound("Project", name)
    logger.info("Deleted project %s", name)
    return _see_other("/projects")


@router.post("/{name}/issues")
async def create_issue(name: str, title: str = Form(...), ctx: RequestContext = Depends(require())):
    with get_session() as s:
        project = store.get_project(s, name)
        issues = project.get_issues()
        # Read-modify-write of the whole document; concurrent creators can collide
        issue = issue_ops.new_issue(issues, title=title, assigned=ctx.user_id)
        project.set_issues(issues)
        store.save_project(s, project)
    logger.info("Created issue %s#%d", name, issue.ordinal)
    return _see_other(f"/projects/{name}")


@router.get("/{name}/issues/{ordinal}", response_class=HTMLResponse)
async def view_issue(name: str, ordinal: int, ctx: RequestContext = Depends(require())):
    with get_session() as s:
        project = store.get_project(s, name)
        issue = issue_ops.get_issue(project.get_issues(), ordinal)
        users = store.list_users(s)
        users_by_id = store.resolve_users(s, store.referenced_user_ids([issue]))
    return views.issue_page(ctx, project, issue, users, users_by_id)


@router.post("/{name}/issues/{ordinal}")
async def update_issue(
    name: str,
    ordinal: int,
    title: str = Form(...),
    text: str = Form(""),
    progress: str = Form("Open"),
    severity: int = Form(1),
    assigned: str = Form(""),
    ctx: RequestContext = Depends(require()),
):
    with get_session() as s:
        project = store.get_project(s, name)
        issues = project.get_issues()
        issue = issue_ops.get_issue(issues, ordinal)
        issue.title = title
        issue.text = text
        issue.progress = progress
        issue.severity = severity
        # The form posts a username under "assigned"; the issue stores the id
        if assigned:
            user = store.find_user_by_username(s, assigned)
            if user is None:
                raise NotFound("User", assigned)
            issue.assigned = user.id
        else:
            issue.assigned = None
        project.set_issues(issues)
        store.save_project(s, project)
    logger.info("Updated issue %s#%d", name, ordinal)
    return _see_other(f"/projects/{name}")


@router.get("/{name}/issues/{ordinal}/delete")
async def delete_issue(name: str, ordinal: int, ctx: RequestContext = Depends(require(ADMIN))):
    with get_session() as s:
        project = store.get_project(s, name)
        issues = project.get_issues()
        issue_ops.remove_issue(issues, ordinal)
        project.set_issues(issues)
        store.save_project(s, project)
    logger.info("Deleted issue %s#%d", name, ordinal)
    return _see_other(f"/projects/{name}")


@router.post("/{name}/issues/{ordinal}/comment")
async def add_comment(name: str, ordinal: int, text: str = Form(...), ctx: RequestContext = Depends(require())):
    with get_session() as s:
        project = store.get_project(s, name)
        issues = project.get_issues()
        issue = issue_ops.get_issue(issues, ordinal)
        issue_ops.add_comment(issue, text=text, user_id=ctx.user_id)
        project.set_issues(issues)
        store.save_project(s, project)
    logger.info("Comment on %s#%d", name, ordinal)
    return _see_other(f"/projects/{name}/issues/{ordinal}")
