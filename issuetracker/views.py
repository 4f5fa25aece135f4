from __future__ import annotations
from html import escape
from typing import Dict, List, Optional

from .accounts.models import User
from .models import RequestContext
from .projects.models import Issue, Project

PROGRESS_CHOICES = ["Open", "In Progress", "Resolved", "Closed"]


def page(title: str, body: str, ctx: Optional[RequestContext] = None) -> str:
    account = ""
    if ctx is not None:
        account = f"<span class='muted'>{escape(ctx.username)}</span> <a href='/account/logout'>Log out</a>"
    head = """
<!doctype html>
<html>
<head>
  <meta charset='utf-8'/>
  <title>""" + escape(str(title)) + """ &middot; Issues</title>
  <style>
    :root{--bg:#f8fafc; --card:#fff; --muted:#64748b; --fg:#0f172a; --accent:#1d4ed8; --border:#e2e8f0; --danger:#b91c1c}
    *{box-sizing:border-box}
    body{font-family:system-ui, sans-serif; margin:0; background:var(--bg); color:var(--fg);}
    a{color:var(--accent)}
    .container{max-width:960px; margin:0 auto; padding:24px}
    .header{border-bottom:1px solid var(--border); background:var(--card)}
    .brand{font-weight:700; letter-spacing:2px; text-decoration:none; color:var(--fg)}
    input,textarea,button,select{padding:8px 10px; margin:6px 0; width:100%; border:1px solid var(--border); border-radius:8px; font:inherit}
    button{background:var(--accent); color:#fff; border:none; cursor:pointer; width:auto}
    .card{background:var(--card); border:1px solid var(--border); border-radius:10px; padding:16px; margin:12px 0;}
    .muted{color:var(--muted); font-size:14px}
    .danger{color:var(--danger)}
    table{width:100%; border-collapse:collapse}
    th,td{text-align:left; padding:8px; border-bottom:1px solid var(--border)}
  </style>
</head>
<body>
  <div class="header">
    <div class="container" style="display:flex; align-items:center; justify-content:space-between; padding:14px 24px;">
      <a class="brand" href="/projects">ISSUES</a>
      <nav>""" + account + """</nav>
    </div>
  </div>
  <div class="container">
"""
    tail = """
  </div>
</body>
</html>
"""
    return head + str(body) + tail


def login_page() -> str:
    body = """
    <div class='card' style='max-width:360px; margin:40px auto'>
      <h1 style='margin-top:0'>Log in</h1>
      <form method='post' action='/account/login'>
        <label>Username</label>
        <input name='username' required autofocus/>
        <label>Password</label>
        <input name='password' type='password' required/>
        <button type='submit'>Log in</button>
      </form>
    </div>
    """
    return page("Log in", body)


def projects_page(ctx: RequestContext, projects: List[Project]) -> str:
    rows = []
    for p in projects:
        delete = ""
        if ctx.is_admin:
            delete = f"<a class='danger' href='/projects/{escape(p.name)}/delete'>Delete</a>"
        rows.append(
            f"<tr><td><a href='/projects/{escape(p.name)}'>{escape(p.title)}</a></td>"
            f"<td class='muted'>{len(p.issues or [])} issues</td><td>{delete}</td></tr>"
        )
    create = ""
    if ctx.is_admin:
        create = """
        <div class='card'>
          <h3 style='margin-top:0'>New project</h3>
          <form method='post' action='/projects'>
            <input name='title' required placeholder='Project title'/>
            <button type='submit'>Create</button>
          </form>
        </div>
        """
    listing = "<table>" + "\n".join(rows) + "</table>" if rows else "<p class='muted'>No projects yet.</p>"
    body = f"""
    <h1>Projects</h1>
    <div class='card'>{listing}</div>
    {create}
    """
    return page("Projects", body, ctx)


def _username(users_by_id: Dict[int, User], user_id: Optional[int]) -> str:
    user = users_by_id.get(user_id) if user_id is not None else None
    return escape(user.username) if user else "&mdash;"


def project_page(ctx: RequestContext, project: Project, issues: List[Issue], users_by_id: Dict[int, User]) -> str:
    base = f"/projects/{escape(project.name)}"
    rows = []
    for i in issues:
        delete = f"<a class='danger' href='{base}/issues/{i.ordinal}/delete'>Delete</a>" if ctx.is_admin else ""
        rows.append(
            f"<tr><td>#{i.ordinal}</td>"
            f"<td><a href='{base}/issues/{i.ordinal}'>{escape(i.title)}</a></td>"
            f"<td>{escape(i.progress)}</td><td>{i.severity}</td>"
            f"<td>{_username(users_by_id, i.assigned)}</td>"
            f"<td class='muted'>{i.created:%Y-%m-%d %H:%M}</td><td>{delete}</td></tr>"
        )
    listing = (
        "<table><tr><th>#</th><th>Title</th><th>Progress</th><th>Severity</th><th>Assigned</th><th>Created</th><th></th></tr>"
        + "\n".join(rows) + "</table>"
    ) if rows else "<p class='muted'>No issues yet.</p>"
    body = f"""
    <p class='muted'><a href='/projects'>&larr; Projects</a></p>
    <h1>{escape(project.title)}</h1>
    <div class='card'>{listing}</div>
    <div class='card'>
      <h3 style='margin-top:0'>New issue</h3>
      <form method='post' action='{base}/issues'>
        <input name='title' required placeholder='Issue title'/>
        <button type='submit'>File issue</button>
      </form>
    </div>
    """
    return page(project.title, body, ctx)


def issue_page(
    ctx: RequestContext,
    project: Project,
    issue: Issue,
    users: List[User],
    users_by_id: Dict[int, User],
) -> str:
    base = f"/projects/{escape(project.name)}/issues/{issue.ordinal}"
    progress = "".join(
        f"<option{' selected' if p == issue.progress else ''}>{escape(p)}</option>"
        for p in ([issue.progress] if issue.progress not in PROGRESS_CHOICES else []) + PROGRESS_CHOICES
    )
    assignees = ["<option value=''>Unassigned</option>"]
    for u in users:
        selected = " selected" if u.id == issue.assigned else ""
        assignees.append(f"<option value='{escape(u.username)}'{selected}>{escape(u.username)}</option>")
    comments = []
    for c in issue.comments:
        comments.append(
            f"<div class='card'><div class='muted'>{_username(users_by_id, c.user)} &middot; {c.date:%Y-%m-%d %H:%M}</div>"
            f"<p>{escape(c.text)}</p></div>"
        )
    delete = f"<p><a class='danger' href='{base}/delete'>Delete issue</a></p>" if ctx.is_admin else ""
    body = f"""
    <p class='muted'><a href='/projects/{escape(project.name)}'>&larr; {escape(project.title)}</a></p>
    <h1>#{issue.ordinal} {escape(issue.title)}</h1>
    <p class='muted'>Created {issue.created:%Y-%m-%d %H:%M} &middot; assigned to {_username(users_by_id, issue.assigned)}</p>
    <div class='card'>
      <form method='post' action='{base}'>
        <label>Title</label>
        <input name='title' value='{escape(issue.title)}' required/>
        <label>Description</label>
        <textarea name='text' rows='6'>{escape(issue.text)}</textarea>
        <label>Progress</label>
        <select name='progress'>{progress}</select>
        <label>Severity</label>
        <input name='severity' type='number' min='1' value='{issue.severity}'/>
        <label>Assigned</label>
        <select name='assigned'>{''.join(assignees)}</select>
        <button type='submit'>Save</button>
      </form>
    </div>
    {delete}
    <h2>Comments ({len(issue.comments)})</h2>
    {''.join(comments) if comments else "<p class='muted'>No comments yet.</p>"}
    <div class='card'>
      <form method='post' action='{base}/comment'>
        <textarea name='text' rows='3' required placeholder='Add a comment'></textarea>
        <button type='submit'>Comment</button>
      </form>
    </div>
    """
    return page(f"#{issue.ordinal} {issue.title}", body, ctx)


def error_page(status_code: int, message: str) -> str:
    body = f"""
    <div class='card'>
      <h1 style='margin-top:0'>{status_code}</h1>
      <p>{escape(message)}</p>
      <p><a href='/projects'>Back to projects</a></p>
    </div>
    """
    return page(f"Error {status_code}", body)
