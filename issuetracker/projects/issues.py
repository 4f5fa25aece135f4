"""Operations on a project's embedded issue list.

Everything here works on plain ``List[Issue]`` values; callers load the list
from the project document, mutate it, and write it back with
``Project.set_issues``.
"""
from __future__ import annotations
from typing import List, Optional

from ..exceptions import NotFound
from .models import Comment, Issue, utcnow


def next_ordinal(issues: List[Issue]) -> int:
    highest = 0
    for issue in issues:
        if issue.ordinal > highest:
            highest = issue.ordinal
    return highest + 1


def find_issue(issues: List[Issue], ordinal: int) -> Optional[Issue]:
    for issue in issues:
        if issue.ordinal == ordinal:
            return issue
    return None


def get_issue(issues: List[Issue], ordinal: int) -> Issue:
    issue = find_issue(issues, ordinal)
    if issue is None:
        raise NotFound("Issue", ordinal)
    return issue


def new_issue(issues: List[Issue], title: str, assigned: Optional[int]) -> Issue:
    """Append a new issue with the next free ordinal and return it."""
    issue = Issue(
        ordinal=next_ordinal(issues),
        title=title,
        created=utcnow(),
        assigned=assigned,
    )
    issues.append(issue)
    return issue


def remove_issue(issues: List[Issue], ordinal: int) -> Issue:
    """Remove the first issue with ``ordinal``; other issues keep theirs."""
    issue = get_issue(issues, ordinal)
    issues.remove(issue)
    return issue


def add_comment(issue: Issue, text: str, user_id: int) -> Comment:
    comment = Comment(text=text, user=user_id, date=utcnow())
    issue.comments.append(comment)
    return comment
