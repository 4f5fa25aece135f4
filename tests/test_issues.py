import pytest
from httpx import AsyncClient


@pytest.fixture
async def project(admin_client: AsyncClient) -> str:
    await admin_client.post('/projects', data={'title': 'Tracker'})
    return 'tracker'


async def file_issue(ac: AsyncClient, project: str, title: str):
    return await ac.post(f'/projects/{project}/issues', data={'title': title})


@pytest.mark.asyncio
async def test_first_issues_get_ordinals_one_and_two(admin_client, project, load_project, admin):
    response = await file_issue(admin_client, project, 'First')
    assert response.status_code == 303
    assert response.headers['location'] == '/projects/tracker'

    issues = load_project(project).get_issues()
    assert [i.ordinal for i in issues] == [1]
    first = issues[0]
    assert first.title == 'First'
    assert first.text == ''
    assert first.progress == 'Open'
    assert first.severity == 1
    assert first.assigned == admin.id
    assert first.comments == []

    await file_issue(admin_client, project, 'Second')
    assert [i.ordinal for i in load_project(project).get_issues()] == [1, 2]


@pytest.mark.asyncio
async def test_sequential_issues_have_no_gaps(admin_client, project, load_project):
    for n in range(5):
        await file_issue(admin_client, project, f'Issue {n}')

    assert [i.ordinal for i in load_project(project).get_issues()] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_member_files_issue_assigned_to_self(admin_client, member_client, member, project, load_project):
    response = await file_issue(member_client, project, 'From a member')

    assert response.status_code == 303
    issue = load_project(project).get_issues()[0]
    assert issue.assigned == member.id


@pytest.mark.asyncio
async def test_issue_in_missing_project(admin_client, db):
    response = await file_issue(admin_client, 'missing', 'Lost')
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_view_issue_lists_assignable_users(admin_client, member, project):
    await file_issue(admin_client, project, 'Look at me')

    response = await admin_client.get('/projects/tracker/issues/1')

    assert response.status_code == 200
    assert '#1 Look at me' in response.text
    assert "<option value='Admin' selected>Admin</option>" in response.text
    assert f"<option value='{member.username}'>" in response.text


@pytest.mark.asyncio
async def test_view_missing_issue(admin_client, project):
    response = await admin_client.get('/projects/tracker/issues/7')
    assert response.status_code == 404
    assert 'Issue not found: 7' in response.text


@pytest.mark.asyncio
async def test_member_updates_issue(admin_client, member_client, member, project, load_project):
    await file_issue(admin_client, project, 'Draft')

    response = await member_client.post('/projects/tracker/issues/1', data={
        'title': 'Final',
        'text': 'Steps to reproduce',
        'progress': 'In Progress',
        'severity': '3',
        'assigned': member.username,
    })

    assert response.status_code == 303
    assert response.headers['location'] == '/projects/tracker'
    issue = load_project(project).get_issues()[0]
    assert issue.ordinal == 1
    assert issue.title == 'Final'
    assert issue.text == 'Steps to reproduce'
    assert issue.progress == 'In Progress'
    assert issue.severity == 3
    assert issue.assigned == member.id


@pytest.mark.asyncio
async def test_update_with_blank_assignee_unassigns(admin_client, project, load_project):
    await file_issue(admin_client, project, 'Mine')

    await admin_client.post('/projects/tracker/issues/1', data={'title': 'Mine', 'assigned': ''})

    assert load_project(project).get_issues()[0].assigned is None


@pytest.mark.asyncio
async def test_update_with_unknown_assignee(admin_client, project, load_project, admin):
    await file_issue(admin_client, project, 'Mine')

    response = await admin_client.post('/projects/tracker/issues/1', data={'title': 'Changed', 'assigned': 'ghost'})

    assert response.status_code == 404
    issue = load_project(project).get_issues()[0]
    assert issue.title == 'Mine'
    assert issue.assigned == admin.id


@pytest.mark.asyncio
async def test_delete_issue_keeps_other_ordinals(admin_client, project, load_project):
    for title in ('one', 'two', 'three'):
        await file_issue(admin_client, project, title)

    response = await admin_client.get('/projects/tracker/issues/2/delete')

    assert response.status_code == 303
    assert response.headers['location'] == '/projects/tracker'
    issues = load_project(project).get_issues()
    assert [(i.ordinal, i.title) for i in issues] == [(1, 'one'), (3, 'three')]

    await file_issue(admin_client, project, 'four')
    assert [i.ordinal for i in load_project(project).get_issues()] == [1, 3, 4]


@pytest.mark.asyncio
async def test_member_cannot_delete_issue(admin_client, member_client, project, load_project):
    await file_issue(admin_client, project, 'Protected')

    response = await member_client.get('/projects/tracker/issues/1/delete')

    assert response.status_code == 403
    assert len(load_project(project).get_issues()) == 1


@pytest.mark.asyncio
async def test_delete_missing_issue(admin_client, project):
    response = await admin_client.get('/projects/tracker/issues/9/delete')
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_comment_is_appended(admin_client, member_client, member, project, load_project):
    await file_issue(admin_client, project, 'Discuss')
    await admin_client.post('/projects/tracker/issues/1/comment', data={'text': 'first!'})

    response = await member_client.post('/projects/tracker/issues/1/comment', data={'text': 'Seen it too'})

    assert response.status_code == 303
    assert response.headers['location'] == '/projects/tracker/issues/1'
    comments = load_project(project).get_issues()[0].comments
    assert len(comments) == 2
    assert comments[-1].text == 'Seen it too'
    assert comments[-1].user == member.id
    assert comments[-1].date is not None

    page = await admin_client.get('/projects/tracker/issues/1')
    assert 'Comments (2)' in page.text
    assert 'Seen it too' in page.text
    assert member.username in page.text


@pytest.mark.asyncio
async def test_comment_on_missing_issue(admin_client, project):
    response = await admin_client.post('/projects/tracker/issues/4/comment', data={'text': 'hello?'})
    assert response.status_code == 404
