from sqlmodel import Session

from app.db.session import engine
from app.models.enums import IssueStatus
from app.services import notification_service
from app.services.notification_service import notify_status_change
from conftest import issue_payload


def _issue(client, headers) -> str:
    response = client.post('/api/v1/issues', json=issue_payload(), headers=headers)
    return response.json()['id']


def test_status_change_notifies_owner(client, make_user, admin_headers):
    _, owner_headers = make_user()
    issue_id = _issue(client, owner_headers)

    client.put(f'/api/v1/issues/{issue_id}/status', json={'status': 'Resolved'}, headers=admin_headers)
    notifications = client.get('/api/v1/notifications', headers=owner_headers).json()
    assert len(notifications) == 1
    assert notifications[0]['type'] == 'issue_status'
    assert notifications[0]['issue_id'] == issue_id
    assert 'Resolved' in notifications[0]['content']
    assert notifications[0]['read'] is False

    # same status again is not a change
    client.put(f'/api/v1/issues/{issue_id}/status', json={'status': 'Resolved'}, headers=admin_headers)
    assert len(client.get('/api/v1/notifications', headers=owner_headers).json()) == 1


def test_notification_failure_does_not_fail_status_update(client, make_user, admin_headers, monkeypatch):
    _, owner_headers = make_user()
    issue_id = _issue(client, owner_headers)

    def _boom(*args, **kwargs):
        raise RuntimeError('mail server down')

    monkeypatch.setattr(notification_service, 'create_notification', _boom)
    response = client.put(f'/api/v1/issues/{issue_id}/status', json={'status': 'In Progress'}, headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f'/api/v1/issues/{issue_id}').json()['status'] == 'In Progress'


def test_notify_missing_issue_is_ignored(client):
    notify_status_change('missing', IssueStatus.RESOLVED)
    with Session(engine) as session:
        assert notification_service.list_notifications(session, 'missing') == []


def test_read_and_delete_notifications(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, other_headers = make_user()
    first = _issue(client, owner_headers)
    second = _issue(client, owner_headers)
    for issue_id in (first, second):
        client.put(f'/api/v1/issues/{issue_id}/status', json={'status': 'In Progress'}, headers=admin_headers)

    notifications = client.get('/api/v1/notifications', headers=owner_headers).json()
    assert len(notifications) == 2
    notification_id = notifications[0]['id']

    assert client.patch(
        f'/api/v1/notifications/{notification_id}',
        json={'read': True},
        headers=other_headers,
    ).status_code == 403
    marked = client.patch(f'/api/v1/notifications/{notification_id}', json={'read': True}, headers=owner_headers)
    assert marked.json()['read'] is True

    unread = client.get('/api/v1/notifications', params={'unread_only': True}, headers=owner_headers).json()
    assert len(unread) == 1

    read_all = client.post('/api/v1/notifications/read-all', headers=owner_headers)
    assert read_all.json() == {'status': 'ok', 'updated': 1}

    assert client.delete(f'/api/v1/notifications/{notification_id}', headers=other_headers).status_code == 403
    assert client.delete(f'/api/v1/notifications/{notification_id}', headers=owner_headers).status_code == 200
    assert client.delete(f'/api/v1/notifications/{notification_id}', headers=owner_headers).status_code == 404


def test_notifications_filter_by_issue(client, make_user, admin_headers):
    _, owner_headers = make_user()
    first = _issue(client, owner_headers)
    second = _issue(client, owner_headers)
    client.put(f'/api/v1/issues/{first}/status', json={'status': 'In Progress'}, headers=admin_headers)
    client.put(f'/api/v1/issues/{first}/status', json={'status': 'Resolved'}, headers=admin_headers)
    client.put(f'/api/v1/issues/{second}/status', json={'status': 'Resolved'}, headers=admin_headers)

    for_first = client.get('/api/v1/notifications', params={'issue_id': first}, headers=owner_headers).json()
    assert len(for_first) == 2
    assert 'Resolved' in for_first[0]['content']
    assert {item['issue_id'] for item in for_first} == {first}
