from conftest import issue_payload


def _issue(client, headers) -> str:
    response = client.post('/api/v1/issues', json=issue_payload(), headers=headers)
    assert response.status_code == 201
    return response.json()['id']


def _flag(client, issue_id, headers, reason='Spam'):
    return client.post(
        f'/api/v1/flags/issues/{issue_id}/flag',
        json={'reason': reason, 'description': 'Looks like an advert'},
        headers=headers,
    )


def test_flag_issue_once_per_user(client, make_user):
    _, owner_headers = make_user()
    reporter_id, reporter_headers = make_user()
    issue_id = _issue(client, owner_headers)

    created = _flag(client, issue_id, reporter_headers)
    assert created.status_code == 201
    body = created.json()
    assert body['status'] == 'pending'
    assert body['flagged_by'] == reporter_id
    assert body['issue']['id'] == issue_id

    duplicate = _flag(client, issue_id, reporter_headers, reason='Other')
    assert duplicate.status_code == 400
    assert duplicate.json()['detail'] == 'You have already flagged this issue'

    count = client.get(f'/api/v1/flags/issues/{issue_id}/count', headers=owner_headers)
    assert count.json() == {'issue_id': issue_id, 'flag_count': 1}


def test_flag_count_for_unknown_issue_is_zero(client, make_user):
    _, headers = make_user()
    response = client.get('/api/v1/flags/issues/missing/count', headers=headers)
    assert response.status_code == 200
    assert response.json() == {'issue_id': 'missing', 'flag_count': 0}


def test_flag_validation(client, make_user):
    _, headers = make_user()
    issue_id = _issue(client, headers)
    assert _flag(client, 'missing', headers).status_code == 404
    assert _flag(client, issue_id, headers, reason='Boring').status_code == 400


def test_approve_closes_issue_once(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, first_headers = make_user()
    _, second_headers = make_user()
    issue_id = _issue(client, owner_headers)
    first = _flag(client, issue_id, first_headers).json()
    second = _flag(client, issue_id, second_headers, reason='False Information').json()

    approved = client.put(
        f"/api/v1/flags/admin/{first['id']}/review",
        json={'action': 'approve', 'review_notes': 'confirmed spam'},
        headers=admin_headers,
    )
    assert approved.status_code == 200
    body = approved.json()
    assert body['status'] == 'approved'
    assert body['reviewed_by'] is not None
    assert body['reviewed_at'] is not None
    assert body['review_notes'] == 'confirmed spam'
    assert body['issue']['status'] == 'Closed'

    again = client.put(
        f"/api/v1/flags/admin/{first['id']}/review",
        json={'action': 'reject'},
        headers=admin_headers,
    )
    assert again.status_code == 400
    assert again.json()['detail'] == 'Flag has already been reviewed'

    client.put(f"/api/v1/flags/admin/{second['id']}/review", json={'action': 'approve'}, headers=admin_headers)
    notifications = client.get('/api/v1/notifications', headers=owner_headers).json()
    closed = [item for item in notifications if 'closed' in item['content']]
    assert len(closed) == 1
    assert closed[0]['issue_id'] == issue_id


def test_rejected_flag_leaves_issue_open(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, reporter_headers = make_user()
    issue_id = _issue(client, owner_headers)
    flag = _flag(client, issue_id, reporter_headers).json()

    rejected = client.put(
        f"/api/v1/flags/admin/{flag['id']}/review",
        json={'action': 'reject'},
        headers=admin_headers,
    )
    assert rejected.json()['status'] == 'rejected'
    assert client.get(f'/api/v1/issues/{issue_id}').json()['status'] == 'Reported'

    count = client.get(f'/api/v1/flags/issues/{issue_id}/count', headers=owner_headers)
    assert count.json()['flag_count'] == 0


def test_review_requires_admin_and_existing_flag(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, reporter_headers = make_user()
    issue_id = _issue(client, owner_headers)
    flag = _flag(client, issue_id, reporter_headers).json()

    forbidden = client.put(
        f"/api/v1/flags/admin/{flag['id']}/review",
        json={'action': 'approve'},
        headers=reporter_headers,
    )
    assert forbidden.status_code == 403
    missing = client.put('/api/v1/flags/admin/missing/review', json={'action': 'approve'}, headers=admin_headers)
    assert missing.status_code == 404
    bad_action = client.put(
        f"/api/v1/flags/admin/{flag['id']}/review",
        json={'action': 'ignore'},
        headers=admin_headers,
    )
    assert bad_action.status_code == 400


def test_flag_listings(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, reporter_headers = make_user()
    first_issue = _issue(client, owner_headers)
    second_issue = _issue(client, owner_headers)
    first = _flag(client, first_issue, reporter_headers).json()
    _flag(client, second_issue, reporter_headers)
    client.put(f"/api/v1/flags/admin/{first['id']}/review", json={'action': 'reject'}, headers=admin_headers)

    mine = client.get('/api/v1/flags/user', headers=reporter_headers).json()
    assert mine['pagination']['total_flags'] == 2
    assert len(mine['flags']) == 2

    pending_mine = client.get('/api/v1/flags/user', params={'status': 'pending'}, headers=reporter_headers).json()
    assert [item['issue_id'] for item in pending_mine['flags']] == [second_issue]

    queue = client.get('/api/v1/flags/admin', headers=admin_headers).json()
    assert queue['pagination']['total_flags'] == 1
    everything = client.get('/api/v1/flags/admin', params={'status': 'all'}, headers=admin_headers).json()
    assert everything['pagination']['total_flags'] == 2

    assert client.get('/api/v1/flags/admin', headers=reporter_headers).status_code == 403
    assert client.get('/api/v1/flags/admin', params={'status': 'bogus'}, headers=admin_headers).status_code == 400


def test_re_review_of_rejected_flag_leaves_issue_unchanged(client, make_user, admin_headers):
    _, owner_headers = make_user()
    _, reporter_headers = make_user()
    issue_id = _issue(client, owner_headers)
    flag = _flag(client, issue_id, reporter_headers).json()
    path = f"/api/v1/flags/admin/{flag['id']}/review"

    assert client.put(path, json={'action': 'reject'}, headers=admin_headers).status_code == 200
    conflict = client.put(path, json={'action': 'approve'}, headers=admin_headers)
    assert conflict.status_code == 400
    assert client.get(f'/api/v1/issues/{issue_id}').json()['status'] == 'Reported'
    assert client.get('/api/v1/notifications', headers=owner_headers).json() == []
