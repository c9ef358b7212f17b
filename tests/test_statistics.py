from datetime import date

from app.services.geo import offset_point
from conftest import issue_payload


def _issue(client, headers, lat=40.0, lng=-74.0, **overrides) -> str:
    response = client.post('/api/v1/issues', json=issue_payload(lat, lng, **overrides), headers=headers)
    return response.json()['id']


def test_dashboard_requires_admin(client, make_user):
    _, headers = make_user()
    assert client.get('/api/v1/statistics/dashboard', headers=headers).status_code == 403
    assert client.get('/api/v1/statistics/trends', headers=headers).status_code == 403


def test_dashboard_counts(client, make_user, admin_headers):
    reporter_id, reporter_headers = make_user(username='reporter')
    _, other_headers = make_user()
    first = _issue(client, reporter_headers)
    _issue(client, reporter_headers, category='Lighting')
    _issue(client, other_headers)
    client.put(f'/api/v1/issues/{first}/status', json={'status': 'Resolved'}, headers=admin_headers)
    client.post(f'/api/v1/flags/issues/{first}/flag', json={'reason': 'Spam'}, headers=other_headers)

    stats = client.get('/api/v1/statistics/dashboard', headers=admin_headers).json()
    assert stats['overview']['total_issues'] == 3
    assert stats['overview']['total_users'] == 3
    assert stats['overview']['total_flags'] == 1
    assert stats['overview']['resolution_rate'] == 33.33
    assert stats['issue_breakdown']['by_status'] == {'Resolved': 1, 'Reported': 2}
    assert stats['issue_breakdown']['by_category'] == {'Roads': 2, 'Lighting': 1}
    assert stats['recent_activity']['new_issues'] == 3
    assert stats['top_reporters'][0] == {'user_id': reporter_id, 'username': 'reporter', 'issue_count': 2}


def test_trends_are_zero_filled(client, make_user, admin_headers):
    _, headers = make_user()
    _issue(client, headers)
    _issue(client, headers)

    trend = client.get('/api/v1/statistics/trends', params={'period': 7}, headers=admin_headers).json()
    assert trend['period'] == '7 days'
    assert trend['type'] == 'issues'
    assert len(trend['data']) == 7
    assert trend['data'][-1]['count'] == 2
    assert sum(point['count'] for point in trend['data']) == 2
    assert [point['date'] for point in trend['data']] == sorted(point['date'] for point in trend['data'])
    assert date.fromisoformat(trend['data'][-1]['date']) >= date.fromisoformat(trend['data'][0]['date'])

    users = client.get('/api/v1/statistics/trends', params={'type': 'users'}, headers=admin_headers).json()
    assert len(users['data']) == 30
    assert users['data'][-1]['count'] == 2

    assert client.get('/api/v1/statistics/trends', params={'period': 0}, headers=admin_headers).status_code == 400
    assert client.get('/api/v1/statistics/trends', params={'type': 'votes'}, headers=admin_headers).status_code == 400


def test_location_stats(client, make_user):
    _, headers = make_user()
    _issue(client, headers)
    _issue(client, headers, category='Cleanliness')
    far_lat, far_lng = offset_point(40.0, -74.0, meters_north=3000)
    _issue(client, headers, far_lat, far_lng)

    response = client.get(
        '/api/v1/statistics/location',
        params={'lat': 40.0, 'lng': -74.0, 'radius': 1000},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body['location'] == {'latitude': 40.0, 'longitude': -74.0, 'radius': 1000.0}
    assert body['summary']['total_issues'] == 2
    assert body['summary']['category_breakdown'] == {'Roads': 1, 'Cleanliness': 1}
    assert body['hotspots'] == [{'latitude': 40.0, 'longitude': -74.0, 'issue_count': 2}]

    missing = client.get('/api/v1/statistics/location', params={'lat': 40.0}, headers=headers)
    assert missing.status_code == 400


def test_user_activity(client, make_user):
    _, owner_headers = make_user()
    _, voter_headers = make_user()
    first = _issue(client, owner_headers)
    _issue(client, owner_headers)
    client.put(f'/api/v1/issues/{first}/upvote', headers=voter_headers)
    client.post(f'/api/v1/flags/issues/{first}/flag', json={'reason': 'Other'}, headers=voter_headers)

    owner = client.get('/api/v1/statistics/user', headers=owner_headers).json()
    assert owner['issues_reported'] == {'total': 2, 'by_status': {'Reported': 2}, 'recent': 2}
    assert owner['community']['upvotes_received'] == 1
    assert owner['engagement']['average_upvotes_per_issue'] == 0.5

    voter = client.get('/api/v1/statistics/user', headers=voter_headers).json()
    assert voter['issues_reported']['total'] == 0
    assert voter['community'] == {'flags_submitted': 1, 'upvotes_given': 1, 'upvotes_received': 0}
    assert voter['engagement']['average_upvotes_per_issue'] == 0.0
