"""
Profile, Settings, Health Data and Record Route Tests
"""

from config.models import MEDICATIONS


def test_status(client):
    resp = client.get('/api/status')
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'ok'


def test_missing_user_id_is_a_bad_request(client):
    resp = client.get('/api/profile')
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'User ID is required'}


def test_unknown_route_returns_json_error(client):
    resp = client.get('/api/nothing-here')
    assert resp.status_code == 404
    assert 'error' in resp.get_json()


def test_profile_is_created_on_first_read(client):
    resp = client.get('/api/profile?userId=U9')
    assert resp.get_json() == {'id': 'U9', 'name': 'User', 'email': 'user@example.com'}


def test_profile_update_and_completion(client, user):
    profile = {
        'id': user['id'], 'name': 'Wanjiku', 'email': user['email'], 'phone': '+254700000001',
        'age': 34, 'gender': 'female', 'height': 165, 'weight': 62, 'bloodType': 'O+',
        'allergies': [],
        'emergencyContact': {'name': 'Kamau', 'relationship': 'Brother', 'phone': ''},
    }
    assert client.put('/api/profile', json=profile).get_json() == profile

    resp = client.get(f"/api/profile/completion?userId={user['id']}")
    # 10 of 12 fields: empty allergies and blank contact phone do not count
    assert resp.get_json() == {'completion': 83}


def test_profile_update_requires_id(client):
    resp = client.put('/api/profile', json={'name': 'No Id'})
    assert resp.status_code == 400


def test_settings_default_then_update(client, user):
    settings = client.get(f"/api/settings?userId={user['id']}").get_json()
    assert settings['notifications']['medications'] is True

    settings['theme'] = 'dark'
    resp = client.put(f"/api/settings?userId={user['id']}", json=settings)
    assert resp.get_json()['theme'] == 'dark'
    assert client.get(f"/api/settings?userId={user['id']}").get_json()['theme'] == 'dark'


def test_health_data_starts_empty(client):
    data = client.get('/api/health-data?userId=U1').get_json()
    assert data == {'bloodPressure': [], 'heartRate': [], 'weight': [], 'sleep': [], 'userId': 'U1'}


def test_add_reading_appends_without_dedup(client):
    reading = {'date': '2025-03-16T08:00:00.000Z', 'systolic': 120, 'diastolic': 80}
    for _ in range(2):
        resp = client.post('/api/health-data/readings', json={
            'userId': 'U1', 'metric': 'bloodPressure', 'reading': reading,
        })
        assert resp.status_code == 200

    assert resp.get_json()['bloodPressure'] == [reading, reading]


def test_add_reading_validates_fields(client):
    resp = client.post('/api/health-data/readings', json={
        'userId': 'U1', 'metric': 'sleep', 'reading': {'date': '2025-03-16', 'hours': 7, 'quality': 'meh'},
    })
    assert resp.status_code == 400

    resp = client.post('/api/health-data/readings', json={
        'userId': 'U1', 'metric': 'heartRate', 'reading': {'date': '2025-03-16'},
    })
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Missing required fields: value'}


def test_put_health_data_replaces_document(client):
    data = {'bloodPressure': [], 'heartRate': [{'date': '2025-03-16', 'value': 72}], 'weight': [], 'sleep': []}
    resp = client.put('/api/health-data?userId=U1', json={'healthData': data})
    assert resp.get_json()['heartRate'] == [{'date': '2025-03-16', 'value': 72}]


def test_batch_accepts_collection_named_key(client, storage):
    resp = client.post('/api/medications/batch', json={
        'userId': 'U1',
        'medications': [{'id': 'M1', 'name': 'Metformin', 'reminderTimes': ['08:00', '20:00']}],
    })
    assert resp.status_code == 200
    assert storage.records(MEDICATIONS).get('U1', 'M1')['name'] == 'Metformin'

    listed = client.get('/api/medications?userId=U1').get_json()
    assert [m['id'] for m in listed] == ['M1']


def test_batch_requires_user_and_items(client):
    resp = client.post('/api/appointments/batch', json={'items': []})
    assert resp.status_code == 400

    resp = client.post('/api/appointments/batch', json={'userId': 'U1'})
    assert resp.status_code == 400


def test_batch_rejects_bad_reminder_time(client, storage):
    resp = client.post('/api/medications/batch', json={
        'userId': 'U1', 'items': [{'id': 'M1', 'name': 'Metformin', 'reminderTimes': ['25:00']}],
    })
    assert resp.status_code == 400
    assert storage.records(MEDICATIONS).list('U1') == []


def test_batch_rejects_bad_document_type(client):
    resp = client.post('/api/documents/batch', json={
        'userId': 'U1', 'items': [{'id': 'D1', 'title': 'Scan', 'type': 'xray'}],
    })
    assert resp.status_code == 400


def test_unknown_collection_is_not_found(client):
    assert client.get('/api/widgets?userId=U1').status_code == 404


def test_export_returns_csv_attachment(client):
    client.post('/api/health-data/readings', json={
        'userId': 'U1', 'metric': 'heartRate', 'reading': {'date': '2025-03-16T08:00:00.000Z', 'value': 70},
    })

    resp = client.get('/api/export?userId=U1')

    assert resp.status_code == 200
    assert resp.mimetype == 'text/csv'
    assert 'attachment' in resp.headers['Content-Disposition']
    assert resp.get_data(as_text=True).startswith('Heart Rate Data\n')


def test_add_reading_rejects_non_numeric_values(client):
    resp = client.post('/api/health-data/readings', json={
        'userId': 'U1', 'metric': 'bloodPressure',
        'reading': {'date': '2025-03-16', 'systolic': '120', 'diastolic': 80},
    })
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'systolic must be a number'}

    resp = client.post('/api/health-data/readings', json={
        'userId': 'U1', 'metric': 'weight', 'reading': {'date': '2025-03-16', 'value': True},
    })
    assert resp.status_code == 400

    assert client.get('/api/health-data?userId=U1').get_json()['bloodPressure'] == []
    assert client.get('/api/health-tips/personalized?userId=U1').status_code == 200
