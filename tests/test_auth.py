"""
Authentication Tests

Login, signup, password reset codes and password change, through the
routes and the service.
"""

from datetime import datetime, timedelta

import pytz

from config.models import APPOINTMENTS, PROFILES, SETTINGS, VERIFICATION_CODES
from utils.date_converter import parse_iso
from webapp.services import auth_service


def test_signup_creates_profile_and_default_settings(client, storage, user):
    assert set(user) == {'id', 'username', 'email'}
    assert storage.records(PROFILES).find(lambda p: p['id'] == user['id'])['name'] == 'wanjiku'
    assert storage.records(SETTINGS).get_single(user['id'])['theme'] == 'system'
    assert storage.records(APPOINTMENTS).list(user['id']) == []


def test_signup_seeds_demo_data_when_enabled(storage):
    user = auth_service.signup(storage, 'amina', 'amina@example.com', 'pw', seed_demo_data=True)
    assert len(storage.records(APPOINTMENTS).list(user['id'])) == 3


def test_signup_rejects_duplicate_email(client, user):
    resp = client.post('/api/auth/signup', json={
        'username': 'other', 'email': 'wanjiku@example.com', 'password': 'x',
    })
    assert resp.status_code == 409
    assert resp.get_json() == {'error': 'Email already exists'}


def test_signup_rejects_duplicate_username(client, user):
    resp = client.post('/api/auth/signup', json={
        'username': 'wanjiku', 'email': 'new@example.com', 'password': 'x',
    })
    assert resp.status_code == 409
    assert resp.get_json() == {'error': 'Username already exists'}


def test_signup_requires_all_fields(client):
    resp = client.post('/api/auth/signup', json={'username': 'a'})
    assert resp.status_code == 400


def test_login_with_email_or_username(client, user):
    for identifier in ('wanjiku@example.com', 'wanjiku'):
        resp = client.post('/api/auth/login', json={'emailOrUsername': identifier, 'password': 'secret123'})
        assert resp.status_code == 200
        assert resp.get_json() == {'success': True, 'user': user}


def test_login_rejects_wrong_password(client, user):
    resp = client.post('/api/auth/login', json={'emailOrUsername': 'wanjiku', 'password': 'nope'})
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'Invalid credentials'}


def test_login_rejects_unknown_user(client):
    resp = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': 'x'})
    assert resp.status_code == 401


def test_login_requires_fields(client):
    resp = client.post('/api/auth/login', json={'password': 'x'})
    assert resp.status_code == 400


def test_non_json_body_is_rejected(client):
    resp = client.post('/api/auth/login', data='hello', content_type='text/plain')
    assert resp.status_code == 400


def test_verify_reports_existence(client, user):
    assert client.get(f"/api/auth/verify?userId={user['id']}").get_json() == {'exists': True}
    assert client.get('/api/auth/verify?userId=nobody').get_json() == {'exists': False}


def test_forgot_password_code_expires_after_fifteen_minutes(storage):
    user = auth_service.signup(storage, 'otieno', 'otieno@example.com', 'pw', seed_demo_data=False)
    now = datetime(2025, 3, 16, 8, 0, tzinfo=pytz.utc)

    result = auth_service.forgot_password(storage, email='otieno@example.com', now=now)

    assert result['success'] is True
    assert result['userId'] == user['id']
    assert len(result['code']) == 6 and result['code'].isdigit()
    assert parse_iso(result['expiresAt']) - now == timedelta(minutes=15)


def test_new_code_replaces_previous_one(storage):
    user = auth_service.signup(storage, 'otieno', 'otieno@example.com', 'pw', seed_demo_data=False)
    auth_service.forgot_password(storage, email='otieno@example.com')
    auth_service.forgot_password(storage, email='otieno@example.com')

    codes = storage.records(VERIFICATION_CODES).all()
    assert [c['userId'] for c in codes] == [user['id']]


def test_forgot_password_by_phone(client, storage, user):
    client.put('/api/profile', json={'id': user['id'], 'name': 'Wanjiku', 'phone': '+254700000001'})

    resp = client.post('/api/auth/forgot-password', json={'phone': '+254700000001', 'method': 'phone'})

    assert resp.status_code == 200
    assert resp.get_json()['userId'] == user['id']
    assert resp.get_json()['message'] == 'Verification code sent to your phone'


def test_forgot_password_unknown_email(client):
    resp = client.post('/api/auth/forgot-password', json={'email': 'ghost@example.com'})
    assert resp.status_code == 404


def test_forgot_password_invalid_method(client):
    resp = client.post('/api/auth/forgot-password', json={'email': 'a@example.com', 'method': 'pigeon'})
    assert resp.status_code == 400


def test_reset_password_with_valid_code(client, user):
    code = client.post('/api/auth/forgot-password', json={'email': user['email']}).get_json()['code']

    resp = client.post('/api/auth/reset-password', json={
        'userId': user['id'], 'code': code, 'newPassword': 'fresh-pass',
    })

    assert resp.status_code == 200
    assert resp.get_json()['success'] is True
    login = client.post('/api/auth/login', json={'emailOrUsername': 'wanjiku', 'password': 'fresh-pass'})
    assert login.status_code == 200


def test_reset_code_is_single_use(client, user):
    code = client.post('/api/auth/forgot-password', json={'email': user['email']}).get_json()['code']
    payload = {'userId': user['id'], 'code': code, 'newPassword': 'fresh-pass'}

    assert client.post('/api/auth/reset-password', json=payload).status_code == 200
    resp = client.post('/api/auth/reset-password', json=payload)

    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'Invalid or expired verification code'}


def test_expired_code_is_rejected(storage):
    user = auth_service.signup(storage, 'otieno', 'otieno@example.com', 'pw', seed_demo_data=False)
    issued_at = datetime(2025, 3, 16, 8, 0, tzinfo=pytz.utc)
    code = auth_service.forgot_password(storage, email='otieno@example.com', now=issued_at)['code']

    later = issued_at + timedelta(minutes=15, seconds=1)
    assert auth_service.verify_code(storage, user['id'], code, now=later) is False
    assert auth_service.verify_code(storage, user['id'], code, now=issued_at + timedelta(minutes=14)) is True


def test_change_password(client, user):
    resp = client.post('/api/auth/change-password', json={
        'userId': user['id'], 'currentPassword': 'secret123', 'newPassword': 'n3w',
    })
    assert resp.status_code == 200
    assert resp.get_json() == {'success': True}

    old = client.post('/api/auth/login', json={'emailOrUsername': 'wanjiku', 'password': 'secret123'})
    assert old.status_code == 401


def test_change_password_wrong_current(client, user):
    resp = client.post('/api/auth/change-password', json={
        'userId': user['id'], 'currentPassword': 'wrong', 'newPassword': 'n3w',
    })
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'Current password is incorrect'}


def test_change_password_unknown_user(client):
    resp = client.post('/api/auth/change-password', json={
        'userId': 'nobody', 'currentPassword': 'a', 'newPassword': 'b',
    })
    assert resp.status_code == 404
