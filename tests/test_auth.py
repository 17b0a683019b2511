from datetime import datetime, timedelta, timezone

import jwt
import pytest

from extensions import db
from models.user_model import User
from tests.conftest import PASSWORD, bearer, create_user
from utils.permissions import BLOG_USER, CONSULTATION_MANAGER, SUPER_ADMIN


def login(client, **payload):
    return client.post('/api/auth/login', json=payload)


class TestLogin:
    def test_login_with_username(self, client, blog_user):
        response = login(client, username='writer', password=PASSWORD)
        assert response.status_code == 200
        body = response.get_json()
        assert body['token']
        assert body['user']['id'] == blog_user
        assert body['user']['role'] == BLOG_USER
        assert 'password' not in body['user']
        assert body['user']['lastLogin'] is not None

    def test_login_with_email(self, client, blog_user):
        response = login(client, email='Writer@Example.com', password=PASSWORD)
        assert response.status_code == 200

    def test_token_from_login_resolves_identity(self, client, manager):
        token = login(client, username='manager', password=PASSWORD).get_json()['token']
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['id'] == manager
        assert 'consultation:approve' in user['permissions']

    @pytest.mark.parametrize('payload', [
        {'username': 'writer', 'password': 'wrong-password'},
        {'username': 'nobody', 'password': PASSWORD},
    ])
    def test_invalid_credentials(self, client, blog_user, payload):
        response = login(client, **payload)
        assert response.status_code == 401
        assert response.get_json() == {'message': 'Invalid credentials'}

    def test_inactive_user_cannot_login(self, app, client):
        create_user(app, 'sleeper', BLOG_USER, is_active=False)
        response = login(client, username='sleeper', password=PASSWORD)
        assert response.status_code == 401
        assert response.get_json() == {'message': 'Invalid credentials'}

    def test_missing_fields(self, client):
        assert login(client, username='writer').status_code == 400

    @pytest.mark.parametrize('payload', [
        {'username': 123, 'password': PASSWORD},
        {'email': ['writer@example.com'], 'password': PASSWORD},
        {'username': 'writer', 'password': 123456},
    ])
    def test_non_string_credentials(self, client, blog_user, payload):
        response = login(client, **payload)
        assert response.status_code == 400

    def test_non_object_body(self, client):
        response = client.post('/api/auth/login', json=['writer', PASSWORD])
        assert response.status_code == 400
        assert response.get_json() == {'message': 'Invalid JSON body'}


class TestIdentity:
    def assert_rejected(self, client, headers):
        response = client.get('/api/auth/me', headers=headers)
        assert response.status_code == 401
        assert response.get_json() == {'message': 'Token is not valid'}

    def test_missing_header(self, client):
        self.assert_rejected(client, {})

    @pytest.mark.parametrize('value', ['Bearer', 'Token abc', 'Bearer a b', 'bearer.abc'])
    def test_malformed_header(self, client, value):
        self.assert_rejected(client, {'Authorization': value})

    def test_garbage_token(self, client):
        self.assert_rejected(client, {'Authorization': 'Bearer not-a-jwt'})

    def test_tampered_token(self, app, client, blog_user):
        token = bearer(app, blog_user)['Authorization'].split()[1]
        header, payload, signature = token.split('.')
        tampered = f"{header}.{payload}.{signature[::-1]}"
        self.assert_rejected(client, {'Authorization': f'Bearer {tampered}'})

    def test_token_signed_with_other_secret(self, client, blog_user):
        token = jwt.encode({'user_id': blog_user}, 'some-other-secret', algorithm='HS256')
        self.assert_rejected(client, {'Authorization': f'Bearer {token}'})

    def test_expired_token(self, app, client, blog_user):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {'user_id': blog_user, 'iat': past, 'exp': past + timedelta(hours=1)},
            app.config['JWT_SECRET'],
            algorithm=app.config['JWT_ALGORITHM'],
        )
        self.assert_rejected(client, {'Authorization': f'Bearer {token}'})

    def test_token_for_deleted_user(self, app, client):
        user_id = create_user(app, 'ghost', BLOG_USER)
        headers = bearer(app, user_id)
        with app.app_context():
            db.session.delete(db.session.get(User, user_id))
            db.session.commit()
        self.assert_rejected(client, headers)

    def test_token_for_deactivated_user(self, app, client, blog_user, blog_user_headers):
        with app.app_context():
            db.session.get(User, blog_user).is_active = False
            db.session.commit()
        self.assert_rejected(client, blog_user_headers)

    def test_permissions_follow_current_role(self, app, client, blog_user, blog_user_headers):
        with app.app_context():
            db.session.get(User, blog_user).role = CONSULTATION_MANAGER
            db.session.commit()
        assert client.get('/api/consultations', headers=blog_user_headers).status_code == 200


class TestUserManagement:
    def test_create_user(self, client, super_admin_headers):
        response = client.post('/api/auth/users', headers=super_admin_headers, json={
            'username': 'newbie', 'email': 'newbie@example.com', 'password': 'longenough',
            'role': CONSULTATION_MANAGER, 'permissions': ['all'],
        })
        assert response.status_code == 201
        user = response.get_json()['user']
        assert user['role'] == CONSULTATION_MANAGER
        assert 'all' not in user['permissions']

    def test_created_user_defaults_to_blog_user(self, client, super_admin_headers):
        response = client.post('/api/auth/users', headers=super_admin_headers, json={
            'username': 'plain', 'email': 'plain@example.com', 'password': 'longenough',
        })
        assert response.get_json()['user']['role'] == BLOG_USER

    @pytest.mark.parametrize('payload,field', [
        ({'username': 'ab', 'email': 'ab@example.com', 'password': 'longenough'}, 'username'),
        ({'username': 'valid', 'email': 'nope', 'password': 'longenough'}, 'email'),
        ({'username': 'valid', 'email': 'valid@example.com', 'password': '123'}, 'password'),
    ])
    def test_create_user_validation(self, client, super_admin_headers, payload, field):
        response = client.post('/api/auth/users', headers=super_admin_headers, json=payload)
        assert response.status_code == 400
        assert response.get_json()['fields'] == [field]

    def test_unknown_role(self, client, super_admin_headers):
        response = client.post('/api/auth/users', headers=super_admin_headers, json={
            'username': 'valid', 'email': 'valid@example.com', 'password': 'longenough', 'role': 'editor',
        })
        assert response.status_code == 400

    def test_duplicate_username(self, client, super_admin_headers, blog_user):
        response = client.post('/api/auth/users', headers=super_admin_headers, json={
            'username': 'writer', 'email': 'other@example.com', 'password': 'longenough',
        })
        assert response.status_code == 409

    def test_only_super_admin_manages_users(self, client, manager_headers, blog_user_headers):
        assert client.get('/api/auth/users', headers=manager_headers).status_code == 403
        assert client.post('/api/auth/users', headers=blog_user_headers, json={}).status_code == 403

    def test_list_users(self, client, super_admin_headers, blog_user):
        users = client.get('/api/auth/users', headers=super_admin_headers).get_json()['users']
        assert {u['username'] for u in users} == {'admin', 'writer'}

    def test_change_role(self, client, super_admin_headers, blog_user):
        response = client.put(f'/api/auth/users/{blog_user}', headers=super_admin_headers,
                              json={'role': CONSULTATION_MANAGER})
        assert response.status_code == 200
        assert 'consultation:view' in response.get_json()['user']['permissions']

    def test_bootstrap_admin_keeps_super_admin(self, client, super_admin, super_admin_headers):
        response = client.put(f'/api/auth/users/{super_admin}', headers=super_admin_headers,
                              json={'role': BLOG_USER})
        assert response.status_code == 400

    def test_cannot_deactivate_self(self, app, client):
        admin_id = create_user(app, 'second', SUPER_ADMIN)
        response = client.put(f'/api/auth/users/{admin_id}', headers=bearer(app, admin_id),
                              json={'isActive': False})
        assert response.status_code == 400

    def test_cannot_delete_bootstrap_admin(self, app, client, super_admin):
        other_admin = create_user(app, 'second', SUPER_ADMIN)
        response = client.delete(f'/api/auth/users/{super_admin}', headers=bearer(app, other_admin))
        assert response.status_code == 400

    def test_delete_user(self, client, super_admin_headers, blog_user):
        assert client.delete(f'/api/auth/users/{blog_user}', headers=super_admin_headers).status_code == 200
        assert client.delete(f'/api/auth/users/{blog_user}', headers=super_admin_headers).status_code == 404

    def test_update_user_rejects_non_object_body(self, client, super_admin_headers, blog_user):
        response = client.put(f'/api/auth/users/{blog_user}', headers=super_admin_headers, json=['role'])
        assert response.status_code == 400

    def test_cannot_delete_assigned_manager(self, client, super_admin_headers, manager, manager_headers,
                                            make_consultation):
        consultation = make_consultation()
        client.put(f"/api/consultations/{consultation['id']}/status",
                   json={'status': 'approved'}, headers=manager_headers)

        response = client.delete(f'/api/auth/users/{manager}', headers=super_admin_headers)
        assert response.status_code == 409

        current = client.get(f"/api/consultations/{consultation['id']}", headers=super_admin_headers).get_json()
        assert current['assignedTo']['id'] == manager

        deactivated = client.put(f'/api/auth/users/{manager}', headers=super_admin_headers, json={'isActive': False})
        assert deactivated.status_code == 200
        assert deactivated.get_json()['user']['isActive'] is False

    def test_cannot_delete_follow_up_author(self, app, client, super_admin_headers, make_consultation):
        author = create_user(app, 'caller', CONSULTATION_MANAGER)
        consultation = make_consultation()
        client.post(f"/api/consultations/{consultation['id']}/followups",
                    json={'message': 'Called', 'type': 'phone'}, headers=bearer(app, author))
        assert client.delete(f'/api/auth/users/{author}', headers=super_admin_headers).status_code == 409

    def test_cannot_delete_blog_author(self, client, super_admin_headers, blog_user, blog_user_headers):
        client.post('/api/blog', json={'title': 'Hello', 'content': 'World'}, headers=blog_user_headers)
        assert client.delete(f'/api/auth/users/{blog_user}', headers=super_admin_headers).status_code == 409


class TestBootstrapAdmin:
    def test_create_admin_command(self, app):
        result = app.test_cli_runner().invoke(args=[
            'create-admin', '--username', 'owner', '--email', 'Owner@Example.com', '--password', 'hunter22',
        ])
        assert result.exit_code == 0
        assert 'owner' in result.output
        with app.app_context():
            user = User.query.filter_by(is_bootstrap=True).one()
            assert user.role == SUPER_ADMIN
            assert user.email == 'owner@example.com'

    def test_create_admin_restores_role(self, app, super_admin):
        with app.app_context():
            user = db.session.get(User, super_admin)
            user.role = BLOG_USER
            user.is_active = False
            db.session.commit()

        result = app.test_cli_runner().invoke(args=['create-admin'])
        assert result.exit_code == 0
        with app.app_context():
            user = db.session.get(User, super_admin)
            assert user.role == SUPER_ADMIN
            assert user.is_active is True
