import pytest
from app import create_app
from config import TestingConfig
from extensions import db
from models.consultation_model import Consultation
from models.user_model import User
from utils.auth_utils import hash_password, generate_jwt
from utils.permissions import SUPER_ADMIN, BLOG_USER, CONSULTATION_MANAGER

PASSWORD = 'secret123'

CONSULTATION_PAYLOAD = {
    'clientName': 'Ada',
    'clientEmail': 'ada@x.com',
    'clientPhone': '+2348000000000',
    'serviceType': 'Software Development',
    'preferredDate': '2025-01-10',
    'preferredTime': '10:00 AM',
    'message': 'Need a site',
}


@pytest.fixture
def app(tmp_path):
    app = create_app(
        TestingConfig,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_FOLDER=str(tmp_path / 'uploads'),
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def create_user(app, username, role, **extra):
    with app.app_context():
        user = User(
            username=username,
            email=f"{username}@example.com",
            password=hash_password(PASSWORD),
            role=role,
            **extra
        )
        db.session.add(user)
        db.session.commit()
        return user.id


def bearer(app, user_id):
    with app.app_context():
        return {'Authorization': f'Bearer {generate_jwt(user_id)}'}


@pytest.fixture
def super_admin(app):
    return create_user(app, 'admin', SUPER_ADMIN, is_bootstrap=True)


@pytest.fixture
def blog_user(app):
    return create_user(app, 'writer', BLOG_USER)


@pytest.fixture
def manager(app):
    return create_user(app, 'manager', CONSULTATION_MANAGER)


@pytest.fixture
def super_admin_headers(app, super_admin):
    return bearer(app, super_admin)


@pytest.fixture
def blog_user_headers(app, blog_user):
    return bearer(app, blog_user)


@pytest.fixture
def manager_headers(app, manager):
    return bearer(app, manager)


@pytest.fixture
def anonymous_headers():
    return {}


@pytest.fixture
def make_consultation(client):
    def _make(**overrides):
        response = client.post('/api/consultations', json={**CONSULTATION_PAYLOAD, **overrides})
        assert response.status_code == 201
        return response.get_json()['consultation']
    return _make


@pytest.fixture
def load_consultation(app):
    def _load(consultation_id):
        with app.app_context():
            return db.session.get(Consultation, consultation_id).to_dict()
    return _load
