import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
from extensions import bcrypt, db
from models.user_model import User
from utils.errors import AuthenticationError


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode('utf-8')


def verify_password(password, hashed_password):
    if not password or not hashed_password:
        return False
    return bcrypt.check_password_hash(hashed_password, password)


def generate_jwt(user_id):
    now = datetime.now(timezone.utc)
    payload = {
        'user_id': user_id,
        'iat': now,
        'exp': now + timedelta(hours=current_app.config['JWT_EXPIRATION_HOURS'])
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET'], algorithm=current_app.config['JWT_ALGORITHM'])


def decode_jwt(token):
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except jwt.ExpiredSignatureError:
        current_app.logger.debug("Rejected expired token")
        raise AuthenticationError()
    except jwt.InvalidTokenError:
        current_app.logger.debug("Rejected invalid token")
        raise AuthenticationError()
    user_id = payload.get('user_id')
    if not isinstance(user_id, int):
        raise AuthenticationError()
    return user_id


def extract_bearer_token(authorization_header):
    if not authorization_header:
        return None
    parts = authorization_header.split()
    if len(parts) == 2 and parts[0] == 'Bearer':
        return parts[1]
    return None


def resolve_identity(authorization_header):
    """
    Resolve an ``Authorization`` header to an active user.

    Every failure mode (missing, malformed, expired, tampered, unknown or inactive user)
    raises the same ``AuthenticationError`` so callers cannot tell them apart.
    """
    token = extract_bearer_token(authorization_header)
    if not token:
        raise AuthenticationError()
    user = db.session.get(User, decode_jwt(token))
    if not user or not user.is_active:
        raise AuthenticationError()
    return user


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            current_user = resolve_identity(request.headers.get('Authorization'))
        except AuthenticationError as e:
            return jsonify(e.to_dict()), e.status_code
        return f(current_user, *args, **kwargs)
    return decorated
