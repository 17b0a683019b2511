import re
from flask import current_app
from extensions import db
from models.blog_model import BlogPost
from models.consultation_model import Consultation, FollowUp
from models.user_model import User
from utils.auth_utils import hash_password, verify_password, generate_jwt
from utils.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError, json_object
from utils.permissions import DEFAULT_ROLE, SUPER_ADMIN, Permission, require_permission, validate_role
from utils.time_utils import utc_now

EMAIL_PATTERN = re.compile(r'^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$')
MIN_PASSWORD_LENGTH = 6


def _validate_username(username):
    if not isinstance(username, str) or not 3 <= len(username.strip()) <= 30:
        raise ValidationError("Username must be between 3 and 30 characters", fields=['username'])
    return username.strip()


def _validate_email(email):
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip().lower()):
        raise ValidationError("Please enter a valid email", fields=['email'])
    return email.strip().lower()


def _validate_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", fields=['password'])
    return password


def _ensure_unique(username=None, email=None, exclude_id=None):
    if username is not None:
        query = User.query.filter_by(username=username)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("Username already in use")
    if email is not None:
        query = User.query.filter_by(email=email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("Email already in use")


def _get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _is_referenced(user):
    return any(
        query.first() is not None
        for query in (
            Consultation.query.filter_by(assigned_to_id=user.id),
            FollowUp.query.filter_by(created_by_id=user.id),
            BlogPost.query.filter_by(author_id=user.id),
        )
    )


class AuthService:

    @staticmethod
    def login(data):
        data = json_object(data)
        identifier = data.get('username') or data.get('email') or ''
        password = data.get('password') or ''
        if not isinstance(identifier, str) or not isinstance(password, str):
            raise ValidationError("Username and password must be strings", fields=['username', 'password'])
        identifier = identifier.strip()
        if not identifier or not password:
            raise ValidationError("Username and password are required", fields=['username', 'password'])

        user = User.query.filter(
            (User.username == identifier) | (User.email == identifier.lower())
        ).first()

        if not user or not user.is_active or not verify_password(password, user.password):
            raise AuthenticationError("Invalid credentials")

        user.last_login = utc_now()
        db.session.commit()
        current_app.logger.info(f"User {user.id} logged in")

        return {
            'message': 'Login successful',
            'token': generate_jwt(user.id),
            'user': user.to_dict()
        }, 200

    @staticmethod
    def get_profile(current_user):
        return {'user': current_user.to_dict()}, 200

    @staticmethod
    def list_users(current_user):
        require_permission(current_user, Permission.ALL)
        users = User.query.order_by(User.created_at, User.id).all()
        return {'users': [user.to_dict() for user in users]}, 200

    @staticmethod
    def create_user(current_user, data):
        require_permission(current_user, Permission.ALL)
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")

        username = _validate_username(data.get('username'))
        email = _validate_email(data.get('email'))
        password = _validate_password(data.get('password'))
        role = validate_role(data.get('role') or DEFAULT_ROLE)
        _ensure_unique(username=username, email=email)

        # Permissions come from the role alone; a 'permissions' field in the body is ignored.
        user = User(
            username=username,
            email=email,
            password=hash_password(password),
            role=role,
            is_active=bool(data.get('isActive', True)),
        )
        db.session.add(user)
        db.session.commit()
        current_app.logger.info(f"User {user.id} ({role}) created by user {current_user.id}")

        return {'message': 'User created successfully', 'user': user.to_dict()}, 201

    @staticmethod
    def update_user(current_user, user_id, data):
        require_permission(current_user, Permission.ALL)
        data = json_object(data)
        user = _get_user(user_id)

        if 'role' in data:
            role = validate_role(data['role'])
            if user.is_bootstrap and role != SUPER_ADMIN:
                raise ValidationError("The bootstrap administrator must remain a super admin", fields=['role'])
        if 'isActive' in data and not data['isActive'] and (user.is_bootstrap or user.id == current_user.id):
            raise ValidationError("This account cannot be deactivated", fields=['isActive'])

        username = _validate_username(data['username']) if 'username' in data else None
        email = _validate_email(data['email']) if 'email' in data else None
        password = _validate_password(data['password']) if 'password' in data else None
        _ensure_unique(username=username, email=email, exclude_id=user.id)

        if username is not None:
            user.username = username
        if email is not None:
            user.email = email
        if password is not None:
            user.password = hash_password(password)
        if 'role' in data and data['role'] != user.role:
            current_app.logger.info(f"User {user.id} role {user.role} -> {data['role']} by user {current_user.id}")
            user.role = data['role']
        if 'isActive' in data:
            user.is_active = bool(data['isActive'])
        if 'profileImage' in data:
            user.profile_image = data['profileImage']

        db.session.commit()
        return {'message': 'User updated successfully', 'user': user.to_dict()}, 200

    @staticmethod
    def delete_user(current_user, user_id):
        require_permission(current_user, Permission.ALL)
        user = _get_user(user_id)
        if user.is_bootstrap:
            raise ValidationError("The bootstrap administrator cannot be deleted")
        if user.id == current_user.id:
            raise ValidationError("You cannot delete your own account")
        if _is_referenced(user):
            raise ConflictError("User is referenced by consultations or blog posts, deactivate it instead")

        db.session.delete(user)
        db.session.commit()
        current_app.logger.info(f"User {user_id} deleted by user {current_user.id}")
        return {'message': 'User deleted successfully'}, 200

    @staticmethod
    def ensure_bootstrap_admin(username, email, password):
        """Create the undeletable super admin, or restore its role and active flag."""
        user = User.query.filter_by(is_bootstrap=True).first()
        if user is None:
            user = User(
                username=username,
                email=email.lower(),
                password=hash_password(password),
                role=SUPER_ADMIN,
                is_active=True,
                is_bootstrap=True,
            )
            db.session.add(user)
        else:
            user.role = SUPER_ADMIN
            user.is_active = True
        db.session.commit()
        return user
