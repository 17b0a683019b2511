from extensions import db
from utils.permissions import DEFAULT_ROLE, permissions_for_role
from utils.time_utils import utc_now, isoformat


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False)
    email = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)  # bcrypt hash, never serialized
    role = db.Column(db.String(50), nullable=False, default=DEFAULT_ROLE)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_bootstrap = db.Column(db.Boolean, nullable=False, default=False)
    last_login = db.Column(db.DateTime, nullable=True)
    profile_image = db.Column(db.String(300), nullable=True)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    @property
    def permissions(self):
        # Derived from role on every read.
        return permissions_for_role(self.role)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'permissions': sorted(p.value for p in self.permissions),
            'isActive': self.is_active,
            'isBootstrap': self.is_bootstrap,
            'lastLogin': isoformat(self.last_login),
            'profileImage': self.profile_image,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def to_reference(self):
        return {'id': self.id, 'username': self.username, 'email': self.email}

    def __repr__(self):
        return f"<User id={self.id} username={self.username} role={self.role}>"
