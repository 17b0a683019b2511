from extensions import db
from utils.time_utils import utc_now, isoformat

PENDING = 'pending'
APPROVED = 'approved'
REJECTED = 'rejected'
COMPLETED = 'completed'
CANCELLED = 'cancelled'
CONSULTATION_STATUSES = (PENDING, APPROVED, REJECTED, COMPLETED, CANCELLED)

FOLLOWUP_TYPES = ('email', 'phone', 'meeting', 'note')

PRIORITIES = ('low', 'medium', 'high')
DEFAULT_PRIORITY = 'medium'


class Consultation(db.Model):
    __tablename__ = 'consultations'
    id = db.Column(db.Integer, primary_key=True)
    client_name = db.Column(db.String(150), nullable=False)
    client_email = db.Column(db.String(150), nullable=False, index=True)
    client_phone = db.Column(db.String(50), nullable=False)
    company = db.Column(db.String(150), nullable=True)
    service_type = db.Column(db.String(150), nullable=False)
    preferred_date = db.Column(db.String(50), nullable=False)  # caller-supplied, not a calendar date
    preferred_time = db.Column(db.String(50), nullable=False)
    message = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)
    assigned_to_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    notes = db.Column(db.Text, nullable=True)
    priority = db.Column(db.String(10), nullable=False, default=DEFAULT_PRIORITY)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    assigned_to = db.relationship('User', foreign_keys=[assigned_to_id])
    follow_ups = db.relationship(
        'FollowUp',
        backref='consultation',
        order_by='FollowUp.sequence',
        cascade='all, delete-orphan',
        lazy=True,
    )

    def to_dict(self):
        return {
            'id': self.id,
            'clientName': self.client_name,
            'clientEmail': self.client_email,
            'clientPhone': self.client_phone,
            'company': self.company,
            'serviceType': self.service_type,
            'preferredDate': self.preferred_date,
            'preferredTime': self.preferred_time,
            'message': self.message,
            'status': self.status,
            'assignedTo': self.assigned_to.to_reference() if self.assigned_to else None,
            'notes': self.notes,
            'priority': self.priority,
            'followUps': [follow_up.to_dict() for follow_up in self.follow_ups],
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Consultation id={self.id} status={self.status}>"


class FollowUp(db.Model):
    __tablename__ = 'consultation_followups'
    id = db.Column(db.Integer, primary_key=True)
    consultation_id = db.Column(db.Integer, db.ForeignKey('consultations.id'), nullable=False)
    sequence = db.Column(db.Integer, nullable=False)  # append order within the consultation
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(10), nullable=False)
    scheduled_date = db.Column(db.DateTime, nullable=True)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    created_by = db.relationship('User', foreign_keys=[created_by_id])

    def to_dict(self):
        return {
            'id': self.id,
            'message': self.message,
            'type': self.type,
            'scheduledDate': isoformat(self.scheduled_date),
            'completed': bool(self.completed),
            'createdBy': (
                {'id': self.created_by.id, 'username': self.created_by.username}
                if self.created_by else {'id': self.created_by_id}
            ),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
