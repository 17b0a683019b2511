import re
from flask import current_app
from sqlalchemy import func
from extensions import db
from models.consultation_model import Consultation, PENDING, DEFAULT_PRIORITY, PRIORITIES
from services import consultation_lifecycle as lifecycle
from utils.errors import NotFoundError, ValidationError, json_object
from utils.pagination import parse_pagination, paginate
from utils.permissions import Permission, require_permission
from utils.time_utils import start_of_month

EMAIL_PATTERN = re.compile(r'^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$')

REQUIRED_FIELDS = (
    'clientName', 'clientEmail', 'clientPhone', 'serviceType',
    'preferredDate', 'preferredTime', 'message',
)


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _get_consultation(consultation_id):
    consultation = db.session.get(Consultation, consultation_id)
    if not consultation:
        raise NotFoundError("Consultation not found")
    return consultation


class ConsultationService:
    @staticmethod
    def create_consultation(data):
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")

        fields = {name: _clean(data.get(name)) for name in REQUIRED_FIELDS}
        missing = [name for name, value in fields.items() if not value or not isinstance(value, str)]
        if missing:
            raise ValidationError("Missing required fields", fields=missing)

        email = fields['clientEmail'].lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email", fields=['clientEmail'])

        company = _clean(data.get('company'))
        consultation = Consultation(
            client_name=fields['clientName'],
            client_email=email,
            client_phone=fields['clientPhone'],
            company=company if isinstance(company, str) and company else None,
            service_type=fields['serviceType'],
            preferred_date=fields['preferredDate'],
            preferred_time=fields['preferredTime'],
            message=fields['message'],
            status=PENDING,
            priority=DEFAULT_PRIORITY,
        )
        db.session.add(consultation)
        db.session.commit()
        current_app.logger.info(f"Consultation {consultation.id} submitted for '{consultation.service_type}'")

        return {
            'message': 'Consultation request submitted successfully',
            'consultation': consultation.to_dict()
        }, 201

    @staticmethod
    def list_consultations(current_user, args):
        require_permission(current_user, Permission.CONSULTATION_VIEW)
        page, limit = parse_pagination(args, default_limit=20)

        query = Consultation.query
        status = args.get('status')
        if status:
            query = query.filter_by(status=status)
        query = query.order_by(Consultation.created_at.desc(), Consultation.id.desc())

        consultations, pagination = paginate(query, page, limit)
        return {
            'consultations': [c.to_dict() for c in consultations],
            'pagination': pagination
        }, 200

    @staticmethod
    def get_consultation(current_user, consultation_id):
        require_permission(current_user, Permission.CONSULTATION_VIEW)
        return _get_consultation(consultation_id).to_dict(), 200

    @staticmethod
    def update_status(current_user, consultation_id, data):
        require_permission(current_user, Permission.CONSULTATION_APPROVE)
        data = json_object(data)
        consultation = _get_consultation(consultation_id)
        previous = consultation.status

        lifecycle.apply_status_change(
            consultation,
            data.get('status'),
            actor_id=current_user.id,
            notes=data.get('notes'),
        )
        db.session.commit()
        current_app.logger.info(
            f"Consultation {consultation.id} moved {previous} -> {consultation.status} by user {current_user.id}"
        )

        return {
            'message': 'Consultation status updated successfully',
            'consultation': consultation.to_dict()
        }, 200

    @staticmethod
    def update_priority(current_user, consultation_id, data):
        require_permission(current_user, Permission.CONSULTATION_MANAGE)
        priority = json_object(data).get('priority')
        if priority not in PRIORITIES:
            raise ValidationError(f"Invalid priority. Choose one of: {', '.join(PRIORITIES)}", fields=['priority'])

        consultation = _get_consultation(consultation_id)
        consultation.priority = priority
        db.session.commit()

        return {
            'message': 'Consultation priority updated successfully',
            'consultation': consultation.to_dict()
        }, 200

    @staticmethod
    def add_follow_up(current_user, consultation_id, data):
        require_permission(current_user, Permission.FOLLOWUP_CREATE)
        data = json_object(data)
        consultation = _get_consultation(consultation_id)

        lifecycle.append_follow_up(
            consultation,
            message=_clean(data.get('message')),
            follow_up_type=data.get('type'),
            actor_id=current_user.id,
            scheduled_date=data.get('scheduledDate'),
        )
        db.session.commit()
        current_app.logger.info(f"Follow-up added to consultation {consultation.id} by user {current_user.id}")

        return {
            'message': 'Follow-up added successfully',
            'consultation': consultation.to_dict()
        }, 200

    @staticmethod
    def update_follow_up(current_user, consultation_id, follow_up_id, data):
        require_permission(current_user, Permission.FOLLOWUP_MANAGE)
        consultation = _get_consultation(consultation_id)

        lifecycle.toggle_follow_up(consultation, follow_up_id, json_object(data).get('completed'))
        db.session.commit()

        return {
            'message': 'Follow-up updated successfully',
            'consultation': consultation.to_dict()
        }, 200

    @staticmethod
    def get_statistics(current_user):
        require_permission(current_user, Permission.CONSULTATION_VIEW)

        rows = (
            db.session.query(Consultation.status, func.count(Consultation.id))
            .group_by(Consultation.status)
            .all()
        )
        total = Consultation.query.count()
        this_month = Consultation.query.filter(Consultation.created_at >= start_of_month()).count()

        return {
            'total': total,
            'thisMonth': this_month,
            'byStatus': {status: count for status, count in rows}
        }, 200
