from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from extensions import db
from models.site_data_model import SiteData
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.permissions import Permission, require_permission

DEFAULT_SITE_DATA = {
    'hero': {
        'title': 'World-Class Technology Solutions',
        'subtitle': 'Treyfa-Tech & Integrated Services Ltd',
        'description': 'Empowering businesses in Nigeria and beyond with cutting-edge software '
                       'development, IT consulting, and integrated technology services.'
    },
    'header': {
        'companyName': 'TREYFA-TECH',
        'logo': '',
        'navigation': [
            {'label': 'Home', 'link': '/'},
            {'label': 'About', 'link': '#about'},
            {'label': 'Services', 'link': '#services'},
            {'label': 'Portfolio', 'link': '/portfolio'},
            {'label': 'Contact', 'link': '#contact'}
        ]
    },
    'footer': {
        'companyName': 'TREYFA-TECH',
        'tagline': '& INTEGRATED SERVICES LTD',
        'description': 'Empowering businesses with world-class technology solutions across Nigeria and beyond.',
        'socialLinks': [
            {'platform': 'Facebook', 'url': '#'},
            {'platform': 'Twitter', 'url': '#'},
            {'platform': 'LinkedIn', 'url': '#'},
            {'platform': 'Instagram', 'url': '#'},
            {'platform': 'YouTube', 'url': '#'}
        ],
        'quickLinks': ['Home', 'Services', 'About Us', 'Contact'],
        'services': [
            'Software Development',
            'IT Training & Consultancy',
            'Business Process Outsourcing',
            'Hardware & IoT Solutions',
            'Data Management'
        ],
        'copyright': '© 2025 Treyfa-Tech & Integrated Services Ltd. All rights reserved.'
    },
    'about': {
        'title': 'About Treyfa-Tech',
        'description': 'Treyfa-Tech & Integrated Services Ltd is a leading technology company dedicated to '
                       'providing comprehensive IT solutions that drive business growth and digital '
                       'transformation. Based in Nigeria, we serve clients across Africa and beyond.',
        'mission': 'To empower businesses with innovative technology solutions that enhance productivity, '
                   'drive growth, and create sustainable competitive advantages in the digital economy.',
        'vision': 'To be the leading technology partner for businesses across Africa, driving digital '
                  'transformation and innovation through world-class solutions and exceptional service delivery.'
    },
    'contact': {
        'email': 'info@treyfatech.com',
        'phone': '+2347014786424',
        'address': 'Shop No.5 EPP Plaza, Sangere FUTY Opposite MAU Main Gate, Adamawa State, Nigeria',
        'businessHours': 'Monday - Friday: 8:00 AM - 6:00 PM, Saturday: 9:00 AM - 2:00 PM'
    }
}


def find_section(section):
    return SiteData.query.filter_by(section=section).first()


def write_section(section, data, document=None):
    """
    Replace the whole value stored under ``section``, creating the row if needed.

    ``document`` is the row the caller already read; passing it keeps the version check
    tied to that read. Stale or duplicate writes surface as ``ConflictError``.
    """
    document = document or find_section(section)
    if document is None:
        document = SiteData(section=section, data=data)
        db.session.add(document)
    else:
        document.data = data
    try:
        db.session.commit()
    except (StaleDataError, IntegrityError):
        db.session.rollback()
        current_app.logger.warning(f"Concurrent write detected on site data section '{section}'")
        raise ConflictError("Section was modified by another request, reload and retry")
    return document


class SiteDataService:
    @staticmethod
    def get_all():
        return {document.section: document.data for document in SiteData.query.order_by(SiteData.section).all()}, 200

    @staticmethod
    def get_section(section):
        document = find_section(section)
        if not document:
            raise NotFoundError("Section not found")
        return document.data, 200

    @staticmethod
    def update_section(current_user, section, data):
        require_permission(current_user, Permission.ALL)
        if not isinstance(data, dict) or 'data' not in data or data['data'] is None:
            raise ValidationError("Field 'data' is required", fields=['data'])

        document = write_section(section, data['data'])
        current_app.logger.info(f"Site data section '{section}' updated by user {current_user.id}")

        return {
            'message': 'Site data updated successfully',
            'section': section,
            'data': document.data
        }, 200

    @staticmethod
    def initialize(current_user):
        require_permission(current_user, Permission.ALL)
        for section, data in DEFAULT_SITE_DATA.items():
            write_section(section, data)
        current_app.logger.info(f"Default site data initialized by user {current_user.id}")

        return {
            'message': 'Site data initialized successfully',
            'sections': list(DEFAULT_SITE_DATA)
        }, 200
