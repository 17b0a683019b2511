from extensions import db
from utils.time_utils import utc_now


class SiteData(db.Model):
    """
    One row per site section (``hero``, ``footer``, ``portfolio``...). ``data`` holds the
    whole section as a JSON value and is always rewritten as a unit.

    ``version`` is SQLAlchemy's version counter: an UPDATE issued from a stale read
    matches no row and raises ``StaleDataError`` instead of overwriting a newer write.
    """
    __tablename__ = 'site_data'
    id = db.Column(db.Integer, primary_key=True)
    section = db.Column(db.String(100), unique=True, nullable=False)
    data = db.Column(db.JSON, nullable=False)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    __mapper_args__ = {'version_id_col': version}
