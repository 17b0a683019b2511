from flask import Blueprint, jsonify, current_app
from sqlalchemy import text
from extensions import db
from utils.time_utils import utc_now

health_bp = Blueprint("health", __name__)


def database_state():
    try:
        db.session.execute(text("SELECT 1"))
        return "Connected"
    except Exception as e:
        db.session.rollback()
        current_app.logger.warning(f"Database health probe failed: {str(e)}")
        return "Disconnected"


@health_bp.route("/health", methods=["GET"])
def health():
    """
    Process and database status
    ---
    tags: [Health]
    responses:
      200:
        description: "{status, timestamp, environment, database}"
    """
    return jsonify({
        "status": "OK",
        "timestamp": utc_now().isoformat() + "Z",
        "environment": current_app.config.get("ENVIRONMENT", "development"),
        "database": database_state()
    }), 200
