from flask import Blueprint, request, jsonify, current_app
from extensions import db
from services.site_data_service import SiteDataService
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body

site_data_bp = Blueprint("site_data", __name__)


@site_data_bp.route("", methods=["GET"])
def get_all_site_data():
    try:
        result, status = SiteDataService.get_all()
        return jsonify(result), status
    except Exception as e:
        current_app.logger.error(f"Error in GET /site-data: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@site_data_bp.route("/<string:section>", methods=["GET"])
def get_section(section):
    try:
        result, status = SiteDataService.get_section(section)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in GET /site-data/{section}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@site_data_bp.route("/<string:section>", methods=["PUT"])
@token_required
def update_section(current_user, section):
    """
    Replace one site data section (upsert)
    ---
    tags: [Site data]
    security:
      - Bearer: []
    parameters:
      - {name: section, in: path, required: true, schema: {type: string}}
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            required: [data]
            properties:
              data: {description: Any JSON value}
    responses:
      200:
        description: "{message, section, data}"
      403:
        description: Only super admins may edit site data
      409:
        description: Section changed concurrently
    """
    try:
        data = request.get_json(silent=True)
        result, status = SiteDataService.update_section(current_user, section, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in PUT /site-data/{section}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@site_data_bp.route("/initialize", methods=["POST"])
@token_required
def initialize(current_user):
    try:
        result, status = SiteDataService.initialize(current_user)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in POST /site-data/initialize: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500
