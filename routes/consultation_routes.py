from flask import Blueprint, request, jsonify, current_app
from extensions import db
from services.consultation_service import ConsultationService
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body

consultation_bp = Blueprint("consultation", __name__)


@consultation_bp.route("", methods=["POST"])
def create_consultation():
    """
    Submit a consultation request (public)
    ---
    tags: [Consultations]
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            required: [clientName, clientEmail, clientPhone, serviceType, preferredDate, preferredTime, message]
            properties:
              clientName: {type: string}
              clientEmail: {type: string}
              clientPhone: {type: string}
              company: {type: string}
              serviceType: {type: string}
              preferredDate: {type: string}
              preferredTime: {type: string}
              message: {type: string}
    responses:
      201:
        description: Consultation created with status pending
      400:
        description: Missing or invalid fields
    """
    try:
        data = request.get_json(silent=True)
        result, status = ConsultationService.create_consultation(data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in POST /consultations: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("", methods=["GET"])
@token_required
def list_consultations(current_user):
    """
    List consultations
    ---
    tags: [Consultations]
    security:
      - Bearer: []
    parameters:
      - {name: status, in: query, schema: {type: string}}
      - {name: page, in: query, schema: {type: integer, default: 1}}
      - {name: limit, in: query, schema: {type: integer, default: 20}}
    responses:
      200:
        description: "{consultations, pagination: {current, total, count}}"
      403:
        description: Missing consultation:view
    """
    try:
        result, status = ConsultationService.list_consultations(current_user, request.args)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in GET /consultations: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/stats", methods=["GET"])
@token_required
def get_statistics(current_user):
    try:
        result, status = ConsultationService.get_statistics(current_user)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in GET /consultations/stats: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/<int:consultation_id>", methods=["GET"])
@token_required
def get_consultation(current_user, consultation_id):
    try:
        result, status = ConsultationService.get_consultation(current_user, consultation_id)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in GET /consultations/{consultation_id}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/<int:consultation_id>/status", methods=["PUT"])
@token_required
def update_status(current_user, consultation_id):
    """
    Move a consultation through its lifecycle
    ---
    tags: [Consultations]
    security:
      - Bearer: []
    parameters:
      - {name: consultation_id, in: path, required: true, schema: {type: integer}}
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            required: [status]
            properties:
              status: {type: string, enum: [approved, rejected, completed]}
              notes: {type: string}
    responses:
      200:
        description: Updated consultation
      403:
        description: Missing consultation:approve
      404:
        description: Unknown consultation
      409:
        description: Transition not allowed from the current status
    """
    try:
        data = request.get_json(silent=True)
        result, status = ConsultationService.update_status(current_user, consultation_id, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in PUT /consultations/{consultation_id}/status: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/<int:consultation_id>/priority", methods=["PUT"])
@token_required
def update_priority(current_user, consultation_id):
    try:
        data = request.get_json(silent=True)
        result, status = ConsultationService.update_priority(current_user, consultation_id, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in PUT /consultations/{consultation_id}/priority: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/<int:consultation_id>/followups", methods=["POST"])
@token_required
def add_follow_up(current_user, consultation_id):
    try:
        data = request.get_json(silent=True)
        result, status = ConsultationService.add_follow_up(current_user, consultation_id, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in POST /consultations/{consultation_id}/followups: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@consultation_bp.route("/<int:consultation_id>/followups/<int:follow_up_id>", methods=["PUT"])
@token_required
def update_follow_up(current_user, consultation_id, follow_up_id):
    try:
        data = request.get_json(silent=True)
        result, status = ConsultationService.update_follow_up(current_user, consultation_id, follow_up_id, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(
            f"Error in PUT /consultations/{consultation_id}/followups/{follow_up_id}: {str(e)}", exc_info=True
        )
        return jsonify(internal_error_body(e)), 500
