from flask import Blueprint, request, jsonify, current_app
from extensions import db
from services.section_items_service import portfolio_items, gallery_items
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body


def create_section_items_blueprint(name, service):
    """Blueprint exposing list/get/create/update/delete over one item-array section."""
    bp = Blueprint(name, __name__)

    @bp.route("", methods=["GET"])
    def list_items():
        try:
            result, status = service.list_items()
            return jsonify(result), status
        except ApiError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            current_app.logger.error(f"Error in GET /{name}: {str(e)}", exc_info=True)
            return jsonify(internal_error_body(e)), 500

    @bp.route("/<string:item_id>", methods=["GET"])
    def get_item(item_id):
        try:
            result, status = service.get_item(item_id)
            return jsonify(result), status
        except ApiError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            current_app.logger.error(f"Error in GET /{name}/{item_id}: {str(e)}", exc_info=True)
            return jsonify(internal_error_body(e)), 500

    @bp.route("", methods=["POST"])
    @token_required
    def add_item(current_user):
        try:
            data = request.get_json(silent=True)
            result, status = service.add_item(current_user, data)
            return jsonify(result), status
        except ApiError as e:
            db.session.rollback()
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error in POST /{name}: {str(e)}", exc_info=True)
            return jsonify(internal_error_body(e)), 500

    @bp.route("/<string:item_id>", methods=["PUT"])
    @token_required
    def update_item(current_user, item_id):
        try:
            data = request.get_json(silent=True)
            result, status = service.update_item(current_user, item_id, data)
            return jsonify(result), status
        except ApiError as e:
            db.session.rollback()
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error in PUT /{name}/{item_id}: {str(e)}", exc_info=True)
            return jsonify(internal_error_body(e)), 500

    @bp.route("/<string:item_id>", methods=["DELETE"])
    @token_required
    def delete_item(current_user, item_id):
        try:
            result, status = service.delete_item(current_user, item_id)
            return jsonify(result), status
        except ApiError as e:
            db.session.rollback()
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error in DELETE /{name}/{item_id}: {str(e)}", exc_info=True)
            return jsonify(internal_error_body(e)), 500

    return bp


portfolio_bp = create_section_items_blueprint("portfolio", portfolio_items)
gallery_bp = create_section_items_blueprint("gallery", gallery_items)
