import os
from flask import Blueprint, request, jsonify, current_app, send_from_directory, abort
from services.upload_service import UploadService
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body
from werkzeug.utils import secure_filename

upload_bp = Blueprint("upload", __name__)
uploads_static_bp = Blueprint("uploads_static", __name__)


@upload_bp.route("/single", methods=["POST"])
@token_required
def upload_single(current_user):
    try:
        result, status = UploadService.upload_single(current_user, request.files, request.form)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in POST /upload/single: {str(e)}", exc_info=True)
        return jsonify({"message": "Upload failed"}), 500


@upload_bp.route("/multiple", methods=["POST"])
@token_required
def upload_multiple(current_user):
    try:
        result, status = UploadService.upload_multiple(current_user, request.files, request.form)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in POST /upload/multiple: {str(e)}", exc_info=True)
        return jsonify({"message": "Upload failed"}), 500


@upload_bp.route("/<string:category>", methods=["GET"])
@token_required
def list_files(current_user, category):
    try:
        result, status = UploadService.list_files(category)
        return jsonify(result), status
    except Exception as e:
        current_app.logger.error(f"Error in GET /upload/{category}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@upload_bp.route("/<string:category>/<string:filename>", methods=["DELETE"])
@token_required
def delete_file(current_user, category, filename):
    try:
        result, status = UploadService.delete_file(current_user, category, filename)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in DELETE /upload/{category}/{filename}: {str(e)}", exc_info=True)
        return jsonify({"message": "Failed to delete file"}), 500


@uploads_static_bp.route("/uploads/<string:category>/<string:filename>", methods=["GET"])
def serve_upload(category, filename):
    directory = os.path.join(current_app.config['UPLOAD_FOLDER'], secure_filename(category))
    if not os.path.isdir(directory):
        abort(404)
    return send_from_directory(os.path.abspath(directory), filename)
