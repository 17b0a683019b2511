from flask import Blueprint, request, jsonify, current_app
from extensions import db
from services.blog_service import BlogService
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body

blog_bp = Blueprint("blog", __name__)


@blog_bp.route("", methods=["GET"])
def list_posts():
    """
    List blog posts (public, every status)
    ---
    tags: [Blog]
    parameters:
      - {name: status, in: query, schema: {type: string}}
      - {name: category, in: query, schema: {type: string}}
      - {name: page, in: query, schema: {type: integer, default: 1}}
      - {name: limit, in: query, schema: {type: integer, default: 10}}
    responses:
      200:
        description: "{posts, pagination: {current, total, count}}"
    """
    try:
        result, status = BlogService.list_posts(request.args)
        return jsonify(result), status
    except ApiError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error in GET /blog: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("/<int:post_id>", methods=["GET"])
def get_post(post_id):
    try:
        result, status = BlogService.get_post(post_id)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in GET /blog/{post_id}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("", methods=["POST"])
@token_required
def create_post(current_user):
    try:
        data = request.get_json(silent=True)
        result, status = BlogService.create_post(current_user, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in POST /blog: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("/<int:post_id>", methods=["PUT"])
@token_required
def update_post(current_user, post_id):
    try:
        data = request.get_json(silent=True)
        result, status = BlogService.update_post(current_user, post_id, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in PUT /blog/{post_id}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("/<int:post_id>", methods=["DELETE"])
@token_required
def delete_post(current_user, post_id):
    try:
        result, status = BlogService.delete_post(current_user, post_id)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in DELETE /blog/{post_id}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("/meta/categories", methods=["GET"])
def get_categories():
    try:
        result, status = BlogService.get_categories()
        return jsonify(result), status
    except Exception as e:
        current_app.logger.error(f"Error in GET /blog/meta/categories: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@blog_bp.route("/meta/tags", methods=["GET"])
def get_tags():
    try:
        result, status = BlogService.get_tags()
        return jsonify(result), status
    except Exception as e:
        current_app.logger.error(f"Error in GET /blog/meta/tags: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500
