import click
from flask import request, jsonify, Blueprint, current_app
from extensions import db
from services.auth_service import AuthService
from utils.auth_utils import token_required
from utils.errors import ApiError, internal_error_body

auth_bp = Blueprint('auth', __name__)


def init_auth_routes(app):
    @app.cli.command('create-admin')
    @click.option('--username', default=None, help='Defaults to BOOTSTRAP_ADMIN_USERNAME.')
    @click.option('--email', default=None, help='Defaults to BOOTSTRAP_ADMIN_EMAIL.')
    @click.option('--password', default=None, help='Defaults to BOOTSTRAP_ADMIN_PASSWORD.')
    def create_admin(username, email, password):
        """Create or restore the bootstrap super admin."""
        user = AuthService.ensure_bootstrap_admin(
            username or app.config['BOOTSTRAP_ADMIN_USERNAME'],
            email or app.config['BOOTSTRAP_ADMIN_EMAIL'],
            password or app.config['BOOTSTRAP_ADMIN_PASSWORD'],
        )
        click.echo(f"Bootstrap admin ready: {user.username} (id={user.id})")


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Exchange username/email and password for a bearer token
    ---
    tags: [Auth]
    requestBody:
      required: true
      content:
        application/json:
          schema:
            type: object
            properties:
              username: {type: string}
              email: {type: string}
              password: {type: string}
    responses:
      200:
        description: "{message, token, user}"
      401:
        description: Invalid credentials
    """
    try:
        data = request.get_json(silent=True)
        result, status = AuthService.login(data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in /login: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@auth_bp.route('/me', methods=['GET'])
@token_required
def get_profile(current_user):
    try:
        result, status = AuthService.get_profile(current_user)
        return jsonify(result), status
    except Exception as e:
        current_app.logger.error(f"Error in /me: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@auth_bp.route('/users', methods=['GET', 'POST'])
@token_required
def manage_users(current_user):
    try:
        if request.method == 'GET':
            result, status = AuthService.list_users(current_user)
        else:
            data = request.get_json(silent=True)
            result, status = AuthService.create_user(current_user, data)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in /users: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500


@auth_bp.route('/users/<int:user_id>', methods=['PUT', 'DELETE'])
@token_required
def manage_user(current_user, user_id):
    try:
        if request.method == 'PUT':
            data = request.get_json(silent=True)
            result, status = AuthService.update_user(current_user, user_id, data)
        else:
            result, status = AuthService.delete_user(current_user, user_id)
        return jsonify(result), status
    except ApiError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in /users/{user_id}: {str(e)}", exc_info=True)
        return jsonify(internal_error_body(e)), 500
