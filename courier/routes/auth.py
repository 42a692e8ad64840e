from flask import Blueprint, g

from courier.extensions import get_services
from courier.middleware import session_required
from courier.responses import success_response
from courier.routes.params import json_body
from courier.validators import LOGIN_RULES, validate

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and issue a session
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful, returns access/refresh tokens
      401:
        description: Invalid credentials
      422:
        description: Missing email or password
    """
    data = validate(json_body(), LOGIN_RULES)
    result = get_services().auth.login(data['email'], data['password'])
    return success_response('Successfully logged in', result)


@auth_bp.route('/logout', methods=['POST'])
@session_required
def logout():
    """
    Logout (invalidate the current session)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logout successful
      401:
        description: Invalid access token
    """
    get_services().auth.logout(g.access_token)
    return success_response('Successfully logged out')


@auth_bp.route('/session', methods=['GET'])
@session_required
def current_session():
    """
    Current session metadata
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Session id, owner and expiry
      403:
        description: Session missing or expired
    """
    view = get_services().sessions.validate_session(g.access_token)
    return success_response('Session is valid', view)
