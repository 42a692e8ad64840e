from flask import Blueprint

from courier.extensions import get_services
from courier.middleware import session_required
from courier.responses import success_response
from courier.routes.params import json_body, limit_offset

user_bp = Blueprint('users', __name__)


@user_bp.route('', methods=['POST'])
def register():
    """
    Register a new user
    ---
    tags:
      - Users
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
              minLength: 6
    responses:
      201:
        description: User registered
      409:
        description: Email already exists
      422:
        description: Invalid email or password
    """
    user = get_services().users.create_user(json_body())
    return success_response('Successfully created user', user.to_dict(), 201)


@user_bp.route('', methods=['GET'])
@session_required
def list_users():
    """
    List users
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - name: limit
        in: query
        type: integer
        default: 10
      - name: offset
        in: query
        type: integer
        default: 0
    responses:
      200:
        description: List of users
    """
    limit, offset = limit_offset()
    users = get_services().users.list_users(limit, offset)
    return success_response('Successfully fetched users', [u.to_dict() for u in users])


@user_bp.route('/<int:user_id>', methods=['GET'])
@session_required
def get_user(user_id):
    """
    Get a user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - name: user_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: User profile
      404:
        description: User not found
    """
    user = get_services().users.get_user(user_id)
    return success_response('Successfully fetched user', user.to_dict())


@user_bp.route('/email/<email>', methods=['GET'])
@session_required
def get_user_by_email(email):
    """
    Get a user by email
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - name: email
        in: path
        type: string
        required: true
    responses:
      200:
        description: User profile
      404:
        description: User not found
    """
    user = get_services().users.get_user_by_email(email)
    return success_response('Successfully fetched user', user.to_dict())


@user_bp.route('/<int:user_id>', methods=['PUT'])
@session_required
def update_user_email(user_id):
    """
    Change a user's email (current password required)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - name: user_id
        in: path
        type: integer
        required: true
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
        description: Email updated
      401:
        description: Password verification failed
      409:
        description: Email already exists
    """
    user = get_services().users.update_user_email(user_id, json_body())
    return success_response('Successfully updated user', user.to_dict())


@user_bp.route('/<int:user_id>', methods=['DELETE'])
@session_required
def delete_user(user_id):
    """
    Delete a user and end their sessions
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - name: user_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: User deleted
      404:
        description: User not found
    """
    get_services().users.delete_user(user_id)
    return success_response('Successfully deleted user')
