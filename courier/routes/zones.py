from flask import Blueprint

from courier.extensions import get_services
from courier.middleware import session_required
from courier.responses import success_response
from courier.routes.params import json_body, limit_offset

zone_bp = Blueprint('zones', __name__)


@zone_bp.route('', methods=['POST'])
@session_required
def create_zone():
    """
    Create a zone inside a city
    ---
    tags:
      - Zones
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - city_id
            - name
          properties:
            city_id:
              type: integer
            name:
              type: string
              maxLength: 100
    responses:
      201:
        description: Zone created
      409:
        description: Zone name already used in this city
      422:
        description: City does not exist
    """
    zone = get_services().zones.create(json_body())
    return success_response('Successfully created zone', zone.to_dict(), 201)


@zone_bp.route('', methods=['GET'])
@session_required
def list_zones():
    """
    List zones
    ---
    tags:
      - Zones
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
        description: One page of zones
    """
    limit, offset = limit_offset()
    zones = get_services().zones.list(limit, offset)
    return success_response('Successfully fetched zones', [z.to_dict() for z in zones])


@zone_bp.route('/city/<int:city_id>', methods=['GET'])
@session_required
def list_zones_by_city(city_id):
    """
    List zones of a city
    ---
    tags:
      - Zones
    security:
      - Bearer: []
    parameters:
      - name: city_id
        in: path
        type: integer
        required: true
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
        description: Zones of the city
      404:
        description: City not found
    """
    limit, offset = limit_offset()
    zones = get_services().zones.list_by_city(city_id, limit, offset)
    return success_response('Successfully fetched zones', [z.to_dict() for z in zones])


@zone_bp.route('/<int:zone_id>', methods=['GET'])
@session_required
def get_zone(zone_id):
    """
    Get a zone
    ---
    tags:
      - Zones
    security:
      - Bearer: []
    parameters:
      - name: zone_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: The zone
      404:
        description: Zone not found
    """
    zone = get_services().zones.get(zone_id)
    return success_response('Successfully fetched zone', zone.to_dict())


@zone_bp.route('/<int:zone_id>', methods=['PUT'])
@session_required
def update_zone(zone_id):
    """
    Rename a zone
    ---
    tags:
      - Zones
    security:
      - Bearer: []
    parameters:
      - name: zone_id
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
              maxLength: 100
    responses:
      200:
        description: Zone updated
      404:
        description: Zone not found
      409:
        description: Zone name already used in this city
    """
    zone = get_services().zones.update(zone_id, json_body())
    return success_response('Successfully updated zone', zone.to_dict())


@zone_bp.route('/<int:zone_id>', methods=['DELETE'])
@session_required
def delete_zone(zone_id):
    """
    Delete a zone
    ---
    tags:
      - Zones
    security:
      - Bearer: []
    parameters:
      - name: zone_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Zone deleted
      404:
        description: Zone not found
    """
    get_services().zones.delete(zone_id)
    return success_response('Successfully deleted zone')
