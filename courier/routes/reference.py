"""
CRUD routes for name-keyed reference data: cities, stores, item types and
delivery types. They all share one shape, so the blueprints come from a
single factory; cities add a lookup by name.

The factory's views get their flasgger YAML from the templates below, filled
in with the entity's tag and request body properties.
"""

from flask import Blueprint

from courier.extensions import get_services
from courier.middleware import session_required
from courier.responses import success_response
from courier.routes.params import json_body, limit_offset

SECURITY = """security:
  - Bearer: []"""

ID_PARAM = """  - name: id
    in: path
    type: integer
    required: true"""

CREATE_DOC = """Create a {singular}
---
tags:
  - {tag}
{security}
parameters:
  - in: body
    name: body
    required: true
    schema:
      type: object
      required:
        - name
      properties:
{properties}
responses:
  201:
    description: {Singular} created
  409:
    description: Name already exists
  422:
    description: Validation failed
"""

LIST_DOC = """List {plural}
---
tags:
  - {tag}
{security}
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
    description: One page of {plural}
  400:
    description: Invalid limit or offset
"""

GET_DOC = """Get a {singular}
---
tags:
  - {tag}
{security}
parameters:
{id_param}
responses:
  200:
    description: The {singular}
  404:
    description: {Singular} not found
"""

UPDATE_DOC = """Update a {singular}
---
tags:
  - {tag}
{security}
parameters:
{id_param}
  - in: body
    name: body
    required: true
    schema:
      type: object
      properties:
{properties}
responses:
  200:
    description: {Singular} updated
  404:
    description: {Singular} not found
  409:
    description: Name already exists
  422:
    description: Validation failed
"""

DELETE_DOC = """Delete a {singular}
---
tags:
  - {tag}
{security}
parameters:
{id_param}
responses:
  200:
    description: {Singular} deleted
  404:
    description: {Singular} not found
"""

NAME_PROPERTY = """        name:
          type: string
          maxLength: {max_length}"""

CITY_PROPERTIES = NAME_PROPERTY.format(max_length=100) + """
        base_delivery_fee:
          type: number
          default: 100.00"""

STORE_PROPERTIES = NAME_PROPERTY.format(max_length=255) + """
        contact_phone:
          type: string
          example: "01712345678"
        address:
          type: string"""

TYPE_PROPERTIES = NAME_PROPERTY.format(max_length=50)


def crud_blueprint(name, service_name, singular, plural, properties):
    bp = Blueprint(name, __name__)
    fields = {
        "singular": singular,
        "Singular": singular.capitalize(),
        "plural": plural,
        "tag": plural.title(),
        "security": SECURITY,
        "id_param": ID_PARAM,
        "properties": properties,
    }

    def service():
        return getattr(get_services(), service_name)

    @bp.route('', methods=['POST'])
    @session_required
    def create():
        instance = service().create(json_body())
        return success_response(f'Successfully created {singular}', instance.to_dict(), 201)

    @bp.route('', methods=['GET'])
    @session_required
    def list_all():
        limit, offset = limit_offset()
        items = service().list(limit, offset)
        return success_response(f'Successfully fetched {plural}', [i.to_dict() for i in items])

    @bp.route('/<int:id>', methods=['GET'])
    @session_required
    def get(id):
        instance = service().get(id)
        return success_response(f'Successfully fetched {singular}', instance.to_dict())

    @bp.route('/<int:id>', methods=['PUT'])
    @session_required
    def update(id):
        instance = service().update(id, json_body())
        return success_response(f'Successfully updated {singular}', instance.to_dict())

    @bp.route('/<int:id>', methods=['DELETE'])
    @session_required
    def delete(id):
        service().delete(id)
        return success_response(f'Successfully deleted {singular}')

    for view, template in ((create, CREATE_DOC), (list_all, LIST_DOC), (get, GET_DOC),
                           (update, UPDATE_DOC), (delete, DELETE_DOC)):
        view.__doc__ = template.format(**fields)

    return bp


cities_bp = crud_blueprint('cities', 'cities', 'city', 'cities', CITY_PROPERTIES)
stores_bp = crud_blueprint('stores', 'stores', 'store', 'stores', STORE_PROPERTIES)
item_types_bp = crud_blueprint('item_types', 'item_types', 'item type', 'item types',
                               TYPE_PROPERTIES)
delivery_types_bp = crud_blueprint('delivery_types', 'delivery_types', 'delivery type',
                                   'delivery types', TYPE_PROPERTIES)


@cities_bp.route('/name/<name>', methods=['GET'])
@session_required
def get_city_by_name(name):
    """
    Get a city by name
    ---
    tags:
      - Cities
    security:
      - Bearer: []
    parameters:
      - name: name
        in: path
        type: string
        required: true
    responses:
      200:
        description: City with its base delivery fee
      404:
        description: City not found
    """
    city = get_services().cities.get_by_name(name)
    return success_response('Successfully fetched city', city.to_dict())
