from flask import Blueprint, request

from courier.extensions import get_services
from courier.middleware import current_user_id, session_required
from courier.responses import success_response
from courier.routes.params import json_body, page_and_length

order_bp = Blueprint('orders', __name__)


@order_bp.route('', methods=['POST'])
@session_required
def create_order():
    """
    Create a delivery order
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - store_id
            - recipient_name
            - recipient_phone
            - recipient_address
            - recipient_city
            - recipient_zone
            - delivery_type
            - item_type
            - item_quantity
            - item_weight
            - order_amount
          properties:
            store_id:
              type: integer
            merchant_order_id:
              type: string
            recipient_name:
              type: string
            recipient_phone:
              type: string
              example: "01712345678"
            recipient_address:
              type: string
            recipient_city:
              type: integer
            recipient_zone:
              type: integer
            recipient_area:
              type: string
            delivery_type:
              type: integer
            item_type:
              type: integer
            item_quantity:
              type: integer
            item_weight:
              type: number
            order_amount:
              type: number
            item_description:
              type: string
            special_instruction:
              type: string
            promo_discount:
              type: number
            discount:
              type: number
    responses:
      201:
        description: Order created; returns consignment ID, status and delivery fee
      422:
        description: Validation failed or unknown store
    """
    order = get_services().orders.create_order(json_body(), current_user_id())
    return success_response('Order Created Successfully', order.to_created_dict(), 201)


@order_bp.route('', methods=['GET'])
@session_required
def list_orders():
    """
    List the caller's orders
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 10
        maximum: 100
      - name: order_status
        in: query
        type: string
        enum: [pending, cancelled]
    responses:
      200:
        description: One page of orders with pagination info
    """
    page, page_length = page_and_length()
    orders, pagination = get_services().orders.list_orders(
        current_user_id(),
        status=request.args.get('order_status'),
        page=page,
        page_length=page_length,
    )
    return success_response('Successfully fetched orders', {
        'orders': [o.to_dict() for o in orders],
        'pagination': pagination,
    })


@order_bp.route('/<consignment_id>', methods=['GET'])
@session_required
def get_order(consignment_id):
    """
    Get an order by consignment ID
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: consignment_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Order details
      401:
        description: Order belongs to another user
      404:
        description: Order not found
    """
    order = get_services().orders.get_order(consignment_id, current_user_id())
    return success_response('Order successfully fetched', order.to_dict())


@order_bp.route('/<consignment_id>', methods=['PUT'])
@session_required
def update_order(consignment_id):
    """
    Update an order (only supplied fields change)
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: consignment_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            merchant_order_id:
              type: string
            recipient_name:
              type: string
            recipient_phone:
              type: string
            recipient_address:
              type: string
            item_weight:
              type: number
            order_amount:
              type: number
            special_instruction:
              type: string
    responses:
      200:
        description: Order updated
      401:
        description: Order belongs to another user
      404:
        description: Order not found
    """
    payload = json_body()
    if isinstance(payload, dict):
        payload = dict(payload, consignment_id=consignment_id)
    order = get_services().orders.update_order(payload, current_user_id())
    return success_response('Successfully updated order', order.to_dict())


@order_bp.route('/<consignment_id>/cancel', methods=['PATCH'])
@session_required
def cancel_order(consignment_id):
    """
    Cancel an order
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: consignment_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Order cancelled
      404:
        description: Order not found
    """
    get_services().orders.cancel_order(consignment_id, current_user_id())
    return success_response('Order Cancelled Successfully')


@order_bp.route('/<consignment_id>', methods=['DELETE'])
@session_required
def delete_order(consignment_id):
    """
    Delete an order
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: consignment_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Order deleted
      404:
        description: Order not found
    """
    get_services().orders.delete_order(consignment_id, current_user_id())
    return success_response('Successfully deleted order')
