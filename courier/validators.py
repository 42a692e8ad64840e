"""
Request payload validation.

Each rule set is a list of (field, kind, required, constraints). `validate`
returns the cleaned values for the fields that were supplied and raises
ValidationFailed with a field -> [messages] map otherwise. A zero, empty
string or null counts as "not supplied", so required fields reject them and
optional fields skip them.
"""

import re
from decimal import Decimal

from courier.errors import ValidationFailed

PHONE_REGEX = re.compile(r"^01[3-9][0-9]{8}$")
EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")

PHONE_MESSAGE = (
    "The phone number format is invalid. "
    "Must be a valid Bangladeshi phone number (01XXXXXXXXX)."
)

# Column bounds: BIGINT ids, INTEGER quantity, NUMERIC(10,2) money, NUMERIC(8,2) weight
MAX_ID = 2 ** 63 - 1
MAX_QUANTITY = 2 ** 31 - 1
MAX_AMOUNT = Decimal("99999999.99")
MAX_WEIGHT = Decimal("999999.99")
MONEY = {"max": MAX_AMOUNT, "places": 2}

DISPLAY_NAMES = {
    "store_id": "store",
    "merchant_order_id": "merchant order ID",
    "recipient_name": "recipient name",
    "recipient_phone": "recipient phone",
    "recipient_address": "recipient address",
    "recipient_city": "recipient city",
    "recipient_zone": "recipient zone",
    "recipient_area": "recipient area",
    "delivery_type": "delivery type",
    "item_type": "item type",
    "item_quantity": "item quantity",
    "item_weight": "item weight",
    "order_amount": "order amount",
    "item_description": "item description",
    "special_instruction": "special instruction",
    "promo_discount": "promo discount",
    "consignment_id": "consignment ID",
    "base_delivery_fee": "base delivery fee",
    "contact_phone": "contact phone",
    "city_id": "city",
}

ORDER_CREATE_RULES = [
    ("store_id", "int", True, {"min": 1, "max": MAX_ID}),
    ("merchant_order_id", "str", False, {"max": 100}),
    ("recipient_name", "str", True, {"min": 1, "max": 255}),
    ("recipient_phone", "phone", True, {}),
    ("recipient_address", "str", True, {"min": 1}),
    ("recipient_city", "int", True, {"min": 1, "max": MAX_ID}),
    ("recipient_zone", "int", True, {"min": 1, "max": MAX_ID}),
    ("recipient_area", "str", False, {}),
    ("delivery_type", "int", True, {"min": 1, "max": MAX_ID}),
    ("item_type", "int", True, {"min": 1, "max": MAX_ID}),
    ("item_quantity", "int", True, {"min": 1, "max": MAX_QUANTITY}),
    ("item_weight", "number", True, {"gt": 0, "max": MAX_WEIGHT, "places": 2}),
    ("order_amount", "number", True, dict(MONEY, gt=0)),
    ("item_description", "str", False, {}),
    ("special_instruction", "str", False, {}),
    ("promo_discount", "number", False, dict(MONEY, gte=0)),
    ("discount", "number", False, dict(MONEY, gte=0)),
]

ORDER_UPDATE_RULES = [
    ("consignment_id", "str", True, {}),
    ("merchant_order_id", "str", False, {"max": 100}),
    ("recipient_name", "str", False, {"min": 1, "max": 255}),
    ("recipient_phone", "phone", False, {}),
    ("recipient_address", "str", False, {"min": 1}),
    ("item_weight", "number", False, {"gt": 0, "max": MAX_WEIGHT, "places": 2}),
    ("order_amount", "number", False, dict(MONEY, gt=0)),
    ("special_instruction", "str", False, {}),
]

LOGIN_RULES = [
    ("email", "str", True, {}),
    ("password", "str", True, {}),
]

USER_CREATE_RULES = [
    ("email", "email", True, {"max": 255}),
    ("password", "str", True, {"min": 6}),
]

USER_UPDATE_RULES = [
    ("id", "int", True, {"min": 1, "max": MAX_ID}),
    ("email", "email", True, {"max": 255}),
    ("password", "str", True, {"min": 6}),
]

CITY_RULES = [
    ("name", "str", True, {"max": 100}),
    ("base_delivery_fee", "number", False, dict(MONEY, gte=0)),
]

STORE_RULES = [
    ("name", "str", True, {"min": 1, "max": 255}),
    ("contact_phone", "phone", True, {}),
    ("address", "str", False, {}),
]

ZONE_CREATE_RULES = [
    ("city_id", "int", True, {"min": 1, "max": MAX_ID}),
    ("name", "str", True, {"max": 100}),
]

NAME_RULES = [
    ("name", "str", True, {"max": 50}),
]


def display_name(field):
    return DISPLAY_NAMES.get(field, field.replace("_", " "))


def _is_blank(value):
    if value is None or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def _coerce(kind, value):
    """Returns the cleaned value, or None if the value has the wrong type."""
    if isinstance(value, bool):
        return None
    if kind == "int":
        return value if isinstance(value, int) else None
    if kind == "number":
        if not isinstance(value, (int, float)):
            return None
        number = Decimal(str(value))
        return number if number.is_finite() else None
    if not isinstance(value, str):
        return None
    value = value.strip()
    if kind == "phone" and not PHONE_REGEX.match(value):
        return None
    if kind == "email" and not EMAIL_REGEX.match(value):
        return None
    return value


def _type_message(kind, name):
    if kind == "phone":
        return PHONE_MESSAGE
    if kind == "email":
        return f"The {name} must be a valid email address."
    return f"The {name} field is invalid."


def _constraint_messages(kind, name, value, constraints):
    messages = []
    measured = len(value) if isinstance(value, str) else value
    if "min" in constraints and measured < constraints["min"]:
        unit = " characters" if isinstance(value, str) else ""
        messages.append(f"The {name} must be at least {constraints['min']}{unit}.")
    if "max" in constraints and measured > constraints["max"]:
        unit = " characters" if isinstance(value, str) else ""
        messages.append(f"The {name} may not be greater than {constraints['max']}{unit}.")
    if "gt" in constraints and measured <= constraints["gt"]:
        messages.append(f"The {name} must be greater than {constraints['gt']}.")
    if "gte" in constraints and measured < constraints["gte"]:
        messages.append(f"The {name} must be greater than or equal to {constraints['gte']}.")
    if "places" in constraints and value.as_tuple().exponent < -constraints["places"]:
        messages.append(f"The {name} may not have more than {constraints['places']} decimal places.")
    return messages


def validate(payload, rules):
    if not isinstance(payload, dict):
        raise ValidationFailed({"body": ["The request body must be a JSON object."]},
                               message="Unable to bind request")

    errors = {}
    cleaned = {}
    for field, kind, required, constraints in rules:
        name = display_name(field)
        value = payload.get(field)

        if _is_blank(value):
            if required:
                errors.setdefault(field, []).append(f"The {name} field is required.")
            continue

        coerced = _coerce(kind, value)
        if coerced is None:
            errors.setdefault(field, []).append(_type_message(kind, name))
            continue
        if required and coerced == "":
            errors.setdefault(field, []).append(f"The {name} field is required.")
            continue

        messages = _constraint_messages(kind, name, coerced, constraints)
        if messages:
            errors.setdefault(field, []).extend(messages)
            continue
        cleaned[field] = coerced

    if errors:
        raise ValidationFailed(errors)
    return cleaned
