from flask import request

from courier.errors import CourierError


class InvalidQuery(CourierError):
    status_code = 400
    message = "Invalid query parameters"


def json_body():
    return request.get_json(silent=True)


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidQuery(f"invalid {name} parameter") from None


def limit_offset():
    """`limit` (default 10, > 0) and `offset` (default 0, >= 0)."""
    limit = _int_arg("limit", 10)
    if limit <= 0:
        raise InvalidQuery("invalid limit parameter")
    offset = _int_arg("offset", 0)
    if offset < 0:
        raise InvalidQuery("invalid offset parameter")
    return limit, offset


def page_and_length():
    """`page` and `limit` for the order listing; the service applies defaults."""
    return _int_arg("page", 0), _int_arg("limit", 0)
