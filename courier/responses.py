from flask import jsonify


def success_response(message, data=None, code=200):
    body = {"message": message, "type": "success", "code": code}
    if data is not None:
        body["data"] = data
    return jsonify(body), code


def error_response(message, code, errors=None):
    body = {"message": message, "type": "error", "code": code}
    if errors:
        body["errors"] = errors
    return jsonify(body), code
