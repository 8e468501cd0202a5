"""
Uniform response envelope.

success -> {"error": false, "status": <code>, "body": <payload>}
failure -> {"error": true, "statusCode": <code>, "body": {"message": ..., "code"?: ...}}
"""
from __future__ import annotations

from flask import jsonify

from utils.result import Err, Ok


def success(body=None, status: int = 200):
    if status == 204:
        return "", 204
    return jsonify({"error": False, "status": status, "body": body if body is not None else "Ok"}), status


def error(message: str = "Internal Error", status: int = 500, code: str | None = None, details=None):
    body = {"message": message}
    if code:
        body["code"] = code
    if details:
        body["details"] = details
    return jsonify({"error": True, "statusCode": status, "body": body}), status


def from_err(err: Err):
    return error(err.message, err.status, code=err.code)


def from_result(result):
    """Render an Ok/Err returned by a workflow."""
    if isinstance(result, Ok):
        return success(result.value, result.status)
    return from_err(result)
