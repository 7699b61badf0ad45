from flask import jsonify
from werkzeug.exceptions import HTTPException
import logging
from app.libs.errors import APIError, ConfigurationError

logger = logging.getLogger(__name__)


def handle_error(e):
    if isinstance(e, ConfigurationError):
        logger.error(f"Configuration Error: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    elif isinstance(e, APIError):
        logger.error(f"API Error: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    elif isinstance(e, HTTPException):
        logger.error(f"HTTP Error: {e.description}")
        body = {"message": e.description}
        # flask-smorest attaches validation messages to the exception
        messages = getattr(e, "data", {}).get("messages")
        if messages:
            body["errors"] = messages
        return jsonify(body), e.code
    else:
        logger.exception("Unhandled exception")
        return jsonify({"message": "Internal server error"}), 500
