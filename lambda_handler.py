"""
AWS Lambda handler for the Loan Sizer API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import binascii
import json
import logging
import os

from loan_engine import LoanSizer, default_store
from loan_engine.config import ConfigurationError, parse_rate_table, parse_validation_rules
from loan_engine.notifications import NotificationDispatcher
from loan_engine.processor import CALCULATED, INVALID_INPUT
from loan_engine.term_sheet import produce_document

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Initialize sizer and dispatcher (reused across warm invocations)
sizer = LoanSizer(default_store)
dispatcher = NotificationDispatcher()

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,PUT,OPTIONS",
}

STATUS_CODES = {CALCULATED: 200, INVALID_INPUT: 400}

UNEXPECTED_ERROR = {"errors": ["An unexpected error occurred during processing"], "status": "failed"}


class BadRequest(Exception):
    """Request body could not be read."""


def _response(status_code, payload):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(payload)}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health, GET /api
    - POST /calculate
    - POST /term_sheet, POST /term_sheet/send
    - GET|PUT /admin/rate_table, GET|PUT /admin/validation_rules
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path == "/calculate" and http_method == "POST":
        return handle_calculate(event)
    elif path == "/term_sheet" and http_method == "POST":
        return handle_term_sheet(event)
    elif path == "/term_sheet/send" and http_method == "POST":
        return handle_send_term_sheet(event)
    elif path == "/admin/rate_table" and http_method in ("GET", "PUT"):
        return handle_rate_table(event, http_method)
    elif path == "/admin/validation_rules" and http_method in ("GET", "PUT"):
        return handle_validation_rules(event, http_method)
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Loan Sizer API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "calculate": "/calculate [POST]",
                "term_sheet": "/term_sheet [POST]",
                "send_term_sheet": "/term_sheet/send [POST]",
                "rate_table": "/admin/rate_table [GET, PUT]",
                "validation_rules": "/admin/validation_rules [GET, PUT]",
                "health": "/health [GET]",
            },
        },
    )


def _parse_body(event):
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        raise BadRequest("No input data provided")
    # Handle base64 encoded body (API Gateway)
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise BadRequest(f"Invalid base64 body: {str(e)}") from e
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise BadRequest(f"Invalid JSON: {str(e)}") from e


def _deal_body(event):
    input_data = _parse_body(event)
    if not isinstance(input_data, dict) or not input_data:
        raise BadRequest("No input data provided")
    return input_data


def handle_calculate(event):
    """Size a loan through the formula engine."""
    try:
        input_data = _deal_body(event)

        logger.info(f"Calculating loan for: {input_data.get('address', 'Unknown')}")

        result = sizer.process_raw(input_data)

        logger.info(f"Calculation finished with status: {result.status}")

        return _response(STATUS_CODES.get(result.status, 422), sizer.output_builder.build(result))

    except BadRequest as e:
        logger.error(f"Bad request: {str(e)}")
        return _response(400, {"errors": [str(e)], "status": INVALID_INPUT})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return _response(500, UNEXPECTED_ERROR)


def handle_term_sheet(event):
    """Size a loan and return the term sheet as a text attachment."""
    try:
        result = sizer.process_raw(_deal_body(event))
        if not result.succeeded:
            return _response(STATUS_CODES.get(result.status, 422), sizer.output_builder.build(result))

        document = produce_document(result.terms, result.deal)
        headers = {
            **CORS_HEADERS,
            "Content-Type": "text/plain; charset=utf-8",
            "Content-Disposition": f'attachment; filename="{document.filename}"',
        }
        return {"statusCode": 200, "headers": headers, "body": document.render_text()}

    except BadRequest as e:
        logger.error(f"Bad request: {str(e)}")
        return _response(400, {"errors": [str(e)], "status": INVALID_INPUT})

    except Exception as e:
        logger.error(f"Unexpected term sheet error: {str(e)}", exc_info=True)
        return _response(500, UNEXPECTED_ERROR)


def handle_send_term_sheet(event):
    """Size a loan and send the term sheet by email or for e-signature."""
    try:
        input_data = _deal_body(event)
        email = input_data.get("email") or input_data.get("borrower_email")
        channel = input_data.get("channel", "email")

        result = sizer.process_raw(input_data)
        if not result.succeeded:
            return _response(STATUS_CODES.get(result.status, 422), sizer.output_builder.build(result))

        if not dispatcher.dispatch(result.terms, result.deal, email, channel):
            return _response(502, {"status": "failed", "errors": ["Term sheet could not be sent"]})
        return _response(200, {"status": "sent", "channel": channel, "recipient": email})

    except BadRequest as e:
        logger.error(f"Bad request: {str(e)}")
        return _response(400, {"errors": [str(e)], "status": INVALID_INPUT})

    except Exception as e:
        logger.error(f"Unexpected term sheet error: {str(e)}", exc_info=True)
        return _response(500, UNEXPECTED_ERROR)


def handle_rate_table(event, http_method):
    """Read or replace the rate table."""
    if http_method == "GET":
        return _response(200, default_store.rate_table.to_dict())

    try:
        table = default_store.replace_rate_table(parse_rate_table(_parse_body(event)))
    except BadRequest as e:
        return _response(400, {"errors": [str(e)], "status": "failed"})
    except ConfigurationError as e:
        logger.error(f"Rate table rejected: {str(e)}")
        return _response(400, {"errors": e.errors, "status": "validation_failed"})
    return _response(200, table.to_dict())


def handle_validation_rules(event, http_method):
    """Read or replace the validation rules."""
    if http_method == "GET":
        return _response(200, default_store.validation_rules.to_dict())

    try:
        rules = default_store.replace_validation_rules(parse_validation_rules(_parse_body(event)))
    except BadRequest as e:
        return _response(400, {"errors": [str(e)], "status": "failed"})
    except ConfigurationError as e:
        logger.error(f"Validation rules rejected: {str(e)}")
        return _response(400, {"errors": e.errors, "status": "validation_failed"})
    return _response(200, rules.to_dict())
