from flask import Flask, request, jsonify, make_response
from flask_cors import CORS
from loan_engine import LoanSizer, default_store
from loan_engine.config import ConfigurationError, parse_rate_table, parse_validation_rules
from loan_engine.notifications import NotificationDispatcher
from loan_engine.processor import CALCULATED, INVALID_INPUT
from loan_engine.term_sheet import produce_document
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the web form and admin dashboard call the API cross-origin)
CORS(app)

# Shared engine components
sizer = LoanSizer(default_store)
dispatcher = NotificationDispatcher()

STATUS_CODES = {
    CALCULATED: 200,
    INVALID_INPUT: 400,
}


def _status_code(result) -> int:
    # validation_failed: well-formed request the rules reject
    return STATUS_CODES.get(result.status, 422)


def _request_body():
    """JSON object body, or None when the body is missing, empty or not an object."""
    input_data = request.get_json(force=True, silent=True)
    if not isinstance(input_data, dict) or not input_data:
        return None
    return input_data


def _no_input():
    return jsonify({
        "errors": ["No input data provided"],
        "status": INVALID_INPUT
    }), 400


def _unexpected_error(e):
    # Log details but return a generic message to avoid information disclosure
    logger.error(f"Processing error: {str(e)}", exc_info=True)
    return jsonify({
        "errors": ["An unexpected error occurred during processing"],
        "status": "failed"
    }), 500


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Loan Sizer API",
        "version": "1.0",
        "endpoints": {
            "calculate": "/calculate [POST]",
            "term_sheet": "/term_sheet [POST]",
            "send_term_sheet": "/term_sheet/send [POST]",
            "rate_table": "/admin/rate_table [GET, PUT]",
            "validation_rules": "/admin/validation_rules [GET, PUT]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate", methods=["POST"])
def calculate():
    """
    Size a loan and return its terms
    """
    try:
        input_data = _request_body()
        if input_data is None:
            return _no_input()

        logger.info(f"Calculating loan for: {input_data.get('address', 'Unknown')}")

        result = sizer.process_raw(input_data)
        output = sizer.output_builder.build(result)

        logger.info(f"Calculation finished with status: {result.status}")

        return jsonify(output), _status_code(result)

    except Exception as e:
        return _unexpected_error(e)


@app.route("/term_sheet", methods=["POST"])
def term_sheet():
    """Size a loan and download the term sheet"""
    try:
        input_data = _request_body()
        if input_data is None:
            return _no_input()

        result = sizer.process_raw(input_data)
        if not result.succeeded:
            return jsonify(sizer.output_builder.build(result)), _status_code(result)

        document = produce_document(result.terms, result.deal)
        response = make_response(document.render_text())
        response.headers["Content-Type"] = "text/plain; charset=utf-8"
        response.headers["Content-Disposition"] = f'attachment; filename="{document.filename}"'
        return response

    except Exception as e:
        return _unexpected_error(e)


@app.route("/term_sheet/send", methods=["POST"])
def send_term_sheet():
    """Size a loan and send the term sheet by email or for e-signature"""
    try:
        input_data = _request_body()
        if input_data is None:
            return _no_input()

        email = input_data.get("email") or input_data.get("borrower_email")
        channel = input_data.get("channel", "email")

        result = sizer.process_raw(input_data)
        if not result.succeeded:
            return jsonify(sizer.output_builder.build(result)), _status_code(result)

        if not dispatcher.dispatch(result.terms, result.deal, email, channel):
            return jsonify({"status": "failed", "errors": ["Term sheet could not be sent"]}), 502
        return jsonify({"status": "sent", "channel": channel, "recipient": email}), 200

    except Exception as e:
        return _unexpected_error(e)


@app.route("/admin/rate_table", methods=["GET", "PUT"])
def rate_table():
    """Read or replace the rate table"""
    if request.method == "GET":
        return jsonify(default_store.rate_table.to_dict()), 200

    try:
        table = default_store.replace_rate_table(parse_rate_table(request.get_json(force=True, silent=True)))
    except ConfigurationError as e:
        logger.error(f"Rate table rejected: {str(e)}")
        return jsonify({"errors": e.errors, "status": "validation_failed"}), 400
    return jsonify(table.to_dict()), 200


@app.route("/admin/validation_rules", methods=["GET", "PUT"])
def validation_rules():
    """Read or replace the validation rules"""
    if request.method == "GET":
        return jsonify(default_store.validation_rules.to_dict()), 200

    try:
        rules = default_store.replace_validation_rules(
            parse_validation_rules(request.get_json(force=True, silent=True))
        )
    except ConfigurationError as e:
        logger.error(f"Validation rules rejected: {str(e)}")
        return jsonify({"errors": e.errors, "status": "validation_failed"}), 400
    return jsonify(rules.to_dict()), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
