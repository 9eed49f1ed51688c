"""
Flask Application for the Mail Gate API

Provides REST API endpoints for domain and email validation, recipient list
filtering and sending composed messages.
"""

import logging
import os
from flask import Flask, request, jsonify
from flask_cors import CORS

from mail_gate import (
    ConfigurationError,
    DNSResolver,
    DomainValidator,
    EmailValidator,
    FailureSummary,
    MessageComposer,
    RecipientAggregator,
    SMTPTransport,
    UnknownHeaderError,
)

logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper())
logger = logging.getLogger(__name__)

# Create Flask application
app = Flask(__name__)
CORS(app)

# Configuration
DNS_TIMEOUT = float(os.environ.get('DNS_TIMEOUT', 5))
TOLERATE_PARTIAL = os.environ.get('MAIL_TOLERATE_PARTIAL', 'false').lower() == 'true'
ALLOW_CC_AS_TO = os.environ.get('MAIL_ALLOW_CC_AS_TO', 'false').lower() == 'true'

# Initialize validators
resolver = DNSResolver(timeout=DNS_TIMEOUT)
validator = EmailValidator(resolver)
domain_validator = DomainValidator(resolver)

try:
    transport = SMTPTransport.from_env()
except ConfigurationError as e:
    logger.info(f"Sending disabled: {e}")
    transport = None

# Optional address headers accepted by /send, by request field
SEND_HEADER_FIELDS = {
    'cc': 'Cc',
    'bcc': 'Bcc',
    'sender': 'Sender',
    'reply_to': 'ReplyTo',
    'return_path': 'ReturnPath',
    'return_receipt_to': 'ReturnReceiptTo',
    'disposition_notification_to': 'DispositionNotificationTo',
}


def _json_body():
    """Return (data, None) for a JSON object body, else (None, error response)."""
    if not request.is_json:
        return None, (jsonify({
            'error': 'Content-Type must be application/json'
        }), 415)

    data = request.get_json(silent=True)

    if not isinstance(data, dict):
        return None, (jsonify({
            'error': 'Invalid JSON body'
        }), 400)

    return data, None


def _missing(field):
    return jsonify({
        'error': f'Missing required field: {field}'
    }), 400


@app.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON response with status
    """
    return jsonify({
        'status': 'healthy',
        'service': 'mail-gate',
        'sending_enabled': transport is not None
    }), 200


@app.route('/validate', methods=['POST'])
def validate_email():
    """
    Validate an email address.

    Request Body:
        {
            "email": "user@example.com"
        }

    Returns:
        JSON response with the validation result:
        {
            "outcome": "ok",
            "raw": "user@example.com",
            "canonical": "user@example.com",
            "domain": "example.com",
            "ip": "93.184.216.34",
            "valid": true
        }
    """
    data, error = _json_body()
    if error:
        return error

    email = data.get('email')

    if email is None:
        return _missing('email')

    if not isinstance(email, str):
        return jsonify({
            'error': 'email must be a string'
        }), 400

    result = validator.validate(email)

    return jsonify(result.to_dict()), 200


@app.route('/validate/batch', methods=['POST'])
def validate_batch():
    """
    Validate multiple email addresses.

    Request Body:
        {
            "emails": ["user1@example.com", "user2@example.com"]
        }

    Returns:
        JSON response with validation results and counts
    """
    data, error = _json_body()
    if error:
        return error

    emails = data.get('emails')

    if emails is None:
        return _missing('emails')

    if not isinstance(emails, list) or not all(isinstance(e, str) for e in emails):
        return jsonify({
            'error': 'emails must be an array of strings'
        }), 400

    if len(emails) == 0:
        return jsonify({
            'error': 'emails array cannot be empty'
        }), 400

    results = validator.validate_batch(emails)

    valid_count = sum(1 for r in results if r.valid)

    return jsonify({
        'results': [r.to_dict() for r in results],
        'total': len(results),
        'valid_count': valid_count,
        'invalid_count': len(results) - valid_count
    }), 200


@app.route('/quick-check', methods=['GET'])
def quick_check():
    """
    Quick email validation check via GET request.

    Query Parameters:
        email: Email address to validate
    """
    email = request.args.get('email')

    if email is None:
        return jsonify({
            'error': 'Missing required query parameter: email'
        }), 400

    return jsonify({
        'email': email,
        'is_valid': validator.is_valid(email)
    }), 200


@app.route('/validate/domain', methods=['POST'])
def validate_domain():
    """
    Validate a domain name and report its mail servers.

    Request Body:
        {
            "domain": "example.com"
        }
    """
    data, error = _json_body()
    if error:
        return error

    domain = data.get('domain')

    if domain is None:
        return _missing('domain')

    if not isinstance(domain, str):
        return jsonify({
            'error': 'domain must be a string'
        }), 400

    result = domain_validator.validate(domain)
    has_mx = domain_validator.is_dns_record(result, 'MX')

    response = result.to_dict()
    response['has_mx'] = has_mx
    response['mx_records'] = [
        {'preference': pref, 'exchange': host}
        for pref, host in (resolver.get_mx_records(domain) if has_mx else [])
    ]
    if not result.resolvable:
        response['server_status'] = 1
    else:
        response['server_status'] = 0 if has_mx else 2

    return jsonify(response), 200


@app.route('/recipients', methods=['POST'])
def filter_recipients():
    """
    Filter a recipient list down to its valid addresses.

    Request Body:
        {
            "addresses": "a@example.com, bad@@, b@example.com",
            "header": "To"
        }
    """
    data, error = _json_body()
    if error:
        return error

    addresses = data.get('addresses')

    if addresses is None:
        return _missing('addresses')

    if not isinstance(addresses, str):
        return jsonify({
            'error': 'addresses must be a string'
        }), 400

    header = data.get('header', 'To')

    if not isinstance(header, str):
        return jsonify({
            'error': 'header must be a string'
        }), 400

    aggregator = RecipientAggregator(validator, FailureSummary())
    accepted = aggregator.add(header, addresses)

    return jsonify({
        'header': header,
        'addresses': accepted,
        'error_count': aggregator.error_count,
        'rejected': aggregator.summary.to_dict().get(header, [])
    }), 200


@app.route('/send', methods=['POST'])
def send_message():
    """
    Compose and send a message.

    Request Body:
        {
            "from": "me@example.com",
            "to": "you@example.com",
            "cc": "boss@example.com",
            "subject": "Hello",
            "message": "Body text",
            "tolerate_partial_failure": false,
            "allow_cc_as_to": false
        }

    Returns 200 when sent, 422 when the message is not ready to send and
    502 when the transport fails.
    """
    if transport is None:
        return jsonify({
            'error': 'Sending is not configured'
        }), 503

    data, error = _json_body()
    if error:
        return error

    for field in ('from', 'message'):
        if data.get(field) is None:
            return _missing(field)

    tolerate = data.get('tolerate_partial_failure', TOLERATE_PARTIAL)
    allow_cc = data.get('allow_cc_as_to', ALLOW_CC_AS_TO)

    for field, value in (('tolerate_partial_failure', tolerate), ('allow_cc_as_to', allow_cc)):
        if not isinstance(value, bool):
            return jsonify({
                'error': f'{field} must be a boolean'
            }), 400

    composer = MessageComposer(
        from_addr=data['from'],
        to=data.get('to', ''),
        tolerate_partial_failure=tolerate,
        allow_cc_as_to=allow_cc,
        validator=validator,
        transport=transport,
    )

    try:
        for field, header in SEND_HEADER_FIELDS.items():
            if data.get(field):
                composer.set_header(header, data[field])
        for field in ('content_type', 'charset', 'subject'):
            if data.get(field):
                composer.set_header(field, data[field])
    except UnknownHeaderError as e:
        return jsonify({
            'error': str(e)
        }), 400

    response = {
        'ready': composer.ready_to_send(),
        'error_count': composer.errors(),
        'summary': composer.summary().to_dict(),
    }

    if not response['ready']:
        response['sent'] = False
        return jsonify(response), 422

    response['sent'] = composer.send(data['message'])
    response['to'] = composer.header('To')

    return jsonify(response), 200 if response['sent'] else 502


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return jsonify({
        'error': 'Endpoint not found'
    }), 404


@app.errorhandler(405)
def method_not_allowed(error):
    """Handle 405 errors."""
    return jsonify({
        'error': 'Method not allowed'
    }), 405


@app.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return jsonify({
        'error': 'Internal server error'
    }), 500


if __name__ == '__main__':
    # Get port from environment or use default
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    logger.info(f"Starting Mail Gate API on port {port}")
    logger.info(f"Sending enabled: {transport is not None}")

    app.run(host='0.0.0.0', port=port, debug=debug)
