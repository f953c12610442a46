import json
import base64
import logging

logger = logging.getLogger(__name__)

def parse_body(event_raw, context, response):
    """Decode the JSON request body of an API Gateway event in place.

    Bodies that are not JSON are left as they are; routes that need a body
    validate it themselves.
    """
    event = event_raw
    body = event_raw.get('body')
    if body is None:
        return (event, response, context)
    try:
        if event_raw.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        if isinstance(body, (str, bytes)):
            event['body'] = json.loads(body)
    except (ValueError, TypeError) as e:
        logger.warning(f"Request body is not valid JSON: {e}")

    return (event, response, context)

from . import identify
