"""Caller identity, as established upstream by the API Gateway authorizer.

These middlewares never authenticate anyone: they only read the claims the
authorizer attached to the request and expose them to the route as
``event['identity']``, a dict with ``user_id`` and ``email``.
"""

def read_identity(event) -> dict | None:
    """Extract the caller identity from the authorizer claims, if any."""
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or authorizer.get('jwt', {}).get('claims') or {}
    user_id = claims.get('cognito:username') or claims.get('sub')
    if not user_id:
        return None
    return {
        'user_id': user_id,
        'email': claims.get('email', ''),
    }

def identify(event, response, context):
    """Middleware to require a caller identity supplied by the upstream authorizer.

    The identity is passed to the route as ``event['identity']``; requests
    without one are answered with 401 NO_IDENTITY before the route runs.

    --- description
    Requires a signed-in caller, anonymous requests get 401 NO_IDENTITY.
    ---
    security:
        - cognitoAuth: []
    """
    identity = read_identity(event)
    if identity is None:
        response.status(401).json({
            "success": False,
            "comment": 'NO_IDENTITY',
            "error": 'Please sign in to continue',
        })
        return event, response, context
    event['identity'] = identity
    return event, response, context

def identify_optional(event, response, context):
    """Middleware to read the caller identity when there is one; anonymous callers get None.

    --- description
    Signing in is optional. Anonymous callers only see public videos.
    ---
    security:
        - {}
        - cognitoAuth: []
    """
    event['identity'] = read_identity(event)
    return event, response, context
