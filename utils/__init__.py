from functools import wraps
import json
import inspect

class Response:
    """The API Gateway proxy response a route builds up."""
    def __init__(self):
        self.body = {}
        self.terminated = False

    def status(self, code: int):
        self.body = {
            'statusCode': code
        }
        self.terminated = True
        return self

    def json(self, body):
        self.body = {
            'statusCode': self.body.get('statusCode', 200),
            'headers': {
                'Content-Type': 'application/json',
                'Access-Control-Allow-Origin': '*'
            },
            'isBase64Encoded': False,
            'body': json.dumps(body, default=str)
        }
        self.terminated = True
        return self

    def error(self, error):
        """Answer with a CatalogError: its status, its code as the comment and a short message."""
        return self.status(error.status).json({
            'success': False,
            'comment': error.code,
            'error': error.message
        })

def split_middleware_doc(doc: str | None) -> dict[str, str]:
    """Split a middleware docstring into the parts it contributes to route documentation.

    Everything before the first ``---`` documents the middleware itself. A
    ``--- description`` block is added to the description of every route using
    the middleware, and a bare ``---`` block is YAML added to their OpenAPI
    operation (``security``, for instance).
    """
    sections = {}
    for block in (doc or '').split('---')[1:]:
        name, _, text = block.partition('\n')
        sections[name.strip() or 'operation'] = text
    return sections

def document_route(func, middleware):
    """Merge what a middleware documents into the docstring of the route it wraps."""
    sections = split_middleware_doc(middleware.__doc__)
    if not sections:
        return func
    head, separator, operation = (func.__doc__ or '').partition('---')
    if 'description' in sections:
        head = f"{head.rstrip()}\n\n{sections['description'].rstrip()}\n"
    if 'operation' in sections:
        separator = '---'
        operation = f"{operation}\n\n{sections['operation']}"
    func.__doc__ = f"{head}{separator}{operation}"
    return func

def use(middleware):
    """Run a middleware before a route.

    The middleware takes and returns ``(event, response, context)``. Once it
    terminates the response (a 401, say) the route is not called. Its
    documentation is merged into the route's docstring, see document_route().
    """
    def decorator(func):
        @wraps(func)
        def wrapper(event, response=None, context=None):
            if response is None:
                response = Response()
            event, response, context = middleware(event, response, context)
            if response.terminated:
                return event, response, context
            args = (event, response, context)
            return func(*args[:len(inspect.signature(func).parameters)])
        return document_route(wrapper, middleware)
    return decorator
