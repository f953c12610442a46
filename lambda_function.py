import json
import logging
import traceback
from urllib.parse import unquote
from errors import CatalogError
from middlewares import parse_body
from routes import parse_path_parameters, parse_query_parameters, routes
from utils import Response

logger = logging.getLogger()
logger.setLevel(logging.INFO)

def error_body(status: int, comment: str, error: str) -> dict:
    return {
        'statusCode': status,
        'isBase64Encoded': False,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*'
        },
        'body': json.dumps({
            'success': False,
            'comment': comment,
            'error': error
        })
    }

def handle_api_gateway_event(event_raw, context):
    try:
        event, response, context = parse_body(event_raw, context, Response())
        path = event['path']
        method = event['httpMethod']
        if not path.startswith('/'):
            path = f'/{path}'
        if path.endswith('/'):
            path = path[:-1]

        path, query_params = parse_query_parameters(path)
        try:
            route, path_params = parse_path_parameters(path)
        except KeyError:
            route, path_params = None, {}
        logger.info(f'Route: {route} Method: {method} Path params: {path_params} Query params: {query_params}')
        if query_params:
            event['queryStringParameters'] = {**(event.get('queryStringParameters') or {}), **query_params}
        if path_params:
            event['pathParameters'] = {key: unquote(value) for key, value in path_params.items()}

        if route in routes and method in routes[route]:
            action = routes[route][method]
            try:
                _, response, _ = action(event, response, context)
            except CatalogError as e:
                logger.warning(f'{method} {path} failed with {e.code}: {e.message}')
                return response.error(e).body
            return response.body

        return error_body(404, 'ACTION_NOT_FOUND', f'No route found for "{path}" with method "{method}"')
    except Exception as e:
        logger.error(traceback.format_exc())
        return error_body(500, 'INTERNAL_SERVER_ERROR', str(e))

def lambda_handler(event, context):
    # If the event has a path, it is an API Gateway event, so handle API call
    if event.get("path"):
        return handle_api_gateway_event(event, context)
    return error_body(400, 'UNSUPPORTED_EVENT', 'Only API Gateway events are handled')

def invoke(event, verbose=False):
    result = lambda_handler({
        **event,
        "headers": {
            'Content-Type': 'application/json',
            **(event.get('headers', {}))
        }
    }, {})
    if verbose: print(json.dumps(result, indent=2))
    return result

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    invoke({
        "path": '/videos',
        "httpMethod": 'GET',
    }, verbose=True)
