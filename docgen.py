import textwrap
import yaml
from pydantic.json_schema import models_json_schema
from routes import routes
from models.content_item import ContentItem
from models.review import RatingSummary, Reply, Review
from models.storage import StorageUsage
from routes.videos import FileUpload

api_description = """
openapi: 3.0.3
info:
  title: Video Catalog API
  description: |-
    Publish videos, browse the catalog and review what others published.

    Callers are identified by the API Gateway authorizer; this API never authenticates anyone itself.
  license:
    name: MIT
    url: https://opensource.org/license/mit
  version: 1.0.0
components:
  securitySchemes:
    cognitoAuth:
      type: apiKey
      in: header
      name: Authorization
"""

default_body = """
responses:
    200:
        description: OK
    400:
        description: Bad Request
"""

SCHEMA_MODELS = [ContentItem, Review, Reply, RatingSummary, StorageUsage, FileUpload]

def create_openapi_schemas(models=SCHEMA_MODELS) -> dict:
    """JSON schemas of the models referenced by the routes, keyed by model name."""
    _, schemas = models_json_schema(
        [(model, "serialization") for model in models],
        ref_template="#/components/schemas/{model}",
    )
    return schemas.get('$defs', {})

def parse_route_doc(raw_doc: str | None) -> dict:
    """Turn a route docstring into an OpenAPI operation.

    The first line is the summary, the following lines the description, and
    everything after the '---' separator is YAML merged into the operation.
    """
    parts = (raw_doc or "").split("---")
    head = parts[0].strip().split("\n")
    operation = {}
    if head[0]:
        operation['summary'] = head[0].strip()
    description = "\n".join(line.strip() for line in head[1:]).strip()
    if description:
        operation['description'] = description
    body = "---".join(parts[1:]) if len(parts) > 1 else default_body
    operation.update(yaml.safe_load(textwrap.dedent(body)) or {})
    return operation

def generate_openapi() -> dict:
    """
    Generate documentation for all routes by parsing the docstrings of each route and returning a Swagger-compliant document.
    """
    document = yaml.safe_load(api_description)
    document['components']['schemas'] = create_openapi_schemas()
    document['paths'] = {}
    for path, methods in routes.items():
        document['paths'][path] = {
            method.lower(): parse_route_doc(action.__doc__)
            for method, action in methods.items()
        }
    return document

def main():
    # Save the documentation to a file
    with open("swagger.yaml", "w") as f:
        yaml.dump(generate_openapi(), f, sort_keys=False)

if __name__ == "__main__":
    main()
