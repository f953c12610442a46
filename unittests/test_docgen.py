"""Unit tests for docgen.py, the OpenAPI generator."""

import yaml

import docgen


def test_parse_route_doc_reads_summary_description_and_yaml():
    doc = """Summary line.

    Longer description.
    ---
    tags:
        - videos
    responses:
        200:
            description: OK
    """
    operation = docgen.parse_route_doc(doc)
    assert operation["summary"] == "Summary line."
    assert operation["description"] == "Longer description."
    assert operation["tags"] == ["videos"]
    assert operation["responses"][200]["description"] == "OK"


def test_parse_route_doc_without_yaml_uses_default_responses():
    operation = docgen.parse_route_doc("Storage usage.")
    assert operation["summary"] == "Storage usage."
    assert set(operation["responses"]) == {200, 400}


def test_generate_openapi_covers_every_route():
    document = docgen.generate_openapi()
    assert document["openapi"] == "3.0.3"
    paths = document["paths"]
    assert set(paths["/videos"]) == {"get", "post"}
    assert set(paths["/videos/{video_id}"]) == {"get", "delete"}
    assert set(paths["/reviews/{review_id}"]) == {"put", "delete"}
    assert "post" in paths["/reviews/{review_id}/replies"]
    assert "get" in paths["/storage"]
    assert set(paths) == {
        "/videos",
        "/videos/{video_id}",
        "/videos/{video_id}/thumbnail",
        "/videos/{video_id}/reviews",
        "/videos/{video_id}/rating",
        "/reviews/{review_id}",
        "/reviews/{review_id}/replies",
        "/storage",
    }


def test_identified_routes_carry_security():
    paths = docgen.generate_openapi()["paths"]
    assert paths["/videos"]["post"]["security"] == [{"cognitoAuth": []}]
    assert "Requires a signed-in caller" in paths["/videos"]["post"]["description"]


def test_optionally_identified_routes_allow_anonymous_callers():
    paths = docgen.generate_openapi()["paths"]
    operation = paths["/videos/{video_id}"]["get"]
    assert operation["security"] == [{}, {"cognitoAuth": []}]
    assert "Anonymous callers only see public videos." in operation["description"]
    assert operation["tags"] == ["videos"]


def test_public_routes_carry_no_security():
    assert "security" not in docgen.generate_openapi()["paths"]["/videos/{video_id}/reviews"]["get"]


def test_schemas_are_generated_from_models():
    schemas = docgen.generate_openapi()["components"]["schemas"]
    assert {"ContentItem", "Review", "Reply", "RatingSummary", "StorageUsage", "FileUpload"} <= set(schemas)
    assert "available" in schemas["StorageUsage"]["properties"]


def test_main_writes_swagger_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    docgen.main()
    with open(tmp_path / "swagger.yaml") as f:
        document = yaml.safe_load(f)
    assert "/videos" in document["paths"]
