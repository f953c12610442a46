"""Unit tests for db/clients/dynamo_document_client.py against a mocked table resource."""

from decimal import Decimal

import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError

from db.clients.dynamo_document_client import DynamoDocumentClient, from_dynamo
from errors import NotFoundError, StoreUnavailableError


def _client_error(code: str, operation: str = "UpdateItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def _make_client(table=None) -> DynamoDocumentClient:
    table = table or MagicMock()
    client = DynamoDocumentClient(table="reviews", indexes={"content_id": "content_id-index"}, resource=table)
    client.connect()
    return client


def test_table_is_required():
    with pytest.raises(ValueError):
        DynamoDocumentClient()


def test_from_dynamo_converts_decimals():
    assert from_dynamo({"rating": Decimal("4"), "score": Decimal("4.5"), "replies": [{"n": Decimal("1")}]}) == {
        "rating": 4, "score": 4.5, "replies": [{"n": 1}]
    }


class TestGet:

    def test_get_is_consistent(self):
        table = MagicMock()
        table.get_item.return_value = {"Item": {"id": "r1", "rating": Decimal("5")}}
        assert _make_client(table).get("r1") == {"id": "r1", "rating": 5}
        table.get_item.assert_called_once_with(Key={"id": "r1"}, ConsistentRead=True)

    def test_get_missing(self):
        table = MagicMock()
        table.get_item.return_value = {}
        assert _make_client(table).get("r1") is None

    def test_get_failure(self):
        table = MagicMock()
        table.get_item.side_effect = _client_error("ProvisionedThroughputExceededException", "GetItem")
        with pytest.raises(StoreUnavailableError):
            _make_client(table).get("r1")


class TestUpdate:

    def test_update_is_conditional(self):
        table = MagicMock()
        table.update_item.return_value = {"Attributes": {"id": "r1", "rating": Decimal("3"), "comment": "ok"}}
        result = _make_client(table).update("r1", {"rating": 3, "comment": "ok"})
        assert result == {"id": "r1", "rating": 3, "comment": "ok"}
        kwargs = table.update_item.call_args.kwargs
        assert kwargs["Key"] == {"id": "r1"}
        assert kwargs["ConditionExpression"] == "attribute_exists(#id)"
        assert kwargs["ReturnValues"] == "ALL_NEW"
        assert kwargs["UpdateExpression"] == "SET #f0 = :v0, #f1 = :v1"
        assert kwargs["ExpressionAttributeNames"] == {"#id": "id", "#f0": "rating", "#f1": "comment"}
        assert kwargs["ExpressionAttributeValues"] == {":v0": 3, ":v1": "ok"}

    def test_update_missing_document(self):
        table = MagicMock()
        table.update_item.side_effect = _client_error("ConditionalCheckFailedException")
        with pytest.raises(NotFoundError):
            _make_client(table).update("r1", {"rating": 3})

    def test_update_failure(self):
        table = MagicMock()
        table.update_item.side_effect = _client_error("InternalServerError")
        with pytest.raises(StoreUnavailableError):
            _make_client(table).update("r1", {"rating": 3})


class TestAppend:

    def test_append_uses_list_append(self):
        table = MagicMock()
        table.update_item.return_value = {"Attributes": {"id": "r1", "replies": [{"id": "r1#t"}]}}
        result = _make_client(table).append("r1", "replies", [{"id": "r1#t"}])
        assert result["replies"] == [{"id": "r1#t"}]
        kwargs = table.update_item.call_args.kwargs
        assert "list_append(if_not_exists(#field, :empty_list), :values)" in kwargs["UpdateExpression"]
        assert kwargs["ExpressionAttributeNames"]["#field"] == "replies"
        assert kwargs["ExpressionAttributeValues"] == {":values": [{"id": "r1#t"}], ":empty_list": []}
        table.put_item.assert_not_called()

    def test_append_to_missing_document(self):
        table = MagicMock()
        table.update_item.side_effect = _client_error("ConditionalCheckFailedException")
        with pytest.raises(NotFoundError):
            _make_client(table).append("r1", "replies", [{"id": "r1#t"}])


class TestQuery:

    def test_query_follows_pagination(self):
        table = MagicMock()
        table.query.side_effect = [
            {"Items": [{"id": "a"}], "LastEvaluatedKey": {"id": "a"}},
            {"Items": [{"id": "b"}]},
        ]
        assert _make_client(table).query("content_id", "video-1") == [{"id": "a"}, {"id": "b"}]
        assert table.query.call_count == 2
        first, second = table.query.call_args_list
        assert first.kwargs["IndexName"] == "content_id-index"
        assert "ExclusiveStartKey" not in first.kwargs
        assert second.kwargs["ExclusiveStartKey"] == {"id": "a"}

    def test_query_without_index(self):
        with pytest.raises(ValueError):
            _make_client().query("author_id", "alice")


def test_put_and_delete():
    table = MagicMock()
    client = _make_client(table)
    client.put({"id": "r1", "rating": 5})
    client.delete("r1")
    table.put_item.assert_called_once_with(Item={"id": "r1", "rating": 5})
    table.delete_item.assert_called_once_with(Key={"id": "r1"})
