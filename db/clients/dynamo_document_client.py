from decimal import Decimal
import logging
import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from db.clients.base_document_client import BaseDocumentClient
from errors import NotFoundError, StoreUnavailableError

from config import config

logger = logging.getLogger(__name__)

def from_dynamo(value):
    """Convert the Decimal numbers returned by the DynamoDB resource API back to int/float."""
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(item) for item in value]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value

class DynamoDocumentClient(BaseDocumentClient):
    """A client for an Amazon DynamoDB table with a single hash key and global secondary indexes."""
    def __init__(self, **config: dict):
        """Initialize the DynamoDB client with configuration parameters.

        Args:
            table (str): The name of the DynamoDB table.
            key (str): The hash key of the table. Defaults to 'id'.
            indexes (dict): Maps a queryable field to the name of the GSI hashed on it.
            resource (any): An already built table resource (used for testing).
        """
        super().__init__(**config)
        self.table_name = config.get('table')
        if not self.table_name:
            raise ValueError("Table name must be provided in the configuration.")
        self.indexes = config.get('indexes', {})
        self._injected_table = config.get('resource')
        self.table = None

    def connect(self):
        """Connect to the DynamoDB service."""
        if self._injected_table is not None:
            self.table = self._injected_table
            self.connected = True
            return
        session = boto3.Session(
            aws_access_key_id=config.aws.access_key_id or None,
            aws_secret_access_key=config.aws.secret_access_key or None,
            region_name=config.aws.region
        )
        self.table = session.resource('dynamodb').Table(self.table_name)
        self.connected = True

    def disconnect(self):
        """Disconnect from the DynamoDB service."""
        self.table = None
        self.connected = False

    def _ensure_connected(self):
        if not self.connected:
            self.connect()

    def get(self, key):
        self._ensure_connected()
        try:
            response = self.table.get_item(Key={self.key: key}, ConsistentRead=True)
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to read {key}: {e}") from e
        item = response.get('Item')
        return from_dynamo(item) if item is not None else None

    def put(self, document):
        self._ensure_connected()
        try:
            self.table.put_item(Item=document)
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to write {document.get(self.key)}: {e}") from e

    def _update_item(self, key, **kwargs):
        """Run a conditional update that never creates a document, returning the new document."""
        try:
            response = self.table.update_item(
                Key={self.key: key},
                ConditionExpression=f'attribute_exists(#{self.key})',
                ReturnValues='ALL_NEW',
                **kwargs
            )
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                raise NotFoundError(f"No document stored under {key}") from e
            raise StoreUnavailableError(f"Failed to update {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"Failed to update {key}: {e}") from e
        return from_dynamo(response['Attributes'])

    def update(self, key, fields):
        self._ensure_connected()
        names = {f'#{self.key}': self.key}
        values = {}
        assignments = []
        for i, (field, value) in enumerate(fields.items()):
            names[f'#f{i}'] = field
            values[f':v{i}'] = value
            assignments.append(f'#f{i} = :v{i}')
        return self._update_item(
            key,
            UpdateExpression='SET ' + ', '.join(assignments),
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
        )

    def append(self, key, field, values):
        self._ensure_connected()
        # list_append is evaluated server side, so concurrent appends never clobber each other
        return self._update_item(
            key,
            UpdateExpression='SET #field = list_append(if_not_exists(#field, :empty_list), :values)',
            ExpressionAttributeNames={f'#{self.key}': self.key, '#field': field},
            ExpressionAttributeValues={':values': list(values), ':empty_list': []},
        )

    def delete(self, key):
        self._ensure_connected()
        try:
            self.table.delete_item(Key={self.key: key})
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to delete {key}: {e}") from e

    def query(self, field, value):
        self._ensure_connected()
        index = self.indexes.get(field)
        if index is None:
            raise ValueError(f"No secondary index configured for field '{field}'")
        kwargs = {
            'IndexName': index,
            'KeyConditionExpression': Key(field).eq(value),
        }
        items = []
        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to query {index} for {value}: {e}") from e
        logger.info(f"Queried {len(items)} documents from {self.table_name} where {field} = {value}")
        return [from_dynamo(item) for item in items]
