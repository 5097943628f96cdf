import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError
from app.config import settings
from app.models.schemas import CardRecord, ResourceReference
from app.utils.errors import CardNotFoundError, InvalidReferenceError, StorageError
from app.utils.logger import logger


class CardMetadataStore:
    """Card metadata table: CardId -> (CardName, CardS3Location)."""

    def __init__(self, client=None, table_name: str = None, bucket_name: str = None):
        self.client = client or boto3.client(
            'dynamodb',
            region_name=settings.aws_region
        )
        self.table_name = table_name or settings.cards_table_name
        self.bucket_name = bucket_name or settings.cards_bucket_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def put_metadata(self, record: CardRecord) -> None:
        item = record.to_item()
        try:
            self.client.update_item(
                TableName=self.table_name,
                Key={"CardId": self._serializer.serialize(item["CardId"])},
                UpdateExpression="SET CardName = :CardName, CardS3Location = :CardS3Location",
                ExpressionAttributeValues={
                    ":CardName": self._serializer.serialize(item["CardName"]),
                    ":CardS3Location": self._serializer.serialize(item["CardS3Location"]),
                },
                ReturnValues="NONE",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to update the cards table: {str(e)}")
            raise StorageError(f"Failed to store metadata for card {record.id}") from e
        logger.info(f"Updated metadata table with card {record.id}")

    def get_metadata(self, card_id: str) -> CardRecord:
        if not card_id:
            raise InvalidReferenceError("CardId cannot be empty")

        try:
            output = self.client.get_item(
                TableName=self.table_name,
                Key={"CardId": self._serializer.serialize(card_id)},
                ConsistentRead=True,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to read card {card_id} from the cards table: {str(e)}")
            raise StorageError(f"Failed to read metadata for card {card_id}") from e

        raw_item = output.get("Item")
        if not raw_item:
            raise CardNotFoundError(f"Card {card_id} not found")

        item = {k: self._deserializer.deserialize(v) for k, v in raw_item.items()}
        return CardRecord(
            id=item["CardId"],
            display_name=item.get("CardName", ""),
            resource_reference=ResourceReference(
                container_name=self.bucket_name,
                # older rows have no location; the key was always the id
                object_key=item.get("CardS3Location") or item["CardId"],
            ),
        )
