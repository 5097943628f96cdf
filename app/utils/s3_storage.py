import boto3
from botocore.exceptions import BotoCoreError, ClientError
from app.config import settings
from app.utils.errors import StorageError
from app.utils.logger import logger

class S3Storage:
    def __init__(self, client=None, bucket_name: str = None):
        self.s3_client = client or boto3.client(
            's3',
            region_name=settings.aws_region
        )
        self.bucket_name = bucket_name or settings.cards_bucket_name

    def put_object(self, object_key: str, data: bytes, content_type: str = "image/jpeg") -> None:
        """
        Upload a card image to the cards bucket under `object_key`.
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=object_key,
                Body=data,
                ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading image to S3: {str(e)}")
            raise StorageError(f"Failed to upload {object_key}") from e
        logger.info(f"Image uploaded successfully to S3. Object key: {object_key}")

    def delete_object(self, object_key: str) -> None:
        """
        Remove an object, used to clean up after a failed metadata write.
        """
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=object_key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 delete failed for {object_key}: {str(e)}")
            raise StorageError(f"Failed to delete {object_key}") from e
        logger.info(f"Deleted {object_key} from S3")
