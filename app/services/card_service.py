import uuid
from app.models.interfaces import MetadataStore, ObjectStore
from app.models.schemas import CardRecord, CardTemplateResponse, ResourceReference
from app.services.issuer_service import SignedUrlIssuer
from app.utils.errors import StorageError
from app.utils.logger import logger

CARD_KEY_SUFFIX = ".jpeg"


class CardTemplateService:
    """Upload and lookup of card templates."""

    def __init__(self, object_store: ObjectStore, metadata_store: MetadataStore,
                 issuer: SignedUrlIssuer, content_type: str = "image/jpeg"):
        self.object_store = object_store
        self.metadata_store = metadata_store
        self.issuer = issuer
        self.content_type = content_type

    def upload_card(self, image_data: bytes, card_name: str) -> str:
        """Store the image under a new id and record its metadata. Returns the id."""
        card_id = f"{uuid.uuid4()}{CARD_KEY_SUFFIX}"
        record = CardRecord(
            id=card_id,
            display_name=card_name,
            resource_reference=ResourceReference(
                container_name=self.object_store.bucket_name,
                object_key=card_id,
            ),
        )

        self.object_store.put_object(card_id, image_data, self.content_type)
        try:
            self.metadata_store.put_metadata(record)
        except Exception:
            # Don't leave an image nobody can look up
            try:
                self.object_store.delete_object(card_id)
            except StorageError:
                logger.warning(f"Orphaned object {card_id} left in bucket")
            raise

        logger.info(f"Card {card_id} uploaded")
        return card_id

    def get_card(self, card_id: str) -> CardTemplateResponse:
        record = self.metadata_store.get_metadata(card_id)
        reference = record.resource_reference
        signed = self.issuer.issue_signed_url(reference.container_name, reference.object_key)

        logger.info(f"Issued signed URL for card {record.id} expiring at {signed.expires_at.isoformat()}")
        return CardTemplateResponse(
            card_id=record.id,
            card_name=record.display_name,
            card_template_url=signed.url,
        )
