from dataclasses import dataclass
from datetime import timedelta
from fastapi import Request
from app.config import Settings
from app.services.card_service import CardTemplateService
from app.services.dynamodb_service import CardMetadataStore
from app.services.issuer_service import SignedUrlIssuer
from app.services.secret_service import SecretsManagerKeyProvider
from app.utils.errors import ConfigurationError
from app.utils.s3_storage import S3Storage


@dataclass(frozen=True)
class ServiceContext:
    """Everything a request handler needs, built once at startup and never mutated."""
    settings: Settings
    issuer: SignedUrlIssuer
    cards: CardTemplateService


def build_context(settings: Settings, key_provider=None, object_store=None,
                  metadata_store=None) -> ServiceContext:
    missing = settings.missing_required()
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

    issuer = SignedUrlIssuer(
        key_provider=key_provider or SecretsManagerKeyProvider(),
        secret_identifier=settings.private_key_secret_arn,
        public_key_id=settings.public_key_id,
        validity_window=timedelta(seconds=settings.signed_url_ttl_seconds),
        resource_base_url=settings.resource_base_url,
        fetch_retries=settings.secret_fetch_retries,
        fetch_backoff_max=settings.secret_fetch_backoff_max,
    )
    cards = CardTemplateService(
        object_store=object_store or S3Storage(bucket_name=settings.cards_bucket_name),
        metadata_store=metadata_store or CardMetadataStore(
            table_name=settings.cards_table_name,
            bucket_name=settings.cards_bucket_name,
        ),
        issuer=issuer,
        content_type=settings.card_content_type,
    )
    return ServiceContext(settings=settings, issuer=issuer, cards=cards)


def get_context(request: Request) -> ServiceContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Service context not initialized")
    return context
