import pytest
from unittest.mock import MagicMock

from app.models.schemas import CardRecord, ResourceReference
from app.services.issuer_service import SignedUrlIssuer


@pytest.fixture
def mock_secrets_client(private_key_pem):
    """Returns a mocked boto3 Secrets Manager client holding the test key."""
    client = MagicMock()
    client.get_secret_value.return_value = {
        "ARN": "arn:valid",
        "SecretString": private_key_pem,
    }
    return client


@pytest.fixture
def mock_key_provider(private_key_pem):
    """Returns a mocked key provider that hands back the test PEM."""
    provider = MagicMock()
    provider.fetch_encoded_key.return_value = private_key_pem
    return provider


@pytest.fixture
def issuer(mock_key_provider) -> SignedUrlIssuer:
    """Returns an uninitialized issuer with fast retries."""
    return SignedUrlIssuer(
        key_provider=mock_key_provider,
        secret_identifier="arn:valid",
        public_key_id="PK123",
        fetch_retries=2,
        fetch_backoff_max=0,
    )


@pytest.fixture
async def ready_issuer(issuer) -> SignedUrlIssuer:
    await issuer.initialize()
    return issuer


@pytest.fixture
def sample_card() -> CardRecord:
    return CardRecord(
        id="abc-123.jpeg",
        display_name="Birthday Card",
        resource_reference=ResourceReference(
            container_name="cards-bucket",
            object_key="abc-123.jpeg",
        ),
    )


@pytest.fixture
def mock_object_store():
    store = MagicMock()
    store.bucket_name = "cards-bucket"
    return store


@pytest.fixture
def mock_metadata_store(sample_card):
    store = MagicMock()
    store.get_metadata.return_value = sample_card
    return store


