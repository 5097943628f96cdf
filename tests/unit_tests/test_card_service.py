import re
import pytest
from unittest.mock import MagicMock

from app.models.schemas import CardTemplateResponse, SignedURL
from app.services.card_service import CardTemplateService
from app.utils.errors import NotReadyError, StorageError


@pytest.fixture
def card_service(mock_object_store, mock_metadata_store, issuer):
    return CardTemplateService(mock_object_store, mock_metadata_store, issuer)


@pytest.mark.unit
def test_upload_card(card_service, mock_object_store, mock_metadata_store):
    """Test that an upload stores the bytes and the metadata under a new id."""
    card_id = card_service.upload_card(b"jpeg-bytes", "Birthday Card")

    assert re.fullmatch(r"[0-9a-f\-]{36}\.jpeg", card_id)
    mock_object_store.put_object.assert_called_once_with(card_id, b"jpeg-bytes", "image/jpeg")

    record = mock_metadata_store.put_metadata.call_args[0][0]
    assert record.id == card_id
    assert record.display_name == "Birthday Card"
    assert record.resource_reference.container_name == "cards-bucket"
    assert record.resource_reference.object_key == card_id


@pytest.mark.unit
def test_upload_card_generates_unique_ids(card_service):
    assert card_service.upload_card(b"a", "A") != card_service.upload_card(b"b", "B")


@pytest.mark.unit
def test_upload_card_object_failure_skips_metadata(card_service, mock_object_store, mock_metadata_store):
    mock_object_store.put_object.side_effect = StorageError("s3 down")

    with pytest.raises(StorageError):
        card_service.upload_card(b"jpeg-bytes", "Birthday Card")

    mock_metadata_store.put_metadata.assert_not_called()


@pytest.mark.unit
def test_upload_card_metadata_failure_removes_object(card_service, mock_object_store, mock_metadata_store):
    """Test that a failed metadata write deletes the uploaded image."""
    mock_metadata_store.put_metadata.side_effect = StorageError("ddb down")

    with pytest.raises(StorageError):
        card_service.upload_card(b"jpeg-bytes", "Birthday Card")

    uploaded_key = mock_object_store.put_object.call_args[0][0]
    mock_object_store.delete_object.assert_called_once_with(uploaded_key)


@pytest.mark.unit
def test_upload_card_cleanup_failure_keeps_original_error(card_service, mock_object_store, mock_metadata_store):
    mock_metadata_store.put_metadata.side_effect = StorageError("ddb down")
    mock_object_store.delete_object.side_effect = StorageError("s3 down")

    with pytest.raises(StorageError) as excinfo:
        card_service.upload_card(b"jpeg-bytes", "Birthday Card")

    assert "ddb down" in str(excinfo.value)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_card(card_service, mock_metadata_store, issuer):
    """Test that a lookup pairs the card name with a signed URL."""
    await issuer.initialize()

    response = card_service.get_card("abc-123.jpeg")

    assert isinstance(response, CardTemplateResponse)
    assert response.card_id == "abc-123.jpeg"
    assert response.card_name == "Birthday Card"
    assert response.card_template_url.startswith("https://cards-bucket.s3.amazonaws.com/abc-123.jpeg?Expires=")
    mock_metadata_store.get_metadata.assert_called_once_with("abc-123.jpeg")
    assert response.model_dump(by_alias=True).keys() == {"CardId", "CardName", "CardTemplateURL"}


@pytest.mark.unit
def test_get_card_issuer_not_ready(card_service):
    with pytest.raises(NotReadyError):
        card_service.get_card("abc-123.jpeg")


@pytest.mark.unit
def test_get_card_uses_issuer_output(mock_object_store, mock_metadata_store):
    """Test that the issuer is called with the stored bucket and key."""
    issuer = MagicMock()
    issuer.issue_signed_url.return_value = SignedURL(
        url="https://cards-bucket.s3.amazonaws.com/abc-123.jpeg?Expires=1&Signature=s&Key-Pair-Id=PK123",
        expires_at="2030-01-01T00:00:00Z",
    )
    service = CardTemplateService(mock_object_store, mock_metadata_store, issuer)

    response = service.get_card("abc-123.jpeg")

    issuer.issue_signed_url.assert_called_once_with("cards-bucket", "abc-123.jpeg")
    assert response.card_template_url.endswith("Key-Pair-Id=PK123")
