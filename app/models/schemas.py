from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


class KeyMaterial(BaseModel):
    """Parsed private key plus the CloudFront public key id it pairs with."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    public_key_id: str = Field(..., min_length=1)
    private_key: RSAPrivateKey = Field(..., repr=False)
    loaded_at: datetime

    def __str__(self) -> str:
        return f"KeyMaterial(public_key_id={self.public_key_id!r})"


class ResourceReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    container_name: str = Field(..., min_length=1)
    object_key: str = Field(..., min_length=1)


class SignedURL(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    expires_at: datetime


class CardRecord(BaseModel):
    id: str = Field(..., min_length=1)
    display_name: str = ""
    resource_reference: ResourceReference

    def to_item(self) -> dict[str, Any]:
        """Metadata table layout, keyed by CardId."""
        return {
            "CardId": self.id,
            "CardName": self.display_name,
            "CardS3Location": self.resource_reference.object_key,
        }


class CardUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    card_id: str = Field(..., alias="CardId")


class CardTemplateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    card_id: str = Field(..., alias="CardId")
    card_name: str = Field(..., alias="CardName")
    card_template_url: str = Field(..., alias="CardTemplateURL")

    @field_validator('card_template_url')
    @classmethod
    def url_not_empty(cls, v):
        if not v:
            raise ValueError('Card template URL cannot be empty')
        return v
