"""
Narrow contracts for the three external collaborators.

The service only depends on these shapes, so tests can hand in mocks and
deployments can swap the AWS-backed implementations.
"""
from typing import Protocol
from app.models.schemas import CardRecord


class SecretStore(Protocol):
    def fetch_encoded_key(self, secret_identifier: str) -> str:
        ...


class ObjectStore(Protocol):
    bucket_name: str

    def put_object(self, object_key: str, data: bytes, content_type: str) -> None:
        ...

    def delete_object(self, object_key: str) -> None:
        ...


class MetadataStore(Protocol):
    def put_metadata(self, record: CardRecord) -> None:
        ...

    def get_metadata(self, card_id: str) -> CardRecord:
        ...
