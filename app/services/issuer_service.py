import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from app.models.interfaces import SecretStore
from app.models.schemas import KeyMaterial, SignedURL
from app.services.cloudfront_signer import sign
from app.services.key_parser import parse_private_key
from app.services.url_canonicalizer import canonicalize
from app.utils.errors import ConfigurationError, NotReadyError, SecretUnavailableError
from app.utils.logger import logger

DEFAULT_VALIDITY_WINDOW = timedelta(hours=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SignedUrlIssuer:
    """
    Issues CloudFront signed URLs for objects in the card bucket.

    Starts Uninitialized; `initialize()` loads the key exactly once and moves
    it to Ready. Issuing afterwards reads an immutable KeyMaterial without
    locking, so it is safe from any number of concurrent requests.
    """

    def __init__(
        self,
        key_provider: SecretStore,
        secret_identifier: str,
        public_key_id: str,
        validity_window: timedelta = DEFAULT_VALIDITY_WINDOW,
        resource_base_url: Optional[str] = None,
        fetch_retries: int = 3,
        fetch_backoff_max: float = 10,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.key_provider = key_provider
        self.secret_identifier = secret_identifier
        self.public_key_id = public_key_id
        self.validity_window = validity_window
        self.resource_base_url = resource_base_url
        self.fetch_retries = max(1, fetch_retries)
        self.fetch_backoff_max = fetch_backoff_max
        self._clock = clock

        self._key_material: Optional[KeyMaterial] = None
        self._init_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._key_material is not None

    @property
    def key_loaded_at(self) -> Optional[datetime]:
        material = self._key_material
        return material.loaded_at if material else None

    def _validate_config(self) -> None:
        if not self.secret_identifier:
            raise ConfigurationError("Secret ARN cannot be empty")
        if not self.public_key_id:
            raise ConfigurationError("Public key id cannot be empty")
        if self.validity_window < timedelta(seconds=1):
            raise ConfigurationError("Validity window must be at least one second")

    async def _fetch_with_backoff(self) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.fetch_retries),
            wait=wait_exponential(multiplier=1, max=self.fetch_backoff_max),
            retry=retry_if_exception_type(SecretUnavailableError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        f"Retry {attempt.retry_state.attempt_number}/{self.fetch_retries} "
                        f"fetching signing key secret"
                    )
                return await asyncio.to_thread(
                    self.key_provider.fetch_encoded_key, self.secret_identifier
                )

    async def _load_key_material(self) -> KeyMaterial:
        self._validate_config()
        encoded = await self._fetch_with_backoff()
        private_key = parse_private_key(encoded)
        return KeyMaterial(
            public_key_id=self.public_key_id,
            private_key=private_key,
            loaded_at=self._clock(),
        )

    async def initialize(self) -> None:
        """Load the signing key once; errors leave the issuer Uninitialized."""
        if self._key_material is not None:
            return

        async with self._init_lock:
            if self._key_material is not None:
                return
            try:
                material = await self._load_key_material()
            except Exception as e:
                logger.critical(f"Signed URL issuer initialization failed: {type(e).__name__}: {e}")
                raise
            self._key_material = material
            logger.info(f"Signing key loaded for public key id {self.public_key_id}")

    async def reload_key_material(self) -> None:
        """
        Fetch and parse the secret again, then swap the key in one assignment.

        Requests in flight keep signing with the key they already read. If
        loading fails the previous key stays installed.
        """
        if self._key_material is None:
            raise NotReadyError("Issuer must be initialized before reloading its key")

        async with self._init_lock:
            material = await self._load_key_material()
            self._key_material = material
            logger.info(f"Signing key reloaded for public key id {self.public_key_id}")

    def issue_signed_url(self, container_name: str, object_key: str) -> SignedURL:
        material = self._key_material
        if material is None:
            raise NotReadyError("Signed URL issuer is not initialized")

        issued_at = self._clock().replace(microsecond=0)
        expires_at = (issued_at + self.validity_window).replace(microsecond=0)

        url = canonicalize(container_name, object_key, base_url=self.resource_base_url)
        signed_url = sign(url, material.private_key, material.public_key_id, expires_at, now=issued_at)
        return SignedURL(url=signed_url, expires_at=expires_at)
