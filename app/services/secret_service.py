import base64
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from app.config import settings
from app.utils.errors import ConfigurationError, EmptySecretError, SecretUnavailableError
from app.utils.logger import logger


class SecretsManagerKeyProvider:
    """Reads the encoded signing key out of AWS Secrets Manager."""

    def __init__(self, client=None):
        self.client = client or boto3.client(
            'secretsmanager',
            region_name=settings.aws_region
        )

    def fetch_encoded_key(self, secret_identifier: str) -> str:
        """
        Return the raw secret value for `secret_identifier`.
        Nothing is cached here; the issuer keeps the parsed key.
        """
        if not secret_identifier:
            raise ConfigurationError("Secret identifier cannot be empty")

        try:
            output = self.client.get_secret_value(SecretId=secret_identifier)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"Failed to retrieve secret {secret_identifier}: {code}")
            raise SecretUnavailableError(
                f"Secret {secret_identifier} could not be retrieved ({code})"
            ) from e
        except BotoCoreError as e:
            logger.error(f"Secrets Manager unreachable: {type(e).__name__}")
            raise SecretUnavailableError("Secrets Manager could not be reached") from e

        value = output.get("SecretString")
        if value is None and output.get("SecretBinary") is not None:
            raw = bytes(output["SecretBinary"])
            try:
                value = raw.decode("utf-8")
            except UnicodeDecodeError:
                # raw DER, handed to the parser in its unarmored form
                value = base64.b64encode(raw).decode("ascii")

        if not value:
            logger.error(f"Secret {secret_identifier} is empty")
            raise EmptySecretError(f"Secret {secret_identifier} is empty")

        return value
