from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # AWS Configuration
    aws_region: str = "us-east-1"

    # Card storage
    cards_table_name: str = Field(default="", alias="COMPANY_CARDS_TABLE")
    cards_bucket_name: str = Field(default="", alias="COMPANY_CARDS_BUCKET")
    card_content_type: str = "image/jpeg"

    # Signing Configuration
    private_key_secret_arn: str = Field(default="", alias="PRIVATE_KEY_SECRET_MGR_ARN")
    public_key_id: str = Field(default="", alias="PUBLIC_KEY_CLOUDFRONT_ID")
    signed_url_ttl_seconds: int = 3600  # 1 hour
    resource_base_url: Optional[str] = None  # e.g. a CloudFront distribution domain

    # Secret fetch retry policy (startup only)
    secret_fetch_retries: int = 3
    secret_fetch_backoff_max: int = 10

    # Application Settings
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True
        extra = "ignore"

    def missing_required(self) -> List[str]:
        """Names of required environment variables that are empty."""
        required = {
            "COMPANY_CARDS_TABLE": self.cards_table_name,
            "COMPANY_CARDS_BUCKET": self.cards_bucket_name,
            "PRIVATE_KEY_SECRET_MGR_ARN": self.private_key_secret_arn,
            "PUBLIC_KEY_CLOUDFRONT_ID": self.public_key_id,
        }
        return [name for name, value in required.items() if not value]


settings = Settings()
