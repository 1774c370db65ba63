# src/storefront/settings.py
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Single source of truth for all storefront service settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from storefront.settings import get_settings
        settings = get_settings()
        depth = settings.max_generated_directory_depth
    """

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # File Service Configuration
    temp_file_base_directory: Optional[str] = Field(
        default=None,
        alias="FILE_SERVICE_TEMP_FILE_BASE_DIRECTORY",
        description="Base directory for work areas (platform temp dir if unset)"
    )

    max_generated_directory_depth: int = Field(
        default=0,
        ge=0,
        alias="FILE_SERVICE_MAX_GENERATED_DIRECTORY_DEPTH",
        description="Number of random directory levels appended to each work area"
    )

    classpath_directory: Optional[str] = Field(
        default=None,
        alias="FILE_SERVICE_CLASSPATH_DIRECTORY",
        description="Packaged resource location, e.g. 'storefront/static'"
    )

    # Storage Configuration
    storage_dir: str = Field(
        default="storage",
        description="Local storage directory"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="storefront-assets",
        description="S3 bucket for promoted assets"
    )

    # Mail Configuration
    mail_enabled: bool = Field(
        default=True,
        description="Send mail through SMTP; when false messages are only logged"
    )

    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=25)
    smtp_username: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=False)
    smtp_timeout: float = Field(default=30.0)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        valid_modes = ["local-dev", "aws-mock", "aws-prod"]
        if v not in valid_modes:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {valid_modes}")
        return v

    @field_validator('temp_file_base_directory', 'classpath_directory')
    @classmethod
    def blank_is_unset(cls, v):
        """Treat blank strings from .env files as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    def get_environment_dict(self) -> dict:
        """Get configuration as a dictionary suitable for subprocesses.

        Returns:
            Dictionary of environment variables
        """
        env_dict = {
            'DEPLOYMENT_MODE': self.deployment_mode,
            'FILE_SERVICE_TEMP_FILE_BASE_DIRECTORY': self.temp_file_base_directory or '',
            'FILE_SERVICE_MAX_GENERATED_DIRECTORY_DEPTH': str(self.max_generated_directory_depth),
            'FILE_SERVICE_CLASSPATH_DIRECTORY': self.classpath_directory or '',
            'STORAGE_DIR': self.storage_dir,
            'S3_BUCKET_NAME': self.s3_bucket_name,
            'AWS_DEFAULT_REGION': self.aws_region,
            'LOG_LEVEL': self.log_level,
        }

        # Only include AWS endpoint for local/mock modes
        if self.deployment_mode in ['local-dev', 'aws-mock']:
            env_dict['AWS_ENDPOINT_URL'] = self.aws_endpoint_url or ''

        return env_dict

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
