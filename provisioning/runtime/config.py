"""Runtime configuration."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Synthesis settings."""

    # Working directory, manifests land in <workdir>/cdktf.out
    workdir: str = "."

    # Optional YAML file overriding stack literals
    config_file: Optional[str] = None

    # Stack identifiers
    aws_stack_id: str = "AwsStack"
    azure_stack_id: str = "AzureStack"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "FLATSTACK_"
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
