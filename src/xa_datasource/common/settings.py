from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env into os.environ
load_dotenv()


class Settings(BaseSettings):
    """Runtime settings for adapter resolution, backed by environment variables."""

    preferred_adapter: Optional[str] = Field(
        default=None,
        validation_alias="XA_DATASOURCE_PREFERRED_ADAPTER",
        description="Implementation identifier to use when the caller does not name one."
    )
    discover_plugins: bool = Field(
        default=True,
        validation_alias="XA_DATASOURCE_DISCOVER_PLUGINS",
        description="Register adapters published under the 'xa_datasource.adapters' entry point group."
    )
    pool_config_path: str = Field(
        default="configs/pools.yaml",
        validation_alias="XA_DATASOURCE_POOL_CONFIG",
        description="Path to the YAML file describing canonical pool configs."
    )
    log_level: str = Field(default="INFO", validation_alias="XA_DATASOURCE_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="XA_DATASOURCE_LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()

# Configure package logging during import
from xa_datasource.common.logger import configure_logging
configure_logging(level=settings.log_level, json_format=settings.log_json)
