from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_CONFIG = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

DEFAULT_PROVIDER_URIS = {
    1: "https://ethereum-rpc.publicnode.com",
    10: "https://optimism-rpc.publicnode.com",
    11155111: "https://ethereum-sepolia-rpc.publicnode.com",
}


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = _ENV_CONFIG

    name: str = Field("DAO Governance Reader", validation_alias="APP_NAME")
    debug: bool = Field(False, validation_alias="DEBUG")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")


class EthereumSettings(BaseSettings):
    """Settings related to the JSON-RPC endpoints the reader talks to."""

    model_config = _ENV_CONFIG

    # JSON object in the environment, e.g. RPC_PROVIDER_URIS='{"10": "https://..."}'
    provider_uris: Dict[int, str] = Field(
        default_factory=lambda: dict(DEFAULT_PROVIDER_URIS),
        validation_alias="RPC_PROVIDER_URIS",
        description="JSON-RPC URL per chain id",
    )
    # Timeout for a single RPC call (seconds)
    rpc_timeout: int = Field(default=30, gt=0, validation_alias="RPC_TIMEOUT")
    # Upper bound on concurrent ownerOf / event-log lookups
    max_workers: int = Field(default=16, gt=0, validation_alias="RPC_MAX_WORKERS")

    @field_validator("provider_uris")
    @classmethod
    def _check_provider_uris(cls, value: Dict[int, str]) -> Dict[int, str]:
        for chain_id, uri in value.items():
            if chain_id <= 0:
                raise ValueError(f"Invalid chain id {chain_id}")
            if not uri:
                raise ValueError(f"Empty provider URI for chain {chain_id}")
        return value


class RegistrySettings(BaseSettings):
    """Where the static DAO registry is loaded from."""

    model_config = _ENV_CONFIG

    file: Optional[str] = Field(
        default="config/daos.example.json",
        validation_alias="DAO_REGISTRY_FILE",
        description="Path to the JSON DAO registry",
    )


class Settings(BaseSettings):
    app: AppSettings = Field(default_factory=AppSettings)
    ethereum: EthereumSettings = Field(default_factory=EthereumSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Singleton instance
settings = Settings()
