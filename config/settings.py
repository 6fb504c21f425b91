from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants.constants import DEFAULT_QUORUM_NUMERATOR

# Shared by every settings group so each one reads the flat env vars (and .env) on its own
ENV_CONFIG = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = ENV_CONFIG

    name: str = Field("DAO Governance Core", validation_alias="APP_NAME")
    debug: bool = Field(False, validation_alias="DEBUG")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")


class EthereumSettings(BaseSettings):
    """Settings related to the chain node used for wallet writes and token metadata reads."""

    model_config = ENV_CONFIG

    provider_uri: Optional[str] = Field(
        default=None,
        validation_alias="PROVIDER_URI",
        description="Ethereum Node JSON-RPC URL",
    )
    # Timeout for RPC calls (seconds)
    rpc_timeout: int = Field(default=60, gt=0, validation_alias="RPC_TIMEOUT")
    default_chain_id: int = Field(default=11155111, gt=0, validation_alias="DEFAULT_CHAIN_ID")


class GovernanceSettings(BaseSettings):
    """Settings for proposal state derivation and execution sequencing."""

    model_config = ENV_CONFIG

    # Re-evaluation period of an observed proposal's effective state
    state_refresh_seconds: float = Field(default=1.0, gt=0, validation_alias="GOVERNANCE_STATE_REFRESH_SECONDS")
    # Approximate quorum check (any vote counts) when DAO data is unavailable
    degraded_quorum_fallback: bool = Field(default=False, validation_alias="GOVERNANCE_DEGRADED_QUORUM_FALLBACK")
    default_quorum_numerator: int = Field(
        default=DEFAULT_QUORUM_NUMERATOR, ge=0, le=100, validation_alias="GOVERNANCE_DEFAULT_QUORUM_NUMERATOR"
    )
    receipt_timeout_seconds: int = Field(default=120, gt=0, validation_alias="GOVERNANCE_RECEIPT_TIMEOUT_SECONDS")


class PinataSettings(BaseSettings):
    """Settings for the IPFS pinning service (vote reasons, proposal metadata)."""

    model_config = ENV_CONFIG

    jwt: Optional[str] = Field(None, validation_alias="PINATA_JWT")
    gateway: str = Field("gateway.pinata.cloud", validation_alias="PINATA_GATEWAY")
    api_url: str = Field("https://api.pinata.cloud", validation_alias="PINATA_API_URL")


class TenderlySettings(BaseSettings):
    """Settings for the transaction simulation provider."""

    model_config = ENV_CONFIG

    api_url: Optional[str] = Field(
        None,
        validation_alias="TENDERLY_API_URL",
        description="Project simulation endpoint, e.g. https://api.tenderly.co/api/v1/account/<a>/project/<p>",
    )
    api_key: Optional[str] = Field(None, validation_alias="TENDERLY_API_KEY")


class Settings(BaseSettings):
    """
    Main Settings class that composes all sub-settings.
    Uses validation_alias in sub-models to map flat env vars to nested structure.
    """

    app: AppSettings = Field(default_factory=AppSettings)
    ethereum: EthereumSettings = Field(default_factory=EthereumSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    pinata: PinataSettings = Field(default_factory=PinataSettings)
    tenderly: TenderlySettings = Field(default_factory=TenderlySettings)

    model_config = ENV_CONFIG


# Singleton instance
settings = Settings()
