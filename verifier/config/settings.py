"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from verifier.config.constants import (
    BLOCKCHAIN_RPC_TIMEOUT,
    DEFAULT_LOG_CHUNK_SIZE,
    DEFAULT_LOOKBACK_BLOCKS,
    DEFAULT_MIN_CONFIRMATIONS,
    DEFAULT_TOKEN_CONTRACT_ADDRESS,
    DEFAULT_TOKEN_DECIMALS,
    MAX_LOOKBACK_BLOCKS,
    MAX_MIN_CONFIRMATIONS,
)
from verifier.utils.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Blockchain RPC
    # Optional at import time: a missing endpoint is reported per request
    # as ConfigurationError instead of preventing the process from starting.
    bsc_rpc_url: str | None = None
    rpc_timeout_seconds: float = Field(
        default=BLOCKCHAIN_RPC_TIMEOUT,
        gt=0,
        le=120,
        description="Timeout for a single JSON-RPC call in seconds",
    )
    log_chunk_size: int = Field(
        default=DEFAULT_LOG_CHUNK_SIZE,
        ge=1,
        description="Maximum block range per eth_getLogs call",
    )

    # Deposit wallet and token
    deposit_address: str | None = None
    token_contract_address: str = DEFAULT_TOKEN_CONTRACT_ADDRESS
    token_decimals: int = Field(
        default=DEFAULT_TOKEN_DECIMALS,
        ge=0,
        le=36,
        description="Token fixed-point precision",
    )

    # Scan defaults (overridable per request)
    default_lookback_blocks: int = Field(
        default=DEFAULT_LOOKBACK_BLOCKS,
        ge=1,
        le=MAX_LOOKBACK_BLOCKS,
        description="How many blocks back from the head to scan",
    )
    default_min_confirmations: int = Field(
        default=DEFAULT_MIN_CONFIRMATIONS,
        ge=0,
        le=MAX_MIN_CONFIRMATIONS,
        description="Blocks required on top of a transfer before crediting",
    )
    enforce_min_amount: bool = Field(
        default=False,
        description="Skip transfers below the caller's minAmount when True",
    )

    # Caller authentication (tokens issued by the identity provider)
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None

    # HTTP server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if self.jwt_secret is not None and len(self.jwt_secret) < 32:
                raise ValueError(
                    'JWT_SECRET must be at least 32 characters in production.'
                )
        return self

    @field_validator('deposit_address', 'token_contract_address')
    @classmethod
    def validate_eth_address(
        cls, v: str | None, info: ValidationInfo
    ) -> str | None:
        """Validate Ethereum address format."""
        if v is None or v == "":
            if info.field_name == 'token_contract_address':
                return DEFAULT_TOKEN_CONTRACT_ADDRESS
            return None
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError(
                f'Invalid Ethereum address: {v}. '
                'Must start with 0x and be 42 characters long.'
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f'Invalid Ethereum address format: {v}') from exc
        return v.lower()

    @field_validator('bsc_rpc_url')
    @classmethod
    def validate_rpc_url(cls, v: str | None) -> str | None:
        """Validate RPC endpoint URL."""
        if v is None or v == "":
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError('BSC_RPC_URL must be an http(s) URL')
        return v

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace(
                'postgresql://', 'postgresql+asyncpg://', 1
            )
        return self.database_url

    def require_chain_config(self) -> tuple[str, str]:
        """
        Return RPC endpoint and deposit address.

        Raises:
            ConfigurationError: If either setting is absent
        """
        missing = []
        if not self.bsc_rpc_url:
            missing.append("BSC_RPC_URL")
        if not self.deposit_address:
            missing.append("DEPOSIT_ADDRESS")
        if missing:
            raise ConfigurationError(
                f"Missing BSC configuration: {', '.join(missing)}"
            )
        return self.bsc_rpc_url, self.deposit_address


# Global settings instance
settings = Settings()
