"""Application configuration using pydantic-settings.

Every provider reads its endpoint, credentials and routing knobs from the
environment (or a ``.env`` file); the factories in ``dexsolver.routing``
turn these into provider configs.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# CoW Protocol settlement contract, the same address on every supported chain
DEFAULT_SETTLEMENT = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Runtime
    # ======================
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Chain
    # ======================
    chain_id: int = Field(default=1, description="Chain the solver quotes for")
    settlement_address: str = Field(
        default=DEFAULT_SETTLEMENT, description="Settlement contract executing the swaps"
    )
    http_timeout: float = Field(default=30.0, description="Upstream request timeout (seconds)")

    # ======================
    # 0x
    # ======================
    zeroex_endpoint: str = Field(
        default="https://api.0x.org/swap/allowance-holder/",
        description="Versioned 0x swap API endpoint",
    )
    zeroex_api_key: str = Field(default="", description="0x API key")
    zeroex_excluded_sources: str = Field(
        default="", description="Comma-separated 0x liquidity sources to exclude"
    )

    # ======================
    # 1inch
    # ======================
    oneinch_endpoint: str = Field(
        default="https://api.1inch.io/v5.0/1/", description="1inch swap API endpoint"
    )
    oneinch_api_key: str = Field(default="", description="1inch API key")
    oneinch_liquidity: str = Field(
        default="any", description="Liquidity policy: any, only or exclude"
    )
    oneinch_liquidity_sources: str = Field(
        default="", description="Comma-separated 1inch protocol ids for the policy"
    )
    oneinch_referrer: Optional[str] = Field(default=None, description="1inch referrer address")
    oneinch_main_route_parts: Optional[int] = Field(default=None)
    oneinch_connector_tokens: Optional[int] = Field(default=None)
    oneinch_complexity_level: Optional[int] = Field(default=None)

    # ======================
    # Balancer
    # ======================
    balancer_sor_endpoint: str = Field(
        default="https://api-v3.balancer.fi/", description="Balancer SOR GraphQL endpoint"
    )
    balancer_vault_address: str = Field(
        default="0xBA12222222228d8Ba445958a75a0704d566BF2C8",
        description="Balancer V2 Vault contract",
    )
    balancer_query_batch_swap: bool = Field(
        default=False, description="Refresh SOR amounts with an on-chain queryBatchSwap"
    )

    @property
    def zeroex_excluded_source_list(self) -> list[str]:
        return _split(self.zeroex_excluded_sources)

    @property
    def oneinch_liquidity_source_list(self) -> list[str]:
        return _split(self.oneinch_liquidity_sources)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "debug": self.debug,
            "chain_id": self.chain_id,
            "settlement": self.settlement_address,
            "zeroex": {
                "endpoint": self.zeroex_endpoint,
                "api_key": "***" if self.zeroex_api_key else "(not set)",
                "excluded_sources": self.zeroex_excluded_source_list,
            },
            "oneinch": {
                "endpoint": self.oneinch_endpoint,
                "api_key": "***" if self.oneinch_api_key else "(not set)",
                "liquidity": self.oneinch_liquidity,
                "sources": self.oneinch_liquidity_source_list,
            },
            "balancer": {
                "endpoint": self.balancer_sor_endpoint,
                "vault": self.balancer_vault_address,
                "query_batch_swap": self.balancer_query_batch_swap,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
