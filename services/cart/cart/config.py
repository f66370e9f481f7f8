"""
Configuration management for the cart
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from cart.pricing import FREE_SHIPPING_THRESHOLD


class Config(BaseSettings):
    """Cart configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CART_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pricing
    free_shipping_threshold: float = FREE_SHIPPING_THRESHOLD
    strict_region_lookup: bool = True


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create configuration singleton"""
    global _config
    if _config is None:
        _config = Config()
    return _config
