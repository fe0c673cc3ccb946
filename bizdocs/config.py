from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./bizdocs.db"
    log_level: str = "INFO"
    default_tax_rate: Decimal = Decimal("10")
    default_tax_mode: str = "exclusive"
    default_rounding_policy: str = "floor"
    default_honorific: str = "Messrs."
    page_size: int = 20

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
