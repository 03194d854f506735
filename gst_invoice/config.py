from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing at startup."""


class Settings(BaseSettings):
    SHOP: str = Field(min_length=1)
    SHOPIFY_ACCESS_TOKEN: str = Field(min_length=1)
    SHOPIFY_API_VERSION: str = "2024-10"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    INVOICE_DIR: Path = Path("./invoices")

    SELLER_NAME: str = "Your Business"
    SELLER_ADDRESS: str = ""
    SELLER_GSTIN: str = ""

    HTTP_TIMEOUT: float = 30.0
    RENDER_TIMEOUT: float = 60.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def api_base_url(self) -> str:
        return f"https://{self.SHOP}/admin/api/{self.SHOPIFY_API_VERSION}"


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigurationError(f"Missing or invalid settings: {fields}") from e


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
