import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Backend base URLs
    store_api_base: str = Field(
        default="https://x8ki-letl-twmt.n7.xano.io/api:OdHOEeXs",
        alias="STORE_API_BASE",
    )
    auth_api_base: str = Field(
        default="https://x8ki-letl-twmt.n7.xano.io/api:KBcldO_7",
        alias="AUTH_API_BASE",
    )

    # Request timeouts (seconds)
    request_timeout: float = Field(default=15.0, alias="REQUEST_TIMEOUT")
    upload_timeout: float = Field(default=30.0, alias="UPLOAD_TIMEOUT")

    # Read cache (milliseconds)
    cache_ttl_ms: int = Field(default=120_000, alias="CACHE_TTL_MS")
    category_cache_ttl_ms: int = Field(default=300_000, alias="CATEGORY_CACHE_TTL_MS")
    cache_debug: bool = Field(default=False, alias="CACHE_DEBUG")

    # 429 retry policy for GET requests (retries after the first attempt)
    retry_max_retries: int = Field(default=2, alias="RETRY_MAX_RETRIES")
    retry_base_delay: float = Field(default=0.25, alias="RETRY_BASE_DELAY")


global_settings = Settings.model_validate(dict(os.environ))
