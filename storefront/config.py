from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "storefront"

    # Bearer token shared by the revalidation webhook and its callers
    REVALIDATE_WEBHOOK_SECRET: str | None = None

    SITE_URL: str = "http://localhost:8000"
    PUBLIC_HOST: str | None = None

    PAGE_CACHE_TTL_SECONDS: int = 180
    PRODUCTS_PAGE_SIZE: int = 12

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def base_url(self) -> str:
        if self.PUBLIC_HOST:
            return f"https://{self.PUBLIC_HOST}"
        return self.SITE_URL.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
