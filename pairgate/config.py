"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Record store
    data_dir: str = "data"

    # Pairing codes
    pair_code_ttl_hours: int = 24

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "pairgate"

    # CORS
    cors_origins: list[str] = ["*"]

    # Rate limiting (slowapi storage backend)
    rate_limit_storage_uri: str = "memory://"

    # Upstream APIs
    upstream_timeout_seconds: float = 30.0
    ai_upstream_url: str = "https://lance-frank-asta.onrender.com/api/gpt"
    song_upstream_url: str = "https://izumiiiiiiii.dpdns.org/downloader/youtube-play"
    image_upstream_url: str = "https://shizoapi.onrender.com/api/ai/imagine"
    image_upstream_api_key: str = "shizo"
    tiktok_upstream_url: str = "https://api.siputzx.my.id/api/stalk/tiktok"
    pies_upstream_url: str = "https://shizoapi.onrender.com/api/pies"

    # Testing
    testing: bool = False  # Set to True during tests to disable rate limiting


settings = Settings()
