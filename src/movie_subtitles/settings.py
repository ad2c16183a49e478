from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Movie Subtitles service settings.

    All settings can be overridden via environment variables or a .env file.
    Environment variables use the ``MOVIE_SUBS_`` prefix and uppercase names
    (e.g., MOVIE_SUBS_PORT=8080, MOVIE_SUBS_USE_RELAY=false).
    """
    host: str = "0.0.0.0"
    port: int = 3000

    # Upstream subtitle site
    upstream_base: str = "https://yifysubtitles.ch"
    movie_path_template: str = "/movie-imdb/{movie_id}"
    extractor: str = "yifysubtitles"

    # The relay fetches the target URL on our behalf (the site blocks direct access)
    relay_url: str = "https://sudo-proxy.lustycodes.workers.dev/?destination="
    use_relay: bool = True

    request_timeout: float = 20.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    )

    # Origin used for the self-referential extract links; request origin when unset
    public_base_url: Optional[str] = None

    # Parent of the per-job extraction directories; system temp dir when unset
    work_dir: Optional[str] = None
    max_archive_bytes: int = 10_000_000
    max_extracted_bytes: int = 50_000_000

    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None
    metrics_enabled: bool = True

    class Config:
        env_prefix = "MOVIE_SUBS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def origin(self) -> str:
        return self.upstream_base.rstrip("/")


settings = Settings()
