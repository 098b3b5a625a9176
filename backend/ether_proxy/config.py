from pydantic_settings import BaseSettings
from functools import lru_cache
import os


# Upstream app we drive. Fixed on purpose, not read from the environment.
ETHER0_URL = "https://ether0.platform.futurehouse.org/"


class Settings(BaseSettings):
    port: int = 3001
    host: str = "0.0.0.0"
    headless: bool = True

    # Warm-up browser
    warm_up_enabled: bool = True
    warm_up_delay: float = 5.0  # seconds after boot

    # Driver timeouts (milliseconds)
    navigation_timeout: int = 60000
    input_timeout: int = 30000
    submit_timeout: int = 30000
    answer_timeout: int = 30000
    read_timeout: int = 5000

    # Scrape loop
    poll_interval: float = 0.3  # seconds
    scrape_max_seconds: float = 300.0  # 0 = wait forever

    # Request blocking
    blocked_extensions: list[str] = [
        ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".woff", ".ttf",
    ]
    media_extensions: list[str] = [".mp4", ".webm", ".ogg", ".mp3", ".wav"]
    block_media: bool = False
    blocked_domains: list[str] = ["analytics", "googletag", "hotjar"]

    # Structure rendering
    smiles_drawer_url: str = "https://unpkg.com/smiles-drawer@2.0.1/dist/smiles-drawer.min.js"
    escape_structure_html: bool = False

    class Config:
        # Look for .env in the repo root (two levels up from backend/ether_proxy/)
        # In production, env vars are injected directly, .env is optional
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def blocked_suffixes(self) -> list[str]:
        if self.block_media:
            return self.blocked_extensions + self.media_extensions
        return self.blocked_extensions


@lru_cache()
def get_settings():
    return Settings()
