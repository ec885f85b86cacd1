"""
Configuration settings for the 약정보 site and its content tooling.
Loads from environment variables and the .env file.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Site and tooling settings.

    Field names double as environment variable names (case-insensitive);
    a few fields also accept the alias used by the public data portal docs.
    """

    # Site info
    site_name: str = "약정보"
    site_tagline: str = "일반의약품 최저가 비교 가이드"
    base_url: str = Field(default="https://pharm.jjyu.co.kr", alias="SITE_BASE_URL")
    editor_name: str = "약정보 에디터"
    version: str = "0.1.0"

    # Content locations
    content_dir: Path = Field(default=Path("content"), alias="CONTENT_DIR")
    images_dir: Path = Field(default=Path("public/images"), alias="IMAGES_DIR")
    placeholder_image: str = "/images/placeholder.svg"

    # Feed / sitemap dates
    default_content_date: str = "2026-02-22"
    about_last_modified: str = "2026-02-22"

    # Server settings
    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    reload: bool = Field(default=False, alias="API_RELOAD")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    slow_request_ms: int = 300

    # Public drug information API (e약은요)
    drug_api_url: str = (
        "http://apis.data.go.kr/1471000/DrbEasyDrugInfoService/getDrbEasyDrugList"
    )
    drug_api_key: Optional[str] = Field(default=None, alias="DATA_GO_KR_KEY")
    drug_api_page_size: int = 100
    drug_api_delay: float = 0.3  # seconds between requests
    drug_api_timeout: int = 30

    # Marketplace (affiliate deep links)
    marketplace_url: str = "https://barkiri.com"
    marketplace_cdn_url: str = "https://barkiri.edge.naverncp.com/product"
    resolver_delay: float = 1.0
    resolver_timeout: int = 8
    verify_timeout: int = 5
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
        populate_by_name=True,  # Allow using both field name and alias
    )

    @property
    def articles_dir(self) -> Path:
        return self.content_dir / "articles"

    @property
    def products_dir(self) -> Path:
        return self.content_dir / "products"

    def absolute_url(self, path: str = "") -> str:
        """Join a site-relative path onto the base URL."""
        if not path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
