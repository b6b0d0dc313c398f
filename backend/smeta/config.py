# backend/smeta/config.py
from typing import List, Literal
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/smeta.db"  # Default if not in .env

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    CORS_ORIGIN: str = "http://localhost:3000"
    ENVIRONMENT: Literal["development", "production"] = "development"
    FRONTEND_DIST_PATH: Path | None = None
    LOG_LEVEL: str = "INFO"

    # Storage Paths
    STORAGE_PATH: Path = Path("storage")
    TEMP_PATH: Path | None = None  # Will be set based on STORAGE_PATH
    DOCUMENTS_PATH: Path | None = None  # Will be set based on STORAGE_PATH
    KPIS_PATH: Path | None = None  # Will be set based on STORAGE_PATH

    # Upload limits (bytes)
    MAX_DOCUMENT_SIZE: int = 50 * 1024 * 1024
    MAX_KPI_SIZE: int = 100 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def model_post_init(self, __context) -> None:
        """Post initialization hook to set derived paths"""
        # Convert STORAGE_PATH to Path if it's a string
        if isinstance(self.STORAGE_PATH, str):
            self.STORAGE_PATH = Path(self.STORAGE_PATH)

        # Set derived paths if not explicitly provided
        self.TEMP_PATH = Path(self.TEMP_PATH) if self.TEMP_PATH else self.STORAGE_PATH / "temp"
        self.DOCUMENTS_PATH = Path(self.DOCUMENTS_PATH) if self.DOCUMENTS_PATH else self.STORAGE_PATH / "documents"
        self.KPIS_PATH = Path(self.KPIS_PATH) if self.KPIS_PATH else self.STORAGE_PATH / "kpis"

        # Create directories
        self.create_storage_dirs()

    def create_storage_dirs(self) -> None:
        """Create necessary storage directories if they don't exist"""
        for path in [self.STORAGE_PATH, self.TEMP_PATH, self.DOCUMENTS_PATH, self.KPIS_PATH]:
            path.mkdir(parents=True, exist_ok=True)

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

settings = Settings()
