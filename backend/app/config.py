from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "DocSummarizer"
    # Cap upload sizes to reduce memory/disk pressure from oversized files.
    max_upload_bytes: int = 20 * 1024 * 1024  # 20 MiB
    max_summary_chars: int = 15_000
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    public_base_url: str = "http://127.0.0.1:8000"
    cors_origins: list[str] = ["http://127.0.0.1:3000", "http://localhost:3000"]
    log_level: str = "INFO"

    # OpenAI-compatible chat completion endpoint (DeepSeek by default)
    llm_api_key: str = ""
    llm_base_url: str = "https://api.deepseek.com/v1"
    llm_model: str = "deepseek-chat"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1000
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 1

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    @property
    def blobs_dir(self) -> Path:
        return self.data_path / "documents"

    model_config = {"env_prefix": "DOCSUM_"}


settings = Settings()
