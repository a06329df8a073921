"""
PropNotes 설정 관리

모든 설정값은 .env 파일에서 관리합니다.
사용법:
    from app.config import settings
    url = settings.DATABASE_URL
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # .env에 정의되지 않은 변수 무시
    )

    # === 환경 ===
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # === 데이터베이스 ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./propnotes.db"
    DB_ECHO: bool = False

    # === LLM 공통 ===
    # "groq" (HTTP) 또는 "llama_cpp" (로컬 GGUF)
    LLM_PROVIDER: str = "groq"
    LLM_TEMPERATURE: float = 0.0
    LLM_TIMEOUT: int = 30
    NOTE_ANALYSIS_MAX_TOKENS: int = 150
    FILTER_EXTRACTION_MAX_TOKENS: int = 300

    # === Groq (OpenAI 호환 API) ===
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_API_URL: str = "https://api.groq.com/openai/v1/chat/completions"

    # === 로컬 LLM (llama.cpp) ===
    MODEL_PATH: str = "models/Qwen2.5-7B-Instruct-Q4_K_M.gguf"
    MODEL_N_CTX: int = 4096
    MODEL_N_GPU_LAYERS: int = 0


# 싱글톤 인스턴스
settings = Settings()
