from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "StudyPilot"
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = ""  # DEBUG, INFO, WARNING, ERROR, CRITICAL (empty = auto based on environment)
    log_to_file: bool = True  # Enable file logging

    # Database (SQLite for local dev, PostgreSQL for production)
    database_url: str = "sqlite:///./studypilot.db"

    # CORS (comma-separated origins, empty = local dev defaults)
    allowed_origins: str = ""

    # Frontend
    frontend_url: str = "http://localhost:5173"

    # Uploads
    max_upload_mb: int = 25

    # Anthropic Claude (query generation + summarizer)
    anthropic_api_key: str = ""
    claude_model: str = "claude-sonnet-4-5-20250929"

    # YouTube Data API v3
    youtube_api_key: str = ""
    youtube_region: str = "US"
    youtube_max_results: int = 8

    # Topic extraction
    reading_words_per_minute: int = 130
    summary_max_sentences: int = 3
    summary_max_chars: int = 600
    max_topics: int = 20

    # Recommendations
    max_queries: int = 5
    max_query_length: int = 80
    videos_per_query: int = 2

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
