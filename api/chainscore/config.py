from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "ChainScore"
    debug: bool = False
    anthropic_api_key: str = ""

    # Insight narration (optional LLM summary)
    narrative_model: str = "claude-haiku-4-5-20251001"
    narrative_timeout_seconds: float = 8.0
    narrative_max_output_tokens: int = 400


settings = Settings()
