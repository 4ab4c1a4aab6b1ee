from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Agent identity
    agent_name: str = "research-agent"
    agent_version: str = "1.0.0"
    user_agent: str = "ResearchAgent/1.0 (+https://github.com/tedkaczynski-the-bot/research-agent)"

    # OpenRouter (optional; synthesis falls back when unset)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "anthropic/claude-sonnet-4.5"
    openrouter_model: str = ""
    llm_timeout_seconds: float = 60.0
    llm_temperature: float = 0.3
    synthesis_max_tokens: int = 4096
    analysis_max_tokens: int = 2048

    # Brave search (optional; deep research runs without sources when unset)
    brave_api_key: str = ""
    brave_search_url: str = "https://api.search.brave.com/res/v1/web/search"
    search_results_per_query: int = 5
    search_timeout_seconds: float = 10.0
    max_parallel_requests: int = 4

    # Page fetching
    fetch_timeout_seconds: float = 10.0
    fetch_max_chars: int = 10000
    min_source_chars: int = 200
    source_excerpt_chars: int = 3000

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = ""  # empty disables the file sink

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def active_model(self) -> str:
        return self.openrouter_model or self.default_model


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
