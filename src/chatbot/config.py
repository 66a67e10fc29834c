from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Ollama backend
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    ollama_enabled: bool = True
    ollama_timeout: float = 30.0  # read timeout, seconds
    ollama_connect_timeout: float = 5.0
    ollama_check_interval: int = 60  # seconds between availability probes

    history_max_exchanges: int = 5

    user_timezone: str = "Europe/Paris"
    log_level: str = "INFO"

    @property
    def has_ollama(self) -> bool:
        return bool(self.ollama_enabled and self.ollama_url)


settings = Settings()
