from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "DoughPilot API"
    api_prefix: str = "/api/v1"
    database_url: str = "sqlite:///./doughpilot.db"
    auto_create_tables: bool = False

    default_gr_per_liter: float = 286.0
    default_density: float = 1.0
    default_hydration: float = 70.0
    default_flour_target: float = 500.0
    default_unit_system: str = "metric"
    state_key: str = "shokupanState_v4"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
