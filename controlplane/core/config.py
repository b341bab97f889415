"""应用配置"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "ClusterControlPlane"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    public_url: str = "http://127.0.0.1:8080"

    db_path: str = "data/controlplane.db"

    secret_key: str = "controlplane-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    log_level: str = "INFO"
    log_file: str = "logs/app.log"
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5

    events_default_limit: int = 10
    events_max_limit: int = 500

    outbound_timeout_seconds: float = 10.0
    slack_api_base: str = "https://slack.com/api"

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
