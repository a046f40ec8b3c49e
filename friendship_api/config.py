from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .secrets_manager import SecretsManager

@lru_cache(maxsize=None)
def get_secrets_manager(region_name: str) -> SecretsManager:
    """One manager per region, so its cache is shared by every lookup."""
    return SecretsManager(region_name=region_name)

class Settings(BaseSettings):
    aws_region: str = "us-east-1"
    environment: str = "development"
    host: str = "localhost"
    db_username: str = "postgres"
    db_password: SecretStr = SecretStr("postgres")
    database: str = "friendship"
    port: int = 5432
    # Full SQLAlchemy URL, takes precedence over the individual fields above
    database_url: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_pre_ping: bool = True
    uploads_base_url: str = "http://localhost:5000/uploads"
    firebase_project_id: Optional[str] = None
    # Custom claim holding the numeric users.id of a Firebase user
    user_id_claim: str = "app_user_id"
    dev_user_id: str = "1"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("uploads_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("db_username", "db_password", mode="before")
    @classmethod
    def load_secrets(cls, v, info):
        if info.data.get("environment") == "production":
            try:
                secrets = get_secrets_manager(info.data.get("aws_region"))
                if info.field_name == "db_username":
                    v = secrets.get_db_credentials()['username']
                elif info.field_name == "db_password":
                    v = secrets.get_db_credentials()['password']
                return v
            except Exception:
                # If there's an error getting secrets, fall back to the env value
                return v
        return v

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg://{self.db_username}:{self.db_password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.database}"
        )

settings = Settings()
