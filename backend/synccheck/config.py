from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from pydantic import Field

from synccheck.validation.escalation import EscalationPolicy


class Settings(BaseSettings):
    app_name: str = "synccheck"
    debug: bool = False
    log_level: str = "WARNING"

    # Server
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
        ]
    )

    # Marker names that tag a field as a reference to another model
    relationship_markers: list[str] = Field(
        default_factory=lambda: ["Relationship", "relationship"]
    )

    # Python declaration source: what makes a class a model type
    model_bases: list[str] = Field(
        default_factory=lambda: ["SQLModel", "Base", "DeclarativeBase", "Model"]
    )
    model_decorators: list[str] = Field(default_factory=lambda: ["model", "dataclass"])

    escalation_policy: EscalationPolicy = EscalationPolicy.COLLECT_ALL

    model_config = SettingsConfigDict(
        env_prefix="SYNCCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        protected_namespaces=("settings_",),
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
