"""
Enrichment endpoint configuration.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator

from syslog_analyzer.config import get_settings


class EnrichmentConfig(BaseModel):
    """
    Where to send enrichment requests and which model to ask.

    Treated as an opaque value: the pipeline is handed a new one whenever
    the configuration changes and passes it along with every call.
    """

    endpoint: str = Field(
        description="Base URL of the Ollama server"
    )
    model: str = Field(
        description="Model identifier, e.g. 'llama3.2'"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "endpoint": "http://localhost:11434",
                "model": "llama3.2",
            }
        }
    )

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("endpoint must not be empty")
        return value.rstrip("/")

    @classmethod
    def from_settings(cls) -> "EnrichmentConfig":
        """Build the default configuration from application settings."""
        settings = get_settings()
        return cls(endpoint=settings.ollama_endpoint, model=settings.ollama_model)
