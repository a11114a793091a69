"""Configuration management using Pydantic Settings."""
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import PakConfigError


class PakSettings(BaseSettings):
    """Codec settings loaded from ``CHROMEPAK_*`` environment variables."""

    # Decode Budget
    max_resources: int = Field(default=0xFFFF, ge=0, description="Maximum resource count accepted from a header")
    max_resource_bytes: int = Field(default=0xFFFFFFFF, ge=0, description="Maximum payload size of a single resource")
    max_total_bytes: int = Field(default=0xFFFFFFFF, ge=0, description="Maximum summed payload size of an archive")

    # Decoder Behaviour
    strict_offsets: bool = Field(default=False, description="Require the first offset to match the end of the index")
    read_chunk_size: int = Field(default=65536, gt=0, description="Bytes requested per read while loading payloads")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="text", description="Log output format (text or json)")

    class Config:
        env_prefix = "CHROMEPAK_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> PakSettings:
    """Return the process-wide settings instance."""
    try:
        return PakSettings()
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        raise PakConfigError(
            f"invalid CHROMEPAK_* settings: {', '.join(fields)}",
            {"fields": fields},
        ) from exc
