"""
Configuration models - Pydantic models for config.yaml

Every field has a default, so an empty or missing config file still yields a
runnable configuration.
"""

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """HTTP listener settings"""
    host: str = Field("0.0.0.0", description="Interface to bind")
    port: int = Field(3000, ge=1, le=65535, description="TCP port")


class AnimationsConfig(BaseModel):
    """On-disk asset layout"""
    root: str = Field("frames", description="Animation root (relative to working directory)")
    metadata_file: str = Field("metadata.json", description="Metadata file name inside each animation directory")
    art_file: str = Field("art.txt", description="Frame document file name inside each animation directory")
    frame_separator: str = Field("====FRAME====", min_length=1, description="Line separating frames")


class StreamingConfig(BaseModel):
    """Frame cadence settings"""
    default_interval_ms: int = Field(100, gt=0, description="Tick period when metadata has no timing")
    min_interval_ms: int = Field(10, gt=0, description="Lower bound on the tick period")


class LoggingConfig(BaseModel):
    """Console logger settings"""
    level: str = Field("INFO", description="DEBUG, INFO, WARN or ERROR")
    colors: bool = Field(True, description="ANSI colored output")


class AppConfig(BaseModel):
    """Complete application configuration"""
    server: ServerConfig = Field(default_factory=ServerConfig)
    animations: AnimationsConfig = Field(default_factory=AnimationsConfig)
    streaming: StreamingConfig = Field(default_factory=StreamingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
