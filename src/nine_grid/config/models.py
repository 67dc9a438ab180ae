"""
Pydantic models for nine-grid slicer configuration.

Defines configuration schemas with validation, defaults, and documentation
for slicing, border removal, output and logging.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Upper bound of the per-channel "black" threshold
MAX_SENSITIVITY = 60


class LogLevel(str, Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProcessingOptions(BaseModel):
    """Caller-supplied options for a single processing run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    remove_black_borders: bool = Field(
        default=True,
        description="Whether to trim uniform dark borders from each cell"
    )
    sensitivity: int = Field(
        default=20,
        ge=0,
        le=MAX_SENSITIVITY,
        description="Per-channel threshold; a pixel is black when R, G and B are all <= this value"
    )


class ProcessingConfig(BaseModel):
    """Configuration for encoding and execution of a run."""

    model_config = ConfigDict(validate_assignment=True)

    jpeg_quality: int = Field(
        default=95,
        ge=1,
        le=100,
        description="JPEG quality used when encoding slices"
    )
    parallel: bool = Field(
        default=False,
        description="Whether to process the nine cells in worker processes"
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of worker processes (default: CPU count - 1)"
    )


class OutputConfig(BaseModel):
    """Configuration for exporting slices to disk."""

    model_config = ConfigDict(validate_assignment=True)

    output_dir: str = Field(
        default="output/nine_grid_slices",
        description="Directory where exported slices are written"
    )
    filename_template: str = Field(
        default="slice_{number}.jpg",
        description="Filename for an exported slice; {number} is the 1-based slice number"
    )

    @field_validator('output_dir')
    @classmethod
    def validate_directory_path(cls, v):
        """Validate directory path format."""
        if not v or not isinstance(v, str):
            raise ValueError("Directory path must be a non-empty string")
        return v.replace('\\', '/')  # Normalize path separators

    @field_validator('filename_template')
    @classmethod
    def validate_filename_template(cls, v):
        """Ensure the template numbers each slice."""
        if "{number}" not in v:
            raise ValueError("filename_template must contain '{number}'")
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging setup."""

    model_config = ConfigDict(validate_assignment=True)

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Base logging level"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )
    use_rich: bool = Field(
        default=True,
        description="Whether to use rich console output"
    )
    format_style: str = Field(
        default="detailed",
        pattern="^(simple|detailed|minimal)$",
        description="Logging format style"
    )


class Config(BaseModel):
    """Main configuration model for the nine-grid slicer."""

    model_config = ConfigDict(
        extra="forbid",  # Prevent extra fields
        validate_assignment=True,  # Validate on assignment
        use_enum_values=True,  # Use enum values in serialization
    )

    options: ProcessingOptions = Field(
        default_factory=ProcessingOptions,
        description="Border removal options"
    )
    processing: ProcessingConfig = Field(
        default_factory=ProcessingConfig,
        description="Encoding and execution configuration"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Export configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )

    # Meta configuration
    version: str = Field(
        default="1.0.0",
        description="Configuration version"
    )
    description: Optional[str] = Field(
        default=None,
        description="Configuration description"
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        return self.model_dump(mode="json")
