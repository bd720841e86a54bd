"""
Pydantic Models and Schemas
===========================

Data models for a single rasterization run: invocation arguments, the output
geometry produced by the size resolver, and the render session driven by the
orchestrator.
"""

from typing import Annotated, Optional, Dict, Any, Union, Literal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# Enums
class OutputFormat(str, Enum):
    """Artifact format, derived once from the output path."""
    PDF = "pdf"
    PNG = "png"
    JPEG = "jpeg"

    @classmethod
    def from_path(cls, output: str) -> "OutputFormat":
        """Derive the output format from a file path suffix."""
        # Exact, case-sensitive match; "report.PDF" is rendered as an image.
        if output[-4:] == ".pdf":
            return cls.PDF
        if output.lower().endswith((".jpg", ".jpeg")):
            return cls.JPEG
        return cls.PNG


class Orientation(str, Enum):
    """Paper orientation."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class LoadStatus(str, Enum):
    """Navigation completion status reported by the engine."""
    SUCCESS = "success"
    FAIL = "fail"


class SessionState(str, Enum):
    """Render session lifecycle states."""
    IDLE = "idle"
    NAVIGATING = "navigating"
    SETTLING = "settling"
    CAPTURING = "capturing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.SUCCEEDED, SessionState.FAILED)


# Invocation
class InvocationArgs(BaseModel):
    """Positional command-line arguments of one invocation."""
    address: str = Field(..., description="URL to load")
    output: str = Field(..., description="Output file path; the suffix implies the format")
    size_spec: Optional[str] = Field(
        None, description='Size spec, e.g. "800px*600px", "1920px", "A4", "10cm*20cm"'
    )
    zoom: Optional[str] = Field(None, description="Zoom factor, carried as a numeric string")

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.from_path(self.output)


# Geometry Models
class ClipRect(BaseModel):
    """Sub-region of the rendered surface written to a raster output."""
    model_config = ConfigDict(frozen=True)

    top: int = 0
    left: int = 0
    width: int
    height: int


class PixelViewport(BaseModel):
    """Raster geometry: a pixel viewport and an optional clip rectangle."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["viewport"] = "viewport"
    width: int = Field(..., description="Viewport width in pixels")
    height: int = Field(..., description="Viewport height in pixels")
    clip: Optional[ClipRect] = Field(None, description="Clip rectangle; absent means full page")


class PaperSize(BaseModel):
    """Paginated geometry with explicit paper dimensions (CSS units)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["paper_size"] = "paper_size"
    width: str = Field(..., description='Paper width, e.g. "5in"')
    height: str = Field(..., description='Paper height, e.g. "7.5in"')
    margin: str = Field("0px", description="Margin applied to every side")


class PaperFormat(BaseModel):
    """Paginated geometry with a named paper format."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["paper_format"] = "paper_format"
    name: str = Field(..., description='Paper format name, e.g. "A4", "Letter"')
    orientation: Orientation = Field(Orientation.PORTRAIT, description="Paper orientation")
    margin: str = Field("1cm", description="Margin applied to every side")


OutputGeometry = Annotated[
    Union[PixelViewport, PaperSize, PaperFormat], Field(discriminator="kind")
]


# Session Models
class RenderSession(BaseModel):
    """State of one load/settle/capture run."""
    address: str = Field(..., description="URL to load")
    output: str = Field(..., description="Output file path")
    output_format: OutputFormat = Field(..., description="Artifact format")
    geometry: OutputGeometry = Field(..., description="Resolved output geometry")
    zoom: Optional[str] = Field(None, description="Zoom factor applied to the page")
    state: SessionState = Field(SessionState.IDLE, description="Current lifecycle state")
    completed: bool = Field(False, description="Whether the session reached a terminal state")
    error: Optional[str] = Field(None, description="Diagnostic for a failed session")


class CaptureResult(BaseModel):
    """Result of writing the current frame to disk."""
    path: str = Field(..., description="Written file path")
    output_format: OutputFormat = Field(..., description="Artifact format")
    file_size: int = Field(..., ge=0, description="File size in bytes")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Capture metadata")
