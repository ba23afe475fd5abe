"""
Ink analysis models.

This module contains the models flowing through the ink pipeline:
- Processing options
- Per-zone ink levels (the pipeline result)
- API requests and responses
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.constants import PressConstants
from core.enums import InkChannel


class ProcessingOptions(BaseModel):
    """
    Options for one pipeline run.

    Bounds are checked by InkService.validate_options, which raises
    ConfigError before any pixel work.
    """

    num_keys: int = Field(PressConstants.DEFAULT_NUM_KEYS, description="Number of ink key zones")
    black_generation: float = Field(
        PressConstants.DEFAULT_BLACK_GENERATION, description="GCR amount, 0 to 1"
    )
    rotation: int = Field(0, description="Clockwise rotation: 0, 90, 180 or 270")
    plate_width: float = Field(PressConstants.PLATE_WIDTH_MM, description="Plate width (mm)")
    image_width: float = Field(..., description="Printed image width (mm)")

    @classmethod
    def from_inches(cls, image_width_in: float, **kwargs) -> "ProcessingOptions":
        """Build options from a print width given in inches."""
        return cls(image_width=image_width_in * PressConstants.MM_PER_INCH, **kwargs)


class ZoneLevels(BaseModel):
    """Ink coverage of a single key zone"""

    zone: int = Field(..., description="1-based zone number")
    c: int
    m: int
    y: int
    k: int


class InkLevels(BaseModel):
    """Average CMYK coverage per ink key zone, each value 0-100"""

    c: List[int]
    m: List[int]
    y: List[int]
    k: List[int]

    @property
    def num_keys(self) -> int:
        return len(self.c)

    def channel(self, name: str) -> List[int]:
        return getattr(self, name)

    def averages(self) -> Dict[str, float]:
        """Mean coverage of each channel across all zones."""
        result = {}
        for channel in InkChannel:
            values = self.channel(channel.value)
            result[channel.value] = round(sum(values) / len(values), 1) if values else 0.0
        return result

    def zones(self) -> List[ZoneLevels]:
        """Per-zone records, zone numbers starting at 1."""
        return [
            ZoneLevels(zone=i + 1, c=c, m=m, y=y, k=k)
            for i, (c, m, y, k) in enumerate(zip(self.c, self.m, self.y, self.k))
        ]


class PlateGeometry(BaseModel):
    """Pixel geometry of the plate canvas used for aggregation"""

    image_width_px: int
    image_height_px: int
    plate_width_px: int
    x_offset_px: int
    clipped_columns: int = 0


class InkAnalysisResult(BaseModel):
    """Ink levels together with the geometry and timing that produced them"""

    levels: InkLevels
    geometry: PlateGeometry
    options: ProcessingOptions
    processing_time_ms: int = 0
    preview_base64: Optional[str] = None


class InkAnalyzeBase64Request(BaseModel):
    """Request to analyze a base64 encoded image (or data URL)"""

    image_base64: str = Field(..., description="Base64 image payload or data: URL")
    num_keys: Optional[int] = None
    black_generation: Optional[float] = None
    rotation: int = 0
    plate_width: Optional[float] = Field(None, description="Plate width (mm)")
    image_width: Optional[float] = Field(None, description="Printed image width (mm)")
    image_width_in: Optional[float] = Field(None, description="Printed image width (inches)")
    include_preview: bool = False


class InkAnalysisResponse(BaseModel):
    """Response from ink analysis"""

    success: bool
    levels: InkLevels
    averages: Dict[str, float]
    zones: List[ZoneLevels]
    geometry: PlateGeometry
    options: ProcessingOptions
    processing_time_ms: int
    preview_base64: Optional[str] = None

    @classmethod
    def from_result(cls, result: InkAnalysisResult) -> "InkAnalysisResponse":
        return cls(
            success=True,
            levels=result.levels,
            averages=result.levels.averages(),
            zones=result.levels.zones(),
            geometry=result.geometry,
            options=result.options,
            processing_time_ms=result.processing_time_ms,
            preview_base64=result.preview_base64,
        )


class PrintWidthPreset(BaseModel):
    """Named print width"""

    name: str
    width_in: float
    width_mm: float


class InkDefaultsResponse(BaseModel):
    """Press defaults used when a request omits options"""

    num_keys: int
    black_generation: float
    plate_width_mm: float
    rotations: List[int]
    print_width_presets: List[PrintWidthPreset]
