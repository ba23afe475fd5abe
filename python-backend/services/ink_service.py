"""
Ink Service - Orchestrates the image-to-ink-zone pipeline.

validate options -> decode -> transform -> composite -> aggregate

Decoding is the only asynchronous step; everything after it runs
synchronously on the caller's task. The service keeps no per-call state,
so concurrent calls are independent.
"""

import asyncio
import inspect
import logging
import math
from typing import Any, Callable, Optional

import numpy as np

from api.exceptions import ConfigError, DecodeError
from core.constants import InkConstants, PressConstants
from core.image.converters import decode_image
from core.image.processors import ImageProcessors
from core.utils.decorators import timer
from inking.geometry import check_dimensions, transform
from inking.plate import composite_on_plate, image_as_plate
from inking.zones import aggregate_zones
from schemas.ink import InkAnalysisResult, InkLevels, PlateGeometry, ProcessingOptions

logger = logging.getLogger(__name__)


class InkService:
    """
    Service for ink key zone estimation.

    The raster decoder is an injectable collaborator: any callable (sync or
    async) taking an image source and returning an RGBA array.
    """

    def __init__(
        self,
        decoder: Callable[[Any], Any] = decode_image,
        process_width: int = InkConstants.PROCESS_WIDTH,
        alpha_threshold: int = InkConstants.ALPHA_THRESHOLD,
        band_rows: int = InkConstants.DEFAULT_BAND_ROWS,
        preview_width: int = 640,
        max_num_keys: int = PressConstants.MAX_NUM_KEYS,
        max_plate_px: int = InkConstants.MAX_PLATE_WIDTH_PX,
    ):
        """
        Initialize ink service.

        Args:
            decoder: Raster decoder collaborator
            process_width: Width the source is rescaled to before rotation
            alpha_threshold: Alpha under which a pixel carries no ink
            band_rows: Rows converted per aggregation step
            preview_width: Width of optional plate preview thumbnails
            max_num_keys: Most ink keys a request may ask for
            max_plate_px: Widest plate canvas allowed
        """
        self.decoder = decoder
        self.process_width = process_width
        self.alpha_threshold = alpha_threshold
        self.band_rows = band_rows
        self.preview_width = preview_width
        self.max_num_keys = max_num_keys
        self.max_plate_px = max_plate_px

    @staticmethod
    def validate_options(
        options: ProcessingOptions, max_num_keys: int = PressConstants.MAX_NUM_KEYS
    ) -> None:
        """
        Check options before any pixel work.

        Raises:
            ConfigError: With the first offending field
        """
        if not 1 <= options.num_keys <= max_num_keys:
            raise ConfigError(
                f"Number of ink keys must be between 1 and {max_num_keys}, got {options.num_keys}"
            )

        bg = options.black_generation
        if not (math.isfinite(bg) and 0 <= bg <= 1):
            raise ConfigError(f"Black generation must be between 0 and 1, got {bg}")

        if options.rotation not in InkConstants.ROTATIONS:
            raise ConfigError(
                f"Rotation must be one of {InkConstants.ROTATIONS}, got {options.rotation}"
            )

        if not (math.isfinite(options.plate_width) and options.plate_width > 0):
            raise ConfigError(f"Plate width must be positive, got {options.plate_width}")

        if not (math.isfinite(options.image_width) and options.image_width > 0):
            raise ConfigError(f"Image width must be positive, got {options.image_width}")

    async def decode(self, image_source: Any) -> np.ndarray:
        """
        Run the raster decoder without blocking the event loop.

        Raises:
            DecodeError: If the decoder fails; the original error is chained
            GeometryError: If the decoded raster has no pixels
        """
        try:
            if inspect.iscoroutinefunction(self.decoder):
                raster = await self.decoder(image_source)
            else:
                raster = await asyncio.to_thread(self.decoder, image_source)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(str(e) or e.__class__.__name__) from e

        raster = np.asarray(raster)
        check_dimensions(raster, "Decoded")
        return raster

    def analyze(
        self,
        raster: np.ndarray,
        options: ProcessingOptions,
        use_plate: bool = True,
        include_preview: bool = False,
    ) -> InkAnalysisResult:
        """
        Run the synchronous stages over an already decoded raster.

        Args:
            raster: Decoded RGBA raster
            options: Processing options
            use_plate: If False, aggregate over the transformed image directly
            include_preview: Attach a base64 plate thumbnail with zone grid

        Returns:
            InkAnalysisResult with levels and plate geometry
        """
        self.validate_options(options, self.max_num_keys)

        with timer() as t:
            check_dimensions(raster, "Decoded")
            rotated = transform(raster, options.rotation, self.process_width)

            if use_plate:
                canvas = composite_on_plate(
                    rotated,
                    options.plate_width,
                    options.image_width,
                    self.alpha_threshold,
                    self.max_plate_px,
                )
            else:
                canvas = image_as_plate(rotated, self.alpha_threshold)

            levels = aggregate_zones(
                canvas, options.num_keys, options.black_generation, self.band_rows
            )

            preview = None
            if include_preview:
                preview = ImageProcessors.create_plate_preview(
                    canvas, options.num_keys, self.preview_width
                )

        geometry = PlateGeometry(
            image_width_px=canvas.image_width_px,
            image_height_px=canvas.height,
            plate_width_px=canvas.width,
            x_offset_px=canvas.x_offset,
            clipped_columns=canvas.clipped_columns,
        )

        logger.info(
            f"Analyzed {raster.shape[1]}x{raster.shape[0]} image into {options.num_keys} "
            f"zones on {canvas.width}x{canvas.height} plate in {t['ms']}ms"
        )

        return InkAnalysisResult(
            levels=levels,
            geometry=geometry,
            options=options,
            processing_time_ms=t["ms"],
            preview_base64=preview,
        )

    async def run(
        self,
        image_source: Any,
        options: ProcessingOptions,
        use_plate: bool = True,
        include_preview: bool = False,
    ) -> InkAnalysisResult:
        """
        Decode an image source and analyze it.

        Args:
            image_source: Anything the decoder accepts
            options: Processing options
            use_plate: If False, aggregate over the transformed image directly
            include_preview: Attach a base64 plate thumbnail with zone grid

        Returns:
            InkAnalysisResult

        Raises:
            ConfigError, DecodeError, GeometryError
        """
        self.validate_options(options, self.max_num_keys)
        raster = await self.decode(image_source)
        return self.analyze(raster, options, use_plate=use_plate, include_preview=include_preview)

    async def process(
        self, image_source: Any, options: ProcessingOptions, use_plate: bool = True
    ) -> InkLevels:
        """Decode an image source and return its per-zone ink levels."""
        result = await self.run(image_source, options, use_plate=use_plate)
        return result.levels


def create_ink_service(settings: Optional[Any] = None) -> InkService:
    """Build an InkService from application settings."""
    if settings is None:
        return InkService()
    processing = settings.processing
    return InkService(
        process_width=processing.process_width,
        alpha_threshold=processing.alpha_threshold,
        band_rows=processing.band_rows,
        preview_width=processing.preview_width,
        max_num_keys=processing.max_num_keys,
        max_plate_px=processing.max_plate_width_px,
    )
