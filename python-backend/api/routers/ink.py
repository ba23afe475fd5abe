"""
Ink API Router - Ink key zone estimation endpoints

Both analysis endpoints follow the same pattern:
1. Resolve options (request values over press defaults)
2. Hand the image source to the ink service
3. Return InkAnalysisResponse
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.dependencies import (
    get_app_settings,
    get_ink_service,
    get_max_upload_bytes,
    get_option_defaults,
)
from api.exceptions import DecodeError, UploadTooLargeError, safe_endpoint
from core.constants import InkConstants, PressConstants
from core.image.converters import ImageConverters
from core.utils.params_processor import prepare_options
from schemas import (
    InkAnalysisResponse,
    InkAnalyzeBase64Request,
    InkDefaultsResponse,
    PrintWidthPreset,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze")
@safe_endpoint
async def analyze_upload(
    file: UploadFile = File(..., description="Print layout image"),
    num_keys: Optional[int] = Form(None),
    black_generation: Optional[float] = Form(None),
    rotation: int = Form(0),
    plate_width: Optional[float] = Form(None, description="Plate width (mm)"),
    image_width: Optional[float] = Form(None, description="Printed image width (mm)"),
    image_width_in: Optional[float] = Form(None, description="Printed image width (inches)"),
    include_preview: bool = Form(False),
    ink_service=Depends(get_ink_service),
    defaults: Dict[str, Any] = Depends(get_option_defaults),
    max_upload_bytes: int = Depends(get_max_upload_bytes),
) -> InkAnalysisResponse:
    """
    Estimate per-zone CMYK coverage of an uploaded layout image.

    INPUT constraints:
    - image_width or image_width_in: physical width of the printed image
      (defaults to the full print width)
    - rotation: 0, 90, 180 or 270 degrees clockwise

    OUTPUT results:
    - levels: c, m, y, k lists with one 0-100 value per ink key
    - geometry: plate canvas size and image offset in pixels
    """
    contents = await file.read()
    if len(contents) > max_upload_bytes:
        raise UploadTooLargeError(len(contents), max_upload_bytes // (1024 * 1024))
    if not contents:
        raise DecodeError("Uploaded file is empty")

    options = prepare_options(
        defaults,
        num_keys=num_keys,
        black_generation=black_generation,
        rotation=rotation,
        plate_width=plate_width,
        image_width=image_width,
        image_width_in=image_width_in,
    )

    result = await ink_service.run(contents, options, include_preview=include_preview)

    logger.info(f"Analyzed upload {file.filename!r}: {options.num_keys} keys")
    return InkAnalysisResponse.from_result(result)


@router.post("/analyze-base64")
@safe_endpoint
async def analyze_base64(
    request: InkAnalyzeBase64Request,
    ink_service=Depends(get_ink_service),
    defaults: Dict[str, Any] = Depends(get_option_defaults),
) -> InkAnalysisResponse:
    """
    Estimate per-zone CMYK coverage of a base64 encoded image or data URL.
    """
    image_bytes = ImageConverters.from_base64(request.image_base64)

    options = prepare_options(
        defaults,
        num_keys=request.num_keys,
        black_generation=request.black_generation,
        rotation=request.rotation,
        plate_width=request.plate_width,
        image_width=request.image_width,
        image_width_in=request.image_width_in,
    )

    result = await ink_service.run(image_bytes, options, include_preview=request.include_preview)
    return InkAnalysisResponse.from_result(result)


@router.get("/defaults")
@safe_endpoint
async def get_defaults(settings=Depends(get_app_settings)) -> InkDefaultsResponse:
    """Press defaults and print width presets"""
    press = settings.press
    return InkDefaultsResponse(
        num_keys=press.default_num_keys,
        black_generation=press.default_black_generation,
        plate_width_mm=press.plate_width_mm,
        rotations=list(InkConstants.ROTATIONS),
        print_width_presets=[
            PrintWidthPreset(
                name=name,
                width_in=width_in,
                width_mm=round(width_in * PressConstants.MM_PER_INCH, 1),
            )
            for name, width_in in PressConstants.PRINT_WIDTH_PRESETS.items()
        ],
    )
