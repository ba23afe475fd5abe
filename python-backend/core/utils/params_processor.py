"""
Parameter processing utilities.

Builds ProcessingOptions from partial request parameters, filling gaps
from the configured press defaults.
"""

from typing import Any, Dict, Optional

from schemas.ink import ProcessingOptions


def merge_params(base_params: Dict[str, Any], override_params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two parameter dictionaries.

    Override params take precedence over base params; None overrides are
    ignored.

    Example:
        >>> merge_params({"num_keys": 34, "rotation": 0}, {"num_keys": 28, "rotation": None})
        {'num_keys': 28, 'rotation': 0}
    """
    result = base_params.copy()
    result.update({key: value for key, value in override_params.items() if value is not None})
    return result


def prepare_options(
    defaults: Dict[str, Any],
    num_keys: Optional[int] = None,
    black_generation: Optional[float] = None,
    rotation: Optional[int] = None,
    plate_width: Optional[float] = None,
    image_width: Optional[float] = None,
    image_width_in: Optional[float] = None,
) -> ProcessingOptions:
    """
    Build processing options from request parameters and defaults.

    The image width may be given in millimetres (image_width) or inches
    (image_width_in); millimetres win when both are present. With neither,
    the default print width is used.

    Args:
        defaults: Press defaults with keys num_keys, black_generation,
            plate_width and image_width
        num_keys, black_generation, rotation, plate_width: Optional overrides
        image_width: Printed image width in mm
        image_width_in: Printed image width in inches

    Returns:
        Unvalidated ProcessingOptions
    """
    params = merge_params(
        defaults,
        {
            "num_keys": num_keys,
            "black_generation": black_generation,
            "rotation": rotation,
            "plate_width": plate_width,
            "image_width": image_width,
        },
    )
    if image_width is None and image_width_in is not None:
        params.pop("image_width", None)
        return ProcessingOptions.from_inches(image_width_in, **params)
    return ProcessingOptions(**params)
