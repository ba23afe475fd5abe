"""
Zone aggregation stage.

Splits the plate canvas into equal-width vertical ink key zones and
averages CMYK coverage per zone. Zone membership depends only on the
column, so the scan runs over row bands whose partial accumulators are
merged by addition.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from api.exceptions import ConfigError
from core.constants import InkConstants
from core.utils.decorators import timed
from inking.color_conversion import rgb_to_cmyk_array
from inking.plate import PlateCanvas
from schemas.ink import InkLevels

logger = logging.getLogger(__name__)


def zone_indices(width: int, num_keys: int) -> np.ndarray:
    """
    Zone index of every column.

    Zones are width / num_keys pixels wide (real valued); the last zone
    absorbs any rounding remainder.
    """
    if num_keys < 1:
        raise ConfigError(f"Number of ink keys must be at least 1, got {num_keys}")
    zone_width = width / num_keys
    columns = np.arange(width, dtype=np.float64)
    return np.minimum(np.floor(columns / zone_width), num_keys - 1).astype(np.int64)


@dataclass
class ZoneAccumulator:
    """Per-zone CMYK sums and pixel counts"""

    num_keys: int
    sums: np.ndarray = field(init=False)
    counts: np.ndarray = field(init=False)

    def __post_init__(self):
        self.sums = np.zeros((self.num_keys, 4), dtype=np.int64)
        self.counts = np.zeros(self.num_keys, dtype=np.int64)

    def add_band(self, band: np.ndarray, zones: np.ndarray, black_generation: float) -> None:
        """
        Accumulate a block of rows.

        Args:
            band: RGB rows (rows x width x 3)
            zones: Zone index per column (from zone_indices)
            black_generation: GCR amount
        """
        if band.shape[0] == 0:
            return
        cmyk = rgb_to_cmyk_array(band, black_generation)
        column_sums = cmyk.sum(axis=0, dtype=np.int64)  # width x 4
        for channel in range(4):
            self.sums[:, channel] += np.bincount(
                zones, weights=column_sums[:, channel], minlength=self.num_keys
            ).astype(np.int64)
        self.counts += np.bincount(zones, minlength=self.num_keys) * band.shape[0]

    def merge(self, other: "ZoneAccumulator") -> "ZoneAccumulator":
        """Add another partial accumulator into this one."""
        if other.num_keys != self.num_keys:
            raise ValueError(f"Cannot merge {other.num_keys} zones into {self.num_keys}")
        self.sums += other.sums
        self.counts += other.counts
        return self

    @property
    def total_count(self) -> int:
        return int(self.counts.sum())

    def to_levels(self) -> InkLevels:
        """Round each zone's mean to an integer; empty zones read 0."""
        averages = np.zeros((self.num_keys, 4), dtype=np.int64)
        filled = self.counts > 0
        averages[filled] = np.floor(
            self.sums[filled] / self.counts[filled][:, None] + 0.5
        ).astype(np.int64)
        averages = np.clip(averages, InkConstants.MIN_COVERAGE, InkConstants.MAX_COVERAGE)

        return InkLevels(
            c=averages[:, 0].tolist(),
            m=averages[:, 1].tolist(),
            y=averages[:, 2].tolist(),
            k=averages[:, 3].tolist(),
        )


def iter_row_bands(pixels: np.ndarray, band_rows: int) -> Iterable[np.ndarray]:
    for start in range(0, pixels.shape[0], band_rows):
        yield pixels[start : start + band_rows]


def accumulate(
    canvas: PlateCanvas,
    num_keys: int,
    black_generation: float,
    band_rows: int = InkConstants.DEFAULT_BAND_ROWS,
    rows: Optional[slice] = None,
) -> ZoneAccumulator:
    """
    Scan the canvas (or a row range of it) into a ZoneAccumulator.

    Args:
        canvas: Composited plate
        num_keys: Number of ink key zones
        black_generation: GCR amount
        band_rows: Rows converted per step
        rows: Optional row range, for partitioned scans

    Returns:
        Accumulator holding the partial sums
    """
    pixels = canvas.pixels if rows is None else canvas.pixels[rows]
    zones = zone_indices(canvas.width, num_keys)
    accumulator = ZoneAccumulator(num_keys)

    for band in iter_row_bands(pixels, max(1, band_rows)):
        accumulator.add_band(band, zones, black_generation)

    return accumulator


@timed
def aggregate_zones(
    canvas: PlateCanvas,
    num_keys: int,
    black_generation: float,
    band_rows: int = InkConstants.DEFAULT_BAND_ROWS,
) -> InkLevels:
    """
    Average ink coverage per zone over the whole plate canvas.

    Args:
        canvas: Composited plate
        num_keys: Number of ink key zones
        black_generation: GCR amount

    Returns:
        InkLevels with num_keys entries per channel
    """
    accumulator = accumulate(canvas, num_keys, black_generation, band_rows)

    empty = int((accumulator.counts == 0).sum())
    if empty:
        logger.debug(f"{empty} of {num_keys} zones contain no pixels")

    return accumulator.to_levels()
