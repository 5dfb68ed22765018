"""
SDF Pipeline - alpha extraction -> distance search -> refinement -> fill
"""

import logging
import threading
from typing import Callable, Optional

import numpy as np

from .config import SDFConfig, InvalidConfiguration
from .exporter import SDF_SUFFIX, SDF_ALPHA_SUFFIX
from .fill import apply_fill
from .parser import Texture
from .sdf import extract_alpha, compute_sdf, refine_edges

logger = logging.getLogger(__name__)


def _validate_source(source: Texture) -> None:
    pixels = source.pixels
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise InvalidConfiguration(f"Source pixels must be HxWx4, got shape {pixels.shape}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidConfiguration(f"Source image is empty ({pixels.shape[1]}x{pixels.shape[0]})")


def compute_field(
    source: Texture,
    config: Optional[SDFConfig] = None,
    progress: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None
) -> np.ndarray:
    """
    Validated SDF field for a texture, with optional edge refinement.

    Returns:
        float32 SDF (H, W) in 0-1

    Raises:
        InvalidConfiguration: before any work if config or source size is unusable
    """
    config = (config or SDFConfig()).validate()
    _validate_source(source)

    logger.debug(
        "Generating SDF for '%s' (%dx%d): inside=%s outside=%s post=%s method=%s",
        source.name, source.width, source.height, config.inside_distance,
        config.outside_distance, config.post_process_distance, config.method.value
    )

    alpha = extract_alpha(source.pixels)
    sdf = compute_sdf(
        alpha,
        config.inside_distance,
        config.outside_distance,
        method=config.method,
        workers=config.workers,
        progress=progress,
        cancel_event=cancel_event
    )

    if config.post_process_distance > 0:
        refine_edges(sdf, alpha, config.post_process_distance,
                     config.inside_distance, config.outside_distance)

    return sdf


def generate(
    source: Texture,
    config: Optional[SDFConfig] = None,
    progress: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None
) -> Texture:
    """
    Build an SDF texture: RGB from the fill mode, SDF in alpha.

    Args:
        source: Input texture (not modified)
        config: Generation settings (defaults if None)
        progress: Called with the completed fraction of the distance search
        cancel_event: Set to abort between row batches

    Returns:
        New texture of the same size named '<name>_SDF'
    """
    config = config or SDFConfig()
    sdf = compute_field(source, config, progress, cancel_event)

    output = np.empty(source.pixels.shape, dtype=np.float32)
    output[:, :, :3] = apply_fill(config.fill_mode, sdf, source.pixels)
    output[:, :, 3] = sdf

    return Texture(
        width=source.width,
        height=source.height,
        pixels=output,
        name=f"{source.name}{SDF_SUFFIX}",
        source_path=source.source_path
    )


def generate_alpha_mask(
    source: Texture,
    config: Optional[SDFConfig] = None,
    progress: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None
) -> Texture:
    """
    Keep the source colors and use the SDF as alpha.

    The fill mode is ignored. Returns a new texture named '<name>_SDF_Alpha'.
    """
    sdf = compute_field(source, config, progress, cancel_event)

    output = source.pixels.astype(np.float32, copy=True)
    output[:, :, 3] = sdf

    return Texture(
        width=source.width,
        height=source.height,
        pixels=output,
        name=f"{source.name}{SDF_ALPHA_SUFFIX}",
        source_path=source.source_path
    )
