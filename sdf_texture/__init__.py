"""
SDF Texture - Signed distance field textures from image alpha masks
"""

from pathlib import Path
from typing import Optional

from .core import (
    Texture, TextureParser, TextureExporter, default_output_path,
    FillMode, SDFConfig, DistanceMethod, InvalidConfiguration, GenerationCancelled,
    SettingsStore, generate, generate_alpha_mask,
)

__version__ = "0.1.0"
__all__ = [
    'Texture',
    'TextureParser',
    'TextureExporter',
    'FillMode',
    'SDFConfig',
    'DistanceMethod',
    'InvalidConfiguration',
    'GenerationCancelled',
    'SettingsStore',
    'generate',
    'generate_alpha_mask',
    'generate_file',
]


def generate_file(
    image_path: str | Path,
    output_path: Optional[str | Path] = None,
    config: Optional[SDFConfig] = None,
    alpha_only: bool = False,
    progress=None,
    **overrides
) -> Path:
    """
    Generate an SDF PNG from an image file.

    Args:
        image_path: Source image
        output_path: Output PNG (default: '<stem>_SDF.png' or '<stem>_SDF_Alpha.png'
            next to the source)
        config: Generation settings (defaults if None)
        alpha_only: Keep source RGB and write the SDF to alpha only
        progress: Called with the completed fraction of the distance search
        **overrides: SDFConfig fields to override, e.g. inside_distance=4

    Returns:
        Path to the written PNG
    """
    config = config or SDFConfig()
    if overrides:
        config = config.with_overrides(**overrides)

    texture = TextureParser.parse(image_path)

    if alpha_only:
        result = generate_alpha_mask(texture, config, progress=progress)
    else:
        result = generate(texture, config, progress=progress)

    if output_path is None:
        output_path = default_output_path(image_path, alpha_only=alpha_only)

    return TextureExporter.to_png(result, output_path)
