"""
Texture Exporter - Writes SDF textures to PNG
"""

from PIL import Image
import numpy as np
from pathlib import Path
from typing import Optional
from .parser import Texture


SDF_SUFFIX = "_SDF"
SDF_ALPHA_SUFFIX = "_SDF_Alpha"


def default_output_path(source_path: str | Path, alpha_only: bool = False) -> Path:
    """
    Output path next to the source image.

    'glyph.png' -> 'glyph_SDF.png', or 'glyph_SDF_Alpha.png' for alpha-only output
    """
    source_path = Path(source_path)
    suffix = SDF_ALPHA_SUFFIX if alpha_only else SDF_SUFFIX
    return source_path.parent / f"{source_path.stem}{suffix}.png"


class TextureExporter:
    """Exports textures to image files"""

    @staticmethod
    def to_uint8(texture: Texture) -> np.ndarray:
        """Quantize 0-1 channels to 8-bit (H, W, 4)"""
        scaled = np.clip(texture.pixels, 0.0, 1.0) * 255.0
        return np.rint(scaled).astype(np.uint8)

    @classmethod
    def to_image(cls, texture: Texture) -> Image.Image:
        """Convert to a Pillow RGBA image"""
        return Image.fromarray(cls.to_uint8(texture), 'RGBA')

    @classmethod
    def to_png(cls, texture: Texture, path: Optional[str | Path] = None) -> Path:
        """Export a texture to an RGBA PNG

        Args:
            texture: Texture to write
            path: Output path (default: '<name>.png' next to the texture's source)
        """
        if path is None:
            parent = texture.source_path.parent if texture.source_path else Path.cwd()
            path = parent / f"{texture.name}.png"

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        img = cls.to_image(texture)
        img.save(path, 'PNG')

        return path
