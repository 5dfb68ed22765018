"""
Texture Parser - Reads image files into normalized RGBA textures
Supports: PNG, GIF, JPEG, BMP, WebP, TGA, TIFF (anything Pillow decodes)
"""

from PIL import Image
import numpy as np
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


@dataclass
class Texture:
    """A decoded image with RGBA channels in 0-1"""
    width: int
    height: int
    pixels: np.ndarray  # float32 (H, W, 4)
    name: str = "texture"
    source_path: Optional[Path] = None

    @property
    def alpha(self) -> np.ndarray:
        """Alpha channel view (H, W)"""
        return self.pixels[:, :, 3]

    @property
    def has_transparency(self) -> bool:
        """Check if any pixel is not fully opaque"""
        return bool(np.any(self.pixels[:, :, 3] < 1.0))

    def copy(self) -> 'Texture':
        """Create a deep copy of the texture"""
        return Texture(
            width=self.width,
            height=self.height,
            pixels=self.pixels.copy(),
            name=self.name,
            source_path=self.source_path
        )


class TextureParser:
    """Parses image files and arrays into Texture objects"""

    SUPPORTED_FORMATS = {'.png', '.gif', '.jpg', '.jpeg', '.bmp', '.webp', '.tga', '.tif', '.tiff'}

    @classmethod
    def parse(cls, path: str | Path) -> Texture:
        """Parse an image file into a Texture

        Args:
            path: Path to the image file

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the suffix is not a supported image format
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in cls.SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format: {suffix}")

        with Image.open(path) as img:
            # Palette and grayscale images carry transparency differently; RGBA normalizes it
            if img.mode != 'RGBA':
                img = img.convert('RGBA')
            pixels = np.array(img)

        texture = cls.from_array(pixels, name=path.stem)
        texture.source_path = path
        return texture

    @classmethod
    def from_image(cls, img: Image.Image, name: str = "texture") -> Texture:
        """Create a Texture from an in-memory Pillow image"""
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        return cls.from_array(np.array(img), name=name)

    @classmethod
    def from_array(cls, pixels: np.ndarray, name: str = "texture") -> Texture:
        """Create a Texture from a numpy array

        Integer arrays are treated as 8-bit (0-255), float arrays as 0-1.
        RGB input gets an opaque alpha channel.
        """
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError("Pixels must be HxWx3 or HxWx4 array")

        if np.issubdtype(pixels.dtype, np.integer):
            data = pixels.astype(np.float32) / 255.0
        else:
            data = pixels.astype(np.float32, copy=True)

        # Ensure RGBA
        if data.shape[2] == 3:
            alpha = np.ones((*data.shape[:2], 1), dtype=np.float32)
            data = np.concatenate([data, alpha], axis=2)

        return Texture(
            width=data.shape[1],
            height=data.shape[0],
            pixels=data,
            name=name
        )
