"""
SDF Texture - Core Pipeline
"""

from .parser import TextureParser, Texture
from .exporter import TextureExporter, default_output_path
from .fill import FillMode, color_for, apply_fill
from .config import (
    SDFConfig, DistanceMethod, InvalidConfiguration,
    INSIDE_DISTANCE_RANGE, OUTSIDE_DISTANCE_RANGE, POST_PROCESS_RANGE,
)
from .sdf import (
    # Alpha extraction
    extract_alpha,
    # Distance field
    compute_sdf, crosses_boundary, normalize_distance,
    # Refinement
    refine_edges,
    GenerationCancelled,
)
from .pipeline import generate, generate_alpha_mask, compute_field
from .settings import SettingsStore, DEFAULT_SETTINGS

__all__ = [
    'Texture', 'TextureParser', 'TextureExporter', 'default_output_path',
    'FillMode', 'color_for', 'apply_fill',
    'SDFConfig', 'DistanceMethod', 'InvalidConfiguration',
    'INSIDE_DISTANCE_RANGE', 'OUTSIDE_DISTANCE_RANGE', 'POST_PROCESS_RANGE',
    'extract_alpha', 'compute_sdf', 'crosses_boundary', 'normalize_distance',
    'refine_edges', 'GenerationCancelled',
    'generate', 'generate_alpha_mask', 'compute_field',
    'SettingsStore', 'DEFAULT_SETTINGS',
]
