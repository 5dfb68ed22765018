"""
Signed Distance Field Generation

Turns an alpha mask into a normalized SDF texture channel:
- 0.0 = at or beyond `outside_distance` pixels outside the shape
- 0.5 = on the boundary band
- 1.0 = at or beyond `inside_distance` pixels inside the shape

Pixels are classified against a 0.5 alpha threshold. For every fully
transparent (alpha <= 0) or fully opaque (alpha >= 1) pixel, the distance
to the nearest pixel on the other side of the threshold is measured over
the whole image. Partially transparent pixels sit on the edge and get 0.5.
"""

import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

import numpy as np
from scipy import ndimage

from .config import DistanceMethod, InvalidConfiguration, check_distance

logger = logging.getLogger(__name__)

ALPHA_THRESHOLD = 0.5
EDGE_BAND = 0.1             # Refinement touches pixels with |sdf - 0.5| < EDGE_BAND
MAX_DEFAULT_WORKERS = 8
CANDIDATE_CHUNK = 4096      # Candidate pixels compared per numpy batch
POINT_CHUNK = 512           # Searched pixels compared per numpy batch


class GenerationCancelled(RuntimeError):
    """Raised when a cancel event is set while the distance search runs"""


# =============================================================================
# Alpha Extraction
# =============================================================================

def extract_alpha(pixels: np.ndarray) -> np.ndarray:
    """
    Alpha channel of an RGBA image as a float32 field.

    Args:
        pixels: RGBA image (H, W, 4) with values 0-1 (or a Texture)

    Returns:
        Alpha field (H, W)
    """
    pixels = getattr(pixels, 'pixels', pixels)
    return np.array(pixels[:, :, 3], dtype=np.float32)


# =============================================================================
# Boundary Search
# =============================================================================

def crosses_boundary(center_alpha: float, neighbor_alpha: float) -> bool:
    """True if the two alphas lie on opposite sides of the 0.5 threshold"""
    return ((center_alpha < ALPHA_THRESHOLD and neighbor_alpha >= ALPHA_THRESHOLD) or
            (center_alpha >= ALPHA_THRESHOLD and neighbor_alpha < ALPHA_THRESHOLD))


def normalize_distance(
    distance: np.ndarray,
    alpha: np.ndarray,
    inside_distance: float,
    outside_distance: float
) -> np.ndarray:
    """
    Map boundary distances to the 0-1 SDF range.

    Args:
        distance: Distance to the nearest crossing pixel (H, W), 0 where none exists
        alpha: Alpha field (H, W)
        inside_distance: Distance at which opaque pixels reach 1
        outside_distance: Distance at which transparent pixels reach 0

    Returns:
        float32 SDF (H, W); pixels with 0 < alpha < 1 are exactly 0.5
    """
    check_distance('inside_distance', inside_distance)
    check_distance('outside_distance', outside_distance)

    distance = np.asarray(distance, dtype=np.float64)
    sdf = np.full(alpha.shape, 0.5, dtype=np.float64)

    outside = alpha <= 0.0
    inside = alpha >= 1.0

    sdf[outside] = 0.5 - (distance[outside] / outside_distance) * 0.5
    sdf[inside] = 0.5 + (distance[inside] / inside_distance) * 0.5

    return np.clip(sdf, 0.0, 1.0).astype(np.float32)


def _nearest_distances(points: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """
    Distance from each point to its closest candidate.

    Args:
        points: (N, 2) integer (y, x) coordinates
        candidates: (M, 2) integer (y, x) coordinates, M > 0

    Returns:
        (N,) float64 distances

    Both axes are chunked, so each temporary is at most
    POINT_CHUNK x CANDIDATE_CHUNK regardless of image size.
    """
    best = np.full(len(points), np.inf)
    cy = candidates[:, 0].astype(np.float64)
    cx = candidates[:, 1].astype(np.float64)

    for p0 in range(0, len(points), POINT_CHUNK):
        py = points[p0:p0 + POINT_CHUNK, 0:1].astype(np.float64)
        px = points[p0:p0 + POINT_CHUNK, 1:2].astype(np.float64)
        out = best[p0:p0 + POINT_CHUNK]

        for c0 in range(0, len(candidates), CANDIDATE_CHUNK):
            dy = py - cy[np.newaxis, c0:c0 + CANDIDATE_CHUNK]
            dx = px - cx[np.newaxis, c0:c0 + CANDIDATE_CHUNK]
            dy *= dy
            dx *= dx
            dx += dy
            np.minimum(out, dx.min(axis=1), out=out)

    return np.sqrt(best)


def _row_batches(height: int, workers: int) -> List[Tuple[int, int]]:
    """Split rows into batches, a few per worker so progress stays fine-grained"""
    count = max(1, min(height, workers * 4))
    size = (height + count - 1) // count
    return [(start, min(start + size, height)) for start in range(0, height, size)]


def _boundary_distance_brute_force(
    alpha: np.ndarray,
    workers: Optional[int] = None,
    progress: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None
) -> np.ndarray:
    """
    Full-image nearest crossing search.

    Each searched pixel is compared against every pixel of the opposite
    class. Row batches run on a thread pool; a batch reads only `alpha`
    and writes only its own rows of the result.
    """
    h, w = alpha.shape
    distance = np.zeros((h, w), dtype=np.float64)

    above = alpha >= ALPHA_THRESHOLD
    searched = (alpha <= 0.0) | (alpha >= 1.0)

    # Opposite-class coordinates; a pixel is never its own candidate
    above_coords = np.argwhere(above)
    below_coords = np.argwhere(~above)

    if workers is None:
        workers = min(MAX_DEFAULT_WORKERS, os.cpu_count() or 1)

    batches = _row_batches(h, workers)
    logger.debug("Brute-force search: %dx%d, %d batches on %d workers", w, h, len(batches), workers)

    def _search_rows(y0: int, y1: int) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelled("SDF generation cancelled")

        for is_above, candidates in ((False, above_coords), (True, below_coords)):
            if len(candidates) == 0:
                continue  # No crossing anywhere, distance stays 0
            mask = searched[y0:y1] & (above[y0:y1] == is_above)
            points = np.argwhere(mask)
            if len(points) == 0:
                continue
            points[:, 0] += y0
            distance[points[:, 0], points[:, 1]] = _nearest_distances(points, candidates)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_search_rows, y0, y1) for y0, y1 in batches]
        try:
            for done, future in enumerate(futures, 1):
                future.result()
                if progress is not None:
                    progress(done / len(futures))
        except BaseException:
            for future in futures:
                future.cancel()
            raise

    return distance


def _boundary_distance_edt(alpha: np.ndarray) -> np.ndarray:
    """
    Nearest crossing distance via exact Euclidean distance transforms.

    distance_transform_edt measures, for every nonzero pixel, the distance
    to the nearest zero pixel - which is exactly the nearest pixel of the
    opposite class.
    """
    above = alpha >= ALPHA_THRESHOLD
    distance = np.zeros(alpha.shape, dtype=np.float64)

    # Without both classes there is no crossing at all
    if above.all() or not above.any():
        return distance

    dist_to_above = ndimage.distance_transform_edt(~above)
    dist_to_below = ndimage.distance_transform_edt(above)

    distance[~above] = dist_to_above[~above]
    distance[above] = dist_to_below[above]
    return distance


def compute_sdf(
    alpha: np.ndarray,
    inside_distance: float,
    outside_distance: float,
    method: DistanceMethod = DistanceMethod.BRUTE_FORCE,
    workers: Optional[int] = None,
    progress: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None
) -> np.ndarray:
    """
    Generate a normalized Signed Distance Field from an alpha field.

    Args:
        alpha: Alpha field (H, W) with values 0-1
        inside_distance: Pixels inside the shape at which the SDF reaches 1
        outside_distance: Pixels outside the shape at which the SDF reaches 0
        method: BRUTE_FORCE (full-image search) or EDT (distance transform);
            both give identical results
        workers: Thread count for BRUTE_FORCE (default: up to 8)
        progress: Called with the completed fraction after each row batch
        cancel_event: Checked between row batches

    Returns:
        float32 SDF (H, W) in 0-1

    Raises:
        GenerationCancelled: if cancel_event is set before the search finishes
        InvalidConfiguration: if the field is not a non-empty 2D array or a
            distance is not a finite positive number
    """
    check_distance('inside_distance', inside_distance)
    check_distance('outside_distance', outside_distance)

    alpha = np.asarray(alpha, dtype=np.float32)
    if alpha.ndim != 2 or alpha.size == 0:
        raise InvalidConfiguration(f"Alpha field must be a non-empty 2D array, got shape {alpha.shape}")
    method = DistanceMethod.parse(method)

    if method is DistanceMethod.EDT:
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelled("SDF generation cancelled")
        distance = _boundary_distance_edt(alpha)
        if progress is not None:
            progress(1.0)
    else:
        distance = _boundary_distance_brute_force(alpha, workers, progress, cancel_event)

    return normalize_distance(distance, alpha, inside_distance, outside_distance)


# =============================================================================
# Edge Refinement
# =============================================================================

def _disk_offsets(radius: int) -> List[Tuple[int, int, float]]:
    """(dy, dx, distance) for every offset within `radius`, origin excluded"""
    offsets = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            d2 = dx * dx + dy * dy
            if d2 == 0 or d2 > radius * radius:
                continue
            offsets.append((dy, dx, math.sqrt(d2)))
    return offsets


def refine_edges(
    sdf: np.ndarray,
    alpha: np.ndarray,
    radius: float,
    inside_distance: float,
    outside_distance: float
) -> np.ndarray:
    """
    Recompute SDF values near the boundary band with a local search.

    Pixels whose value is within 0.1 of 0.5 are re-measured against the
    alpha field inside a disk of radius ceil(radius). When a crossing pixel
    is found the value is replaced with the normalized nearest distance;
    otherwise it is left alone. On a field produced by compute_sdf this
    reproduces the same values, since the nearest crossing always lies in
    the disk when any crossing does.

    Args:
        sdf: SDF field (H, W), modified in place
        alpha: Alpha field (H, W) the SDF was computed from
        radius: Search radius in pixels (<= 0 disables refinement)
        inside_distance: Same value used for compute_sdf
        outside_distance: Same value used for compute_sdf

    Returns:
        The same `sdf` array
    """
    r = int(math.ceil(radius))
    if r <= 0:
        return sdf

    alpha = np.asarray(alpha, dtype=np.float32)
    h, w = alpha.shape

    band = (np.abs(sdf - 0.5) < EDGE_BAND) & ((alpha <= 0.0) | (alpha >= 1.0))
    if not band.any():
        return sdf

    # Work only on the band's bounding box grown by the search radius
    ys, xs = np.nonzero(band)
    y0, y1 = max(0, int(ys.min()) - r), min(h, int(ys.max()) + r + 1)
    x0, x1 = max(0, int(xs.min()) - r), min(w, int(xs.max()) + r + 1)
    wh, ww = y1 - y0, x1 - x0

    above = alpha[y0:y1, x0:x1] >= ALPHA_THRESHOLD
    best = np.full((wh, ww), np.inf)

    for dy, dx, dist in _disk_offsets(r):
        # Center region whose neighbor at (y + dy, x + dx) is in bounds
        cy0, cy1 = max(0, -dy), min(wh, wh - dy)
        cx0, cx1 = max(0, -dx), min(ww, ww - dx)
        if cy1 <= cy0 or cx1 <= cx0:
            continue

        center = above[cy0:cy1, cx0:cx1]
        neighbor = above[cy0 + dy:cy1 + dy, cx0 + dx:cx1 + dx]
        crossing = center != neighbor

        region = best[cy0:cy1, cx0:cx1]
        region[crossing] = np.minimum(region[crossing], dist)

    found = band[y0:y1, x0:x1] & np.isfinite(best)
    if found.any():
        refined = normalize_distance(np.where(found, best, 0.0), alpha[y0:y1, x0:x1],
                                     inside_distance, outside_distance)
        window = sdf[y0:y1, x0:x1]
        window[found] = refined[found]

    logger.debug("Edge refinement: %d band pixels, %d refined (radius %d)", int(band.sum()), int(found.sum()), r)
    return sdf
