"""
Renderer module - turns march results into pixels.

Implements:
- One marched camera ray per pixel
- Hard-shadowed direct lighting plus a constant diffuse term
- Multi-threaded tile-based rendering with cooperative cancellation
- PNG output through Pillow
"""

from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple
import numpy as np

from .vec3 import Color
from .camera import Camera
from .geometry import Geometry
from .lights import Light
from .marcher import march, RayMarchHit, RayMarchResult, DEFAULT_MAX_STEPS

logger = logging.getLogger(__name__)


class RenderCancelledError(Exception):
    """Raised when a render is aborted through its cancellation event."""
    pass


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 450
    hit_distance: float = 0.01
    max_steps: int = DEFAULT_MAX_STEPS
    diffuse_intensity: float = 0.15
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect
    background_color: Color = None
    gamma: float = 1.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.hit_distance <= 0:
            raise ValueError(f"hit_distance must be positive, got {self.hit_distance}")
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")
        if self.background_color is None:
            self.background_color = Color.black()
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def shade(
    result: RayMarchResult,
    geometry: Geometry,
    lights: Iterable[Light],
    hit_distance: float,
    diffuse_intensity: float,
    background: Color,
    max_steps: int = DEFAULT_MAX_STEPS
) -> Color:
    """Combine a march result with lighting into an unclamped pixel color.

    Args:
        result: The camera ray's march result
        geometry: The scene, for shadow rays
        lights: Lights contributing to the hit point
        hit_distance: Hit distance used for the camera ray
        diffuse_intensity: Constant light added everywhere
        background: Color for rays that hit nothing
        max_steps: Step ceiling for shadow rays

    Returns:
        The pixel color
    """
    if not isinstance(result, RayMarchHit):
        return background

    light_amount = sum(
        light.hard_shadowed_intensity_at(
            result.point, result.normal, geometry, hit_distance, max_steps
        )
        for light in lights
    )
    # Ambient occlusion is not modelled
    ambient_occlusion = 0.0
    return (light_amount + diffuse_intensity - ambient_occlusion) * result.color


class Renderer:
    """Ray marching renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)

        Calls are serialized across render threads and progress never decreases.
        """
        self._progress_callback = callback

    def render_pixel(self, geometry: Geometry, lights: list[Light], camera: Camera,
                     x: int, y: int) -> Color:
        """March and shade a single pixel."""
        settings = self.settings
        ray = camera.get_ray(x / settings.width, y / settings.height)
        result = march(
            start=ray.origin,
            direction=ray.direction,
            max_distance=ray.max_distance,
            hit_distance=settings.hit_distance,
            geometry=geometry,
            max_steps=settings.max_steps
        )
        return shade(
            result, geometry, lights, settings.hit_distance,
            settings.diffuse_intensity, settings.background_color, settings.max_steps
        )

    def render(
        self,
        geometry: Geometry,
        lights: Iterable[Light],
        camera: Camera,
        cancel_event: Optional[threading.Event] = None
    ) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            geometry: The scene to render
            lights: Lights illuminating the scene
            camera: The camera to render from
            cancel_event: Optional event; once set, remaining tiles are skipped
                and RenderCancelledError is raised

        Returns:
            Unclamped image as numpy array of shape (height, width, 3)
        """
        width = self.settings.width
        height = self.settings.height
        lights = list(lights)

        image = np.zeros((height, width, 3), dtype=np.float64)

        # Generate tiles for parallel processing
        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        logger.info("Rendering %dx%d in %d tiles on %d threads",
                    width, height, total_tiles, self.settings.num_threads)

        def render_tile(tile: Tuple[int, int, int, int]) -> Tuple[Tuple, Optional[np.ndarray]]:
            """Render a single tile."""
            if cancel_event is not None and cancel_event.is_set():
                return tile, None

            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for j in range(y1 - y0):
                for i in range(x1 - x0):
                    color = self.render_pixel(geometry, lights, camera, x0 + i, y0 + j)
                    tile_image[j, i] = color.to_array()

            # Callbacks run under the lock, one at a time and in completion order
            with progress_lock:
                completed_tiles[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_tiles[0] / total_tiles)

            return tile, tile_image

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles))
        else:
            results = [render_tile(tile) for tile in tiles]

        if any(tile_image is None for _, tile_image in results):
            logger.info("Render cancelled after %d of %d tiles", completed_tiles[0], total_tiles)
            raise RenderCancelledError(
                f"render cancelled after {completed_tiles[0]} of {total_tiles} tiles"
            )

        # Combine tiles into final image
        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        logger.info("Render finished")
        return image

    def _generate_tiles(self, width: int, height: int) -> list[Tuple[int, int, int, int]]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, image: np.ndarray) -> np.ndarray:
        """Convert a float image to 8-bit with gamma correction.

        Args:
            image: Float image array

        Returns:
            LDR image as uint8 array
        """
        clamped = np.clip(image, 0.0, 1.0)
        if self.settings.gamma != 1.0:
            clamped = np.power(clamped, 1.0 / self.settings.gamma)
        return np.round(clamped * 255).astype(np.uint8)

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file.

        Args:
            image: Image array (float or uint8)
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        if image.dtype == np.float64 or image.dtype == np.float32:
            image = self.to_ldr(image)

        pil_image = PILImage.fromarray(image)
        pil_image.save(filename)
        logger.info("Saved %s", filename)
