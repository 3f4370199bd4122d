"""Render configuration.

``RenderSettings`` carries everything the renderer needs besides the scene:
image size, sampling budget and camera placement. It is built by the caller
(a CLI, a settings panel, a test) and consumed read-only by the renderer.

Example:
    >>> settings = RenderSettings(width=400, height=225, samples=50)
    >>> settings = settings.with_camera(
    ...     CameraSettings((13.0, 2.0, 3.0), (0.0, 0.0, 0.0), 20.0)
    ... )
    >>> settings.validate()
"""

from __future__ import annotations

from dataclasses import dataclass, replace

# Largest image the preallocated raster can hold
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048


@dataclass(frozen=True)
class CameraSettings:
    """Camera placement for a scene preset.

    Attributes:
        camera_position: Camera position in world space (x, y, z).
        focus_point: Point the camera looks at in world space (x, y, z).
        field_of_view: Vertical field of view in degrees.
    """

    camera_position: tuple[float, float, float]
    focus_point: tuple[float, float, float]
    field_of_view: float


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Number of stochastic samples averaged per pixel.
        max_depth: Maximum number of ray bounces. 0 renders black.
        camera_position: Camera position in world space.
        focus_point: Point the camera looks at.
        field_of_view: Vertical field of view in degrees.
        defocus_angle: Cone angle in degrees of rays through each pixel.
            0 disables depth of field.
        focus_distance: Distance from the camera to the plane of perfect focus.
    """

    width: int = 1920
    height: int = 1080
    samples: int = 100
    max_depth: int = 50
    camera_position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    focus_point: tuple[float, float, float] = (0.0, 0.0, -1.0)
    field_of_view: float = 90.0
    defocus_angle: float = 0.0
    focus_distance: float = 10.0

    @property
    def pixel_count(self) -> int:
        """Total number of pixels in the image."""
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        """Image width divided by height."""
        return self.width / self.height

    def with_camera(self, camera: CameraSettings) -> RenderSettings:
        """Return a copy using the position, target and FOV of ``camera``."""
        return replace(
            self,
            camera_position=camera.camera_position,
            focus_point=camera.focus_point,
            field_of_view=camera.field_of_view,
        )

    def validate(self) -> None:
        """Check that the settings describe a renderable image.

        Raises:
            ValueError: If any value is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples <= 0:
            raise ValueError(f"Samples per pixel must be positive, got {self.samples}")
        if self.max_depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {self.max_depth}")
        if not 0.0 < self.field_of_view < 180.0:
            raise ValueError(
                f"Field of view = {self.field_of_view} is outside (0, 180) degrees"
            )
        if self.defocus_angle < 0.0:
            raise ValueError(f"Defocus angle must be non-negative, got {self.defocus_angle}")
        if self.focus_distance <= 0.0:
            raise ValueError(f"Focus distance must be positive, got {self.focus_distance}")
        if tuple(self.camera_position) == tuple(self.focus_point):
            raise ValueError("Camera position and focus point must differ")
