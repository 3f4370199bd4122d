"""Built-in demo scenes.

Each ``Scene`` member has a world factory and a matching camera preset. The
scenes progress from a single diffuse sphere through metal, glass, textures
and noise to the Cornell box lit only by an area light.

Example:
    >>> from pathtracer.scene.presets import Scene, create_world, get_scene_camera
    >>> world = create_world(Scene.CORNELL_BOX)
    >>> settings = RenderSettings(width=400, height=400).with_camera(
    ...     get_scene_camera(Scene.CORNELL_BOX)
    ... )
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from pathtracer.core.quaternion import Quaternion
from pathtracer.core.settings import CameraSettings
from pathtracer.geometry.box import make_box
from pathtracer.scene.description import (
    Collection,
    Dielectric,
    Lambertian,
    Light,
    Metal,
    Noise,
    Quad,
    Simple,
    Sphere,
    World,
)
from pathtracer.textures.loader import load_image_texture
from pathtracer.textures.perlin import Perlin


class Scene(Enum):
    """Built-in scenes. The value is the display name."""

    ONE_SPHERE = "One Sphere"
    METAL_SPHERES = "Metal Spheres"
    GLASS_SPHERES = "Glass Spheres"
    THREE_SPHERES = "Three Spheres"
    HOLLOW_GLASS = "Hollow Glass Sphere"
    RED_AND_BLUE = "Red and Blue"
    MANY_SPHERES = "Many Spheres"
    EARTH = "Earth"
    TWO_PERLIN_SPHERES = "Two Perlin Spheres"
    QUADS = "Quads"
    SIMPLE_LIGHT = "Simple Light"
    CORNELL_BOX = "Cornell Box"
    CORNELL_BOX_TWO_BOXES = "Cornell Box Two Boxes"

    @property
    def display_name(self) -> str:
        return self.value


# Sky color for the daylight scenes
SKY = (0.7, 0.8, 1.0)
BLACK = (0.0, 0.0, 0.0)

EARTH_TEXTURE_PATH = "res/earth.jpg"

# Cornell box palette
CORNELL_RED = (0.65, 0.05, 0.05)
CORNELL_WHITE = (0.73, 0.73, 0.73)
CORNELL_GREEN = (0.12, 0.45, 0.15)
CORNELL_LIGHT = (15.0, 15.0, 15.0)

_DEFAULT_CAMERA = CameraSettings((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), 90.0)
_WIDE_CAMERA = CameraSettings((13.0, 2.0, 3.0), (0.0, 0.0, 0.0), 20.0)
_CORNELL_CAMERA = CameraSettings((278.0, 278.0, -800.0), (278.0, 278.0, 0.0), 40.0)

_CAMERAS = {
    Scene.ONE_SPHERE: _DEFAULT_CAMERA,
    Scene.METAL_SPHERES: _DEFAULT_CAMERA,
    Scene.GLASS_SPHERES: _DEFAULT_CAMERA,
    Scene.THREE_SPHERES: _DEFAULT_CAMERA,
    Scene.HOLLOW_GLASS: _DEFAULT_CAMERA,
    Scene.RED_AND_BLUE: _DEFAULT_CAMERA,
    Scene.MANY_SPHERES: _WIDE_CAMERA,
    Scene.EARTH: CameraSettings((0.0, 0.0, 12.0), (0.0, 0.0, 0.0), 20.0),
    Scene.TWO_PERLIN_SPHERES: _WIDE_CAMERA,
    Scene.QUADS: CameraSettings((0.0, 0.0, 9.0), (0.0, 0.0, 0.0), 80.0),
    Scene.SIMPLE_LIGHT: CameraSettings((26.0, 3.0, 6.0), (0.0, 2.0, 0.0), 20.0),
    Scene.CORNELL_BOX: _CORNELL_CAMERA,
    Scene.CORNELL_BOX_TWO_BOXES: _CORNELL_CAMERA,
}


def get_scene_camera(scene: Scene) -> CameraSettings:
    """Get the camera preset that frames ``scene``."""
    return _CAMERAS[scene]


# =============================================================================
# Scene Factories
# =============================================================================


def _ground_sphere(material) -> Sphere:
    return Sphere((0.0, -100.5, -1.0), 100.0, material)


def one_sphere() -> World:
    ground = Lambertian((0.1, 0.2, 0.5))
    center = Lambertian((0.1, 0.2, 0.5))
    return World(
        Collection([Sphere((0.0, 0.0, -1.0), 0.5, center), _ground_sphere(ground)]),
        background=SKY,
    )


def metal_spheres() -> World:
    ground = Lambertian((0.8, 0.8, 0.0))
    center = Lambertian((0.7, 0.3, 0.3))
    left = Metal((0.8, 0.8, 0.8), fuzz=0.3)
    right = Metal((0.8, 0.6, 0.2), fuzz=1.0)
    return World(
        Collection([
            _ground_sphere(ground),
            Sphere((0.0, 0.0, -1.0), 0.5, center),
            Sphere((-1.0, 0.0, -1.0), 0.5, left),
            Sphere((1.0, 0.0, -1.0), 0.5, right),
        ]),
        background=SKY,
    )


def glass_spheres() -> World:
    ground = Lambertian((0.8, 0.8, 0.0))
    center = Dielectric(1.5)
    left = Dielectric(1.5)
    right = Metal((0.8, 0.6, 0.2), fuzz=1.0)
    return World(
        Collection([
            _ground_sphere(ground),
            Sphere((0.0, 0.0, -1.0), 0.5, center),
            Sphere((-1.0, 0.0, -1.0), 0.5, left),
            Sphere((1.0, 0.0, -1.0), 0.5, right),
        ]),
        background=SKY,
    )


def three_spheres() -> World:
    ground = Lambertian((0.8, 0.8, 0.0))
    center = Lambertian((0.1, 0.2, 0.5))
    left = Dielectric(1.5)
    right = Metal((0.8, 0.6, 0.2), fuzz=0.0)
    return World(
        Collection([
            _ground_sphere(ground),
            Sphere((0.0, 0.0, -1.0), 0.5, center),
            Sphere((-1.0, 0.0, -1.0), 0.5, left),
            Sphere((1.0, 0.0, -1.0), 0.5, right),
        ]),
        background=SKY,
    )


def hollow_glass() -> World:
    """Three spheres with a bubble inside the glass one.

    The inner sphere has a negative radius, so its normals point inward and
    it behaves as an air pocket in the glass.
    """
    world = three_spheres()
    glass = world.root.objects[2].material
    world.root.add(Sphere((-1.0, 0.0, -1.0), -0.4, glass))
    return world


def red_and_blue() -> World:
    r = math.cos(math.pi / 4.0)
    blue = Lambertian((0.0, 0.0, 1.0))
    red = Lambertian((1.0, 0.0, 0.0))
    return World(
        Collection([
            Sphere((-r, 0.0, -1.0), r, blue),
            Sphere((r, 0.0, -1.0), r, red),
        ]),
        background=SKY,
    )


def many_spheres(rng: np.random.Generator | int | None = None) -> World:
    """The random field of small spheres around three large ones.

    Args:
        rng: A numpy Generator, an integer seed, or None for an unseeded
            generator.
    """
    rng = np.random.default_rng(rng)
    world = Collection([Sphere((0.0, -1000.0, 0.0), 1000.0, Lambertian((0.5, 0.5, 0.5)))])

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])
            if np.linalg.norm(center - np.array([4.0, 0.2, 0.0])) <= 0.9:
                continue

            if choose_mat < 0.65:
                albedo = rng.random(3) * rng.random(3)
                material = Lambertian(tuple(float(c) for c in albedo))
            elif choose_mat < 0.8:
                albedo = rng.uniform(0.5, 1.0, size=3)
                material = Metal(tuple(float(c) for c in albedo), fuzz=float(rng.random() * 0.5))
            else:
                material = Dielectric(1.5)
            world.add(Sphere(tuple(float(c) for c in center), 0.2, material))

    world.add(Sphere((0.0, 1.0, 0.0), 1.0, Dielectric(1.5)))
    world.add(Sphere((-4.0, 1.0, 0.0), 1.0, Lambertian((0.4, 0.2, 0.1))))
    world.add(Sphere((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), fuzz=0.0)))
    return World(world, background=SKY)


def earth(texture_path: str = EARTH_TEXTURE_PATH) -> World:
    """A globe textured with an image; a missing image renders a checkerboard."""
    surface = Simple(load_image_texture(texture_path))
    return World(Collection([Sphere((0.0, 0.0, -12.0), 2.0, surface)]), background=SKY)


def _perlin_spheres(rng: np.random.Generator | int | None) -> list[Sphere]:
    marble = Simple(Noise(4.0, Perlin(rng)))
    return [
        Sphere((0.0, -1000.0, 0.0), 1000.0, marble),
        Sphere((0.0, 2.0, 0.0), 2.0, marble),
    ]


def two_perlin_spheres(rng: np.random.Generator | int | None = None) -> World:
    return World(Collection(_perlin_spheres(rng)), background=SKY)


def quads() -> World:
    left_red = Lambertian((1.0, 0.2, 0.2))
    back_green = Lambertian((0.2, 1.0, 0.2))
    right_blue = Lambertian((0.2, 0.2, 1.0))
    upper_orange = Lambertian((1.0, 0.5, 0.0))
    lower_teal = Lambertian((0.2, 0.8, 0.8))
    return World(
        Collection([
            Quad((-3.0, -2.0, 5.0), (0.0, 0.0, -4.0), (0.0, 4.0, 0.0), left_red),
            Quad((-2.0, -2.0, 0.0), (4.0, 0.0, 0.0), (0.0, 4.0, 0.0), back_green),
            Quad((3.0, -2.0, 1.0), (0.0, 0.0, 4.0), (0.0, 4.0, 0.0), right_blue),
            Quad((-2.0, 3.0, 1.0), (4.0, 0.0, 0.0), (0.0, 0.0, 4.0), upper_orange),
            Quad((-2.0, -3.0, 5.0), (4.0, 0.0, 0.0), (0.0, 0.0, -4.0), lower_teal),
        ]),
        background=SKY,
    )


def simple_light(rng: np.random.Generator | int | None = None) -> World:
    lamp = Light((4.0, 4.0, 4.0))
    objects = _perlin_spheres(rng)
    objects.append(Quad((3.0, 1.0, -2.0), (2.0, 0.0, 0.0), (0.0, 2.0, 0.0), lamp))
    return World(Collection(objects), background=BLACK)


def cornell_box() -> World:
    """The empty Cornell box: five walls and a ceiling light, 555 units a side."""
    red = Lambertian(CORNELL_RED)
    white = Lambertian(CORNELL_WHITE)
    green = Lambertian(CORNELL_GREEN)
    light = Light(CORNELL_LIGHT)
    return World(
        Collection([
            Quad((555.0, 0.0, 0.0), (0.0, 555.0, 0.0), (0.0, 0.0, 555.0), green),
            Quad((0.0, 0.0, 0.0), (0.0, 555.0, 0.0), (0.0, 0.0, 555.0), red),
            Quad((343.0, 554.0, 332.0), (-130.0, 0.0, 0.0), (0.0, 0.0, -105.0), light),
            Quad((0.0, 0.0, 0.0), (555.0, 0.0, 0.0), (0.0, 0.0, 555.0), white),
            Quad((555.0, 555.0, 555.0), (-555.0, 0.0, 0.0), (0.0, 0.0, -555.0), white),
            Quad((0.0, 0.0, 555.0), (555.0, 0.0, 0.0), (0.0, 555.0, 0.0), white),
        ]),
        background=BLACK,
    )


def cornell_box_two_boxes() -> World:
    """The Cornell box with a tall and a short block, each turned about y."""
    world = cornell_box()
    white = world.root.objects[3].material
    y_axis = (0.0, 1.0, 0.0)
    world.root.add(
        make_box(
            (0.0, 0.0, 0.0),
            (165.0, 330.0, 165.0),
            white,
            rotation=Quaternion.from_axis_angle(y_axis, math.radians(15.0)),
            offset=(265.0, 0.0, 295.0),
        )
    )
    world.root.add(
        make_box(
            (0.0, 0.0, 0.0),
            (165.0, 165.0, 165.0),
            white,
            rotation=Quaternion.from_axis_angle(y_axis, math.radians(-18.0)),
            offset=(130.0, 0.0, 65.0),
        )
    )
    return world


def create_world(scene: Scene, rng: np.random.Generator | int | None = None) -> World:
    """Build the world for a built-in scene.

    Args:
        scene: Which scene to build.
        rng: Seed or Generator for the scenes with random content (Many
            Spheres and the Perlin scenes). Ignored by the others.

    Returns:
        A new World. Each call builds fresh descriptors.
    """
    if scene is Scene.ONE_SPHERE:
        return one_sphere()
    if scene is Scene.METAL_SPHERES:
        return metal_spheres()
    if scene is Scene.GLASS_SPHERES:
        return glass_spheres()
    if scene is Scene.THREE_SPHERES:
        return three_spheres()
    if scene is Scene.HOLLOW_GLASS:
        return hollow_glass()
    if scene is Scene.RED_AND_BLUE:
        return red_and_blue()
    if scene is Scene.MANY_SPHERES:
        return many_spheres(rng)
    if scene is Scene.EARTH:
        return earth()
    if scene is Scene.TWO_PERLIN_SPHERES:
        return two_perlin_spheres(rng)
    if scene is Scene.QUADS:
        return quads()
    if scene is Scene.SIMPLE_LIGHT:
        return simple_light(rng)
    if scene is Scene.CORNELL_BOX:
        return cornell_box()
    if scene is Scene.CORNELL_BOX_TWO_BOXES:
        return cornell_box_two_boxes()
    raise ValueError(f"Unknown scene: {scene}")
