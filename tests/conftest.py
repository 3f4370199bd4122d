"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to avoid circular imports and ensure Taichi is initialized
    from pathtracer.materials.dielectric import clear_dielectric_materials
    from pathtracer.materials.lambertian import clear_lambertian_materials
    from pathtracer.materials.light import clear_light_materials
    from pathtracer.materials.metal import clear_metal_materials
    from pathtracer.materials.textured import clear_textured_materials
    from pathtracer.scene.intersection import clear_scene
    from pathtracer.scene.manager import _clear_material_tracking, set_background
    from pathtracer.textures.perlin import clear_perlin_tables
    from pathtracer.textures.texture import clear_textures

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_textured_materials()
        clear_light_materials()
        clear_textures()
        clear_perlin_tables()
        _clear_material_tracking()
        set_background((0.0, 0.0, 0.0))

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()
