"""Taichi-based Monte Carlo path tracer.

This package renders scenes of spheres and quads with GPU-accelerated
unidirectional path tracing, with support for:
- Diffuse, metal, glass, textured and emissive materials
- Solid, checker, image and Perlin noise textures
- A thin-lens camera with depth of field
- Parallel rendering in column strips with progress reporting

Subpackages:
    core: Vector utilities, colors, settings, the integrator and render()
    geometry: Shape primitives and intersection algorithms
    materials: Scattering and emission models
    textures: Texture evaluation, Perlin noise and image loading
    scene: Scene description, storage, compilation and presets
    camera: Camera model with ray generation
    preview: PNG export

Taichi must be initialized (ti.init) before importing the subpackages, since
their modules allocate Taichi fields at import time.
"""

__version__ = "0.1.0"
