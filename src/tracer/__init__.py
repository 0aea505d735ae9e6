"""Taichi-based sphere ray tracer with plain-text PPM output.

This package renders scenes of spheres lit by a procedural sky gradient,
using Monte Carlo diffuse bounces and multi-sample antialiasing:
- Host-side vector algebra for scene and camera setup
- Device-side ray generation, intersection and integration (Taichi)
- Gamma-corrected PPM "P3" encoding (and PNG export via Pillow)

Subpackages:
    core: Vectors, rays, random sampling, the color integrator and renderer
    geometry: Hit records, the surface abstraction and spheres
    scene: Scene storage, the scene manager and preset scenes
    camera: Pinhole camera with jittered ray generation
    output: PPM encoding and PNG export
"""

__version__ = "0.1.0"
