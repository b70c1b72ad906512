"""Taichi-based offline path tracer.

This package renders scenes of spheres with diffuse, metal and glass
materials through a thin-lens camera, writing plain-text PPM images.

Subpackages:
    core: Vector kernel, rays, intervals, random source and the integrator
    geometry: Sphere primitive and hit records
    materials: Lambertian, metal and dielectric scattering
    scene: Scene storage, the scene manager and demo scenes
    camera: Thin-lens camera with ray generation
    preview: PPM and PNG export
"""

__version__ = "0.1.0"
