"""Dielectric (glass/water) material implementation.

This module implements clear dielectrics that either reflect or refract
every incoming ray and never absorb light.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when (n1 / n2) * sin(theta1) > 1
    - Schlick's approximation for the Fresnel reflectance, which grows
      toward 1 at grazing angles

When refraction is possible the material flips a coin weighted by the
Schlick reflectance to pick between the two outcomes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     refraction_index, incident_dir, normal, front_face
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.random import random_float
from pathtracer.core.ray import dot, normalize, reflect, reflectance, refract

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def _refraction_ratio(refraction_index: ti.f32, front_face: ti.i32) -> ti.f32:
    # Entering the material: 1 / n. Leaving it: n / 1.
    ratio = refraction_index
    if front_face == 1:
        ratio = 1.0 / refraction_index
    return ratio


@ti.func
def scatter_dielectric(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute scattered ray direction for dielectric material.

    Args:
        refraction_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal (unit length, facing the incoming ray).
        front_face: 1 if the ray is entering the material from outside,
            0 if it is leaving from inside.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction.
        - attenuation: White; clear glass absorbs nothing.
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ri = _refraction_ratio(refraction_index, front_face)

    unit_direction = normalize(incident_direction)
    cos_theta = ti.min(dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    cannot_refract = ri * sin_theta > 1.0

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or reflectance(cos_theta, ri) > random_float():
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, ri)

    did_scatter = 1
    return scattered_direction, attenuation, did_scatter


@ti.func
def will_reflect(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.i32:
    """Determine if total internal reflection will occur.

    Returns:
        1 if no refracted direction exists, 0 otherwise.
    """
    ri = _refraction_ratio(refraction_index, front_face)
    cos_theta = ti.min(dot(-normalize(incident_direction), normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return ri * sin_theta > 1.0


@ti.func
def fresnel_reflectance(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.f32:
    """Schlick reflectance for a ray hitting this dielectric."""
    ri = _refraction_ratio(refraction_index, front_face)
    cos_theta = ti.min(dot(-normalize(incident_direction), normal), 1.0)
    return reflectance(cos_theta, ri)


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

# Storage for dielectric material properties
dielectric_refraction_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(refraction_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refraction_index: Index of refraction. Default is 1.5 (typical glass).
            Must be positive.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If refraction_index is not positive.
    """
    if refraction_index <= 0.0:
        raise ValueError(
            f"Index of refraction = {refraction_index} is not positive."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_refraction_indices[idx] = refraction_index
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_refraction_index(material_idx: ti.i32) -> ti.f32:
    return dielectric_refraction_indices[material_idx]


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Scatter off the registered dielectric material at material_idx.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    refraction_index = get_dielectric_refraction_index(material_idx)
    return scatter_dielectric(refraction_index, incident_direction, normal, front_face)
