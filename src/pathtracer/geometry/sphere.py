"""Sphere primitive with analytic ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the
intersection routine. The quadratic is solved in its half-b form, which
drops a factor of two from every term and avoids the extra multiplications
of the textbook b^2 - 4ac discriminant.

The HitRecord produced here is the single intersection record used
throughout the renderer. Its normal always opposes the incoming ray; the
front_face flag remembers which side of the surface was hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.interval import Interval, interval_surrounds
from pathtracer.core.ray import Ray, dot, length_squared, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The 3D point of the intersection. Only valid if hit == 1.
        normal: Unit surface normal, oriented against the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the ray arrived from outside the surface, 0 if it
            hit the inside. Only valid if hit == 1.
        material_id: Material of the surface that was hit, -1 on a miss.
            The record only refers to the material; the scene owns it.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a surface normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Geometric normal pointing out of the surface
            (unit length).

    Returns:
        A tuple (front_face, normal). front_face is 1 when the ray
        approaches from outside (dot(ray_direction, outward_normal) < 0), in
        which case normal is outward_normal; otherwise it is negated.
    """
    front_face = 0
    normal = -outward_normal
    if dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval, material_id: ti.i32) -> HitRecord:
    """Test for ray-sphere intersection.

    Solves |origin + t * direction - center|^2 = radius^2 using:
        oc = center - origin
        a = dot(direction, direction)
        h = dot(direction, oc)
        c = dot(oc, oc) - radius^2
        discriminant = h^2 - a * c

    The nearer root (h - sqrt(discriminant)) / a is tried first and the
    farther one only if the nearer lies outside ray_t. Roots on the
    interval's boundary are rejected. A sphere of radius 0 is never hit.

    Args:
        ray: The ray to test.
        sphere: The sphere to test intersection against.
        ray_t: Open range of acceptable ray parameters.
        material_id: Material to record on a hit.

    Returns:
        A HitRecord. Check the hit field to determine if an intersection
        occurred.
    """
    oc = sphere.center - ray.origin
    a = length_squared(ray.direction)
    h = dot(ray.direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    result = make_miss_record()

    if sphere.radius > 0.0 and discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        root = (h - sqrtd) / a
        valid = interval_surrounds(ray_t, root)
        if not valid:
            root = (h + sqrtd) / a
            valid = interval_surrounds(ray_t, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            front_face, normal = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=material_id,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere, clamping a negative radius to zero."""
    return Sphere(center=center, radius=ti.max(radius, 0.0))
