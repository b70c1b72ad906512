"""Scene-level ray intersection over the list of spheres.

The scene stores its spheres in Taichi fields (Structure of Arrays) and acts
as the composite surface of the renderer: a query against it visits every
sphere and returns the globally nearest hit inside the requested interval,
independent of the order in which spheres were added. Each sphere carries
the id of a shared material.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere(ti.math.vec3(0, 0, -1), 0.5, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.interval import Interval, make_interval
from pathtracer.core.ray import Ray
from pathtracer.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Only the count is reset; stale field entries are overwritten by later
    add_sphere() calls.
    """
    num_spheres[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. Negative values are clamped to 0.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = max(0.0, float(radius))
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def intersect_scene(ray: Ray, ray_t: Interval) -> HitRecord:
    """Find the nearest intersection between a ray and the scene.

    Every sphere is tested against [ray_t.min, closest_so_far]; each
    accepted hit tightens closest_so_far, so a later sphere can only
    replace the current result by being strictly closer.

    Args:
        ray: The ray to test.
        ray_t: Range of acceptable ray parameters.

    Returns:
        A HitRecord for the closest intersection, or a miss record.
    """
    closest_so_far = ray_t.max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(
            ray, sphere, make_interval(ray_t.min, closest_so_far), sphere_material_ids[i]
        )
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result

