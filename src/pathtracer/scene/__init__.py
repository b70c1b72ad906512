"""Scene module for scene storage and management.

Components:
    intersection: Sphere storage and nearest-hit scene queries
    manager: Scene manager coordinating spheres and shared materials
    demo: Ready-made demo scenes

Scene data uses a Structure-of-Arrays layout in Taichi fields; spheres
refer to materials by a unified material ID.
"""

from .demo import create_material_demo_scene, create_two_sphere_scene
from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    get_material_type,
    get_material_type_index,
)

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    # Demo scenes
    "create_two_sphere_scene",
    "create_material_demo_scene",
]
