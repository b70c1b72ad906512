"""Demo scene configurations.

Two ready-made scenes are provided, both built around a large "ground"
sphere of radius 100 whose top sits just below the origin:

- The two-sphere scene: a blue diffuse sphere resting on a yellow-green
  diffuse ground, rendered with one sample per pixel.
- The material demo scene: a diffuse center sphere flanked by a soft
  silver metal sphere and a very rough gold metal sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.demo import create_material_demo_scene
    >>> from pathtracer.core.integrator import render
    >>>
    >>> scene, camera = create_material_demo_scene()
    >>> image = render(camera, seed=0)
"""

from pathtracer.camera.thin_lens import Camera
from pathtracer.scene.manager import SceneManager

# 16:9 output at 400 pixels wide
ASPECT_RATIO = 16.0 / 9.0
IMAGE_WIDTH = 400

GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.8, 0.8, 0.0)


def create_two_sphere_scene() -> tuple[SceneManager, Camera]:
    """Create a diffuse sphere on a diffuse ground.

    Returns:
        Tuple of (scene, camera). The camera is a pinhole at the origin
        looking down -z with a 90 degree vertical field of view.
    """
    scene = SceneManager()

    ground = scene.add_lambertian_material(GROUND_ALBEDO)
    center = scene.add_lambertian_material((0.1, 0.2, 0.5))

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)
    scene.add_sphere((0.0, 0.0, -1.0), 0.5, center)

    camera = Camera(
        aspect_ratio=ASPECT_RATIO,
        image_width=IMAGE_WIDTH,
        samples_per_pixel=1,
        max_depth=10,
    )
    return scene, camera


def create_material_demo_scene() -> tuple[SceneManager, Camera]:
    """Create the diffuse and metal material showcase.

    Scene layout:
        - Ground: diffuse (0.8, 0.8, 0.0)
        - Center (0, 0, -1.2): diffuse (0.1, 0.2, 0.5)
        - Left (-1, 0, -1): metal (0.8, 0.8, 0.8), fuzz 0.3
        - Right (1, 0, -1): metal (0.8, 0.6, 0.2), fuzz 1.0

    Returns:
        Tuple of (scene, camera) with 100 samples per pixel and a bounce
        limit of 50.
    """
    scene = SceneManager()

    material_ground = scene.add_lambertian_material(GROUND_ALBEDO)
    material_center = scene.add_lambertian_material((0.1, 0.2, 0.5))
    material_left = scene.add_metal_material((0.8, 0.8, 0.8), fuzz=0.3)
    material_right = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=1.0)

    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, material_ground)
    scene.add_sphere((0.0, 0.0, -1.2), 0.5, material_center)
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, material_left)
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, material_right)

    camera = Camera(
        aspect_ratio=ASPECT_RATIO,
        image_width=IMAGE_WIDTH,
        samples_per_pixel=100,
        max_depth=50,
    )
    return scene, camera
