"""Unit tests for the unified scene manager.

Tests cover:
- Material registration and unified material IDs
- Material type tracking (Python and kernel side)
- Sphere creation with shared materials
- Validation of material IDs
- Scene description export and import
- Demo scene factories
"""

import pytest
import taichi as ti


class TestMaterialRegistration:
    """Tests for adding materials through the SceneManager."""

    def test_material_ids_are_sequential_across_types(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        lam = scene.add_lambertian_material((0.5, 0.5, 0.5))
        met = scene.add_metal_material((0.8, 0.8, 0.8), fuzz=0.1)
        die = scene.add_dielectric_material(1.5)

        assert (lam, met, die) == (0, 1, 2)
        assert scene.get_material_count() == 3

    def test_material_info(self):
        from pathtracer.scene.manager import MaterialType, SceneManager

        scene = SceneManager()
        scene.add_lambertian_material((0.5, 0.5, 0.5))
        met = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=1.5)

        info = scene.get_material_info(met)
        assert info is not None
        assert info.material_type == MaterialType.METAL
        # First metal material in the metal registry
        assert info.type_index == 0
        assert info.params["fuzz"] == 1.0
        assert scene.get_material_info(99) is None
        assert scene.get_material_type_python(met) == MaterialType.METAL

    def test_kernel_side_material_lookup(self):
        from pathtracer.scene.manager import (
            MaterialType,
            SceneManager,
            get_material_type,
            get_material_type_index,
        )

        scene = SceneManager()
        scene.add_lambertian_material((0.5, 0.5, 0.5))
        scene.add_dielectric_material(1.5)
        second_lambertian = scene.add_lambertian_material((0.1, 0.1, 0.1))

        types = ti.field(dtype=ti.i32, shape=2)
        indices = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel(mat_id: ti.i32):
            types[0] = get_material_type(mat_id)
            indices[0] = get_material_type_index(mat_id)
            types[1] = get_material_type(42)
            indices[1] = get_material_type_index(42)

        test_kernel(second_lambertian)
        assert types[0] == int(MaterialType.LAMBERTIAN)
        assert indices[0] == 1
        assert types[1] == -1
        assert indices[1] == -1

    def test_invalid_material_parameters_raise(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_lambertian_material((1.2, 0.5, 0.5))
        with pytest.raises(ValueError):
            scene.add_dielectric_material(0.0)
        assert scene.get_material_count() == 0


class TestSphereManagement:
    """Tests for adding spheres through the SceneManager."""

    def test_spheres_share_a_material(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_lambertian_material((0.5, 0.5, 0.5))
        a = scene.add_sphere((0.0, 0.0, -1.0), 0.5, mat)
        b = scene.add_sphere((1.0, 0.0, -1.0), 0.5, mat)

        assert (a, b) == (0, 1)
        assert scene.get_sphere_count() == 2
        assert scene.get_sphere_info(0).material_id == mat
        assert scene.get_sphere_info(1).material_id == mat
        assert scene.get_material_count() == 1

    def test_sphere_info(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_metal_material((0.8, 0.8, 0.8))
        idx = scene.add_sphere((1.0, 2.0, 3.0), -4.0, mat)

        info = scene.get_sphere_info(idx)
        assert info.center == (1.0, 2.0, 3.0)
        assert info.radius == 0.0
        assert scene.get_sphere_info(5) is None

    def test_invalid_material_id_raises(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 0)

        scene.add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, 1)
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.add_sphere((0.0, 0.0, 0.0), 1.0, -1)

    def test_convenience_sphere_methods(self):
        from pathtracer.scene.manager import MaterialType, SceneManager

        scene = SceneManager()
        s0, m0 = scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.1, 0.2, 0.5))
        s1, m1 = scene.add_metal_sphere((1.0, 0.0, -1.0), 0.5, (0.8, 0.6, 0.2), fuzz=0.3)
        s2, m2 = scene.add_dielectric_sphere((-1.0, 0.0, -1.0), 0.5, 1.5)

        assert (s0, s1, s2) == (0, 1, 2)
        assert scene.get_material_info(m0).material_type == MaterialType.LAMBERTIAN
        assert scene.get_material_info(m1).material_type == MaterialType.METAL
        assert scene.get_material_info(m2).material_type == MaterialType.DIELECTRIC

    def test_new_manager_clears_previous_scene(self):
        from pathtracer.scene.intersection import get_sphere_count
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        assert get_sphere_count() == 1

        SceneManager()
        assert get_sphere_count() == 0

    def test_clear(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        scene.clear()
        assert scene.get_sphere_count() == 0
        assert scene.get_material_count() == 0
        assert scene.spheres == []
        assert scene.materials == []

    def test_capacity_limits(self):
        from pathtracer.scene.intersection import MAX_SPHERES
        from pathtracer.scene.manager import MAX_MATERIALS, SceneManager

        assert SceneManager.get_max_spheres() == MAX_SPHERES
        assert SceneManager.get_max_materials() == MAX_MATERIALS


class TestSceneDescription:
    """Tests for scene export and import."""

    def test_to_dict(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        mat = scene.add_metal_material((0.8, 0.6, 0.2), fuzz=0.3)
        scene.add_sphere((1.0, 0.0, -1.0), 0.5, mat)

        data = scene.to_dict()
        assert data["materials"] == [{"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.3}]
        assert data["spheres"] == [{"center": [1.0, 0.0, -1.0], "radius": 0.5, "material_id": 0}]

    def test_dict_round_trip(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        ground = scene.add_lambertian_material((0.8, 0.8, 0.0))
        glass = scene.add_dielectric_material(1.5)
        scene.add_sphere((0.0, -100.5, -1.0), 100.0, ground)
        scene.add_sphere((0.0, 0.0, -1.0), 0.5, glass)
        scene.add_sphere((1.0, 0.0, -1.0), 0.5, glass)
        data = scene.to_dict()

        restored = SceneManager()
        restored.from_dict(data)

        assert restored.to_dict() == data
        assert restored.get_sphere_count() == 3
        assert restored.get_material_count() == 2

    def test_from_dict_unknown_material_type(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Unknown material type"):
            scene.from_dict({"materials": [{"type": "emissive"}], "spheres": []})

    def test_from_dict_bad_material_parameters(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Invalid parameters"):
            scene.from_dict({"materials": [{"type": "lambertian", "fuzz": 0.5}], "spheres": []})
        with pytest.raises(ValueError, match="Invalid parameters"):
            scene.from_dict({"materials": [{"type": "metal"}], "spheres": []})

    def test_from_dict_sphere_with_missing_material(self):
        from pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        data = {
            "materials": [{"type": "dielectric", "refraction_index": 1.5}],
            "spheres": [{"center": [0.0, 0.0, -1.0], "radius": 0.5, "material_id": 3}],
        }
        with pytest.raises(ValueError, match="Invalid material_id"):
            scene.from_dict(data)


class TestDemoScenes:
    """Tests for the demo scene factories."""

    def test_two_sphere_scene(self):
        from pathtracer.scene.demo import create_two_sphere_scene

        scene, camera = create_two_sphere_scene()
        assert scene.get_sphere_count() == 2
        assert scene.get_sphere_info(0).radius == 100.0
        assert camera.image_width == 400
        assert camera.samples_per_pixel == 1
        assert camera.aspect_ratio == pytest.approx(16.0 / 9.0)

    def test_material_demo_scene(self):
        from pathtracer.scene.demo import create_material_demo_scene
        from pathtracer.scene.manager import MaterialType

        scene, camera = create_material_demo_scene()
        assert scene.get_sphere_count() == 4
        types = [scene.get_material_info(s.material_id).material_type for s in scene.spheres]
        assert types == [
            MaterialType.LAMBERTIAN,
            MaterialType.LAMBERTIAN,
            MaterialType.METAL,
            MaterialType.METAL,
        ]
        assert scene.get_material_info(3).params["fuzz"] == 1.0
        assert camera.samples_per_pixel == 100
        assert camera.max_depth == 50


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
