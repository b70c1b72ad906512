"""Unit tests for sphere intersection and intervals.

Tests cover:
- Interval membership, clamping and the named intervals
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Ray tangent to sphere
- Interval bounds excluding roots
"""

import math

import pytest
import taichi as ti


class TestInterval:
    """Tests for the Interval helpers."""

    def test_contains_is_inclusive(self):
        from pathtracer.core.interval import interval_contains, make_interval

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = make_interval(0.0, 1.0)
            results[0] = interval_contains(iv, 0.0)
            results[1] = interval_contains(iv, 1.0)
            results[2] = interval_contains(iv, 1.5)

        test_kernel()
        assert results[0] == 1
        assert results[1] == 1
        assert results[2] == 0

    def test_surrounds_is_exclusive(self):
        from pathtracer.core.interval import interval_surrounds, make_interval

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = make_interval(0.0, 1.0)
            results[0] = interval_surrounds(iv, 0.0)
            results[1] = interval_surrounds(iv, 0.5)
            results[2] = interval_surrounds(iv, 1.0)

        test_kernel()
        assert results[0] == 0
        assert results[1] == 1
        assert results[2] == 0

    def test_clamp(self):
        """Test clamping into [0, 0.999], the quantization range."""
        from pathtracer.core.interval import interval_clamp, make_interval

        results = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            iv = make_interval(0.0, 0.999)
            results[0] = interval_clamp(iv, -0.5)
            results[1] = interval_clamp(iv, 0.25)
            results[2] = interval_clamp(iv, 1.5)

        test_kernel()
        assert results[0] == 0.0
        assert abs(results[1] - 0.25) < 1e-6
        assert abs(results[2] - 0.999) < 1e-6

    def test_empty_and_universe(self):
        """Test the empty interval contains nothing and the universe everything."""
        from pathtracer.core.interval import (
            EMPTY,
            UNIVERSE,
            empty_interval,
            interval_contains,
            interval_size,
            universe_interval,
        )

        contains = ti.field(dtype=ti.i32, shape=2)
        sizes = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            empty = empty_interval()
            universe = universe_interval()
            contains[0] = interval_contains(empty, 0.0)
            contains[1] = interval_contains(universe, 1e30)
            sizes[0] = interval_size(empty)
            sizes[1] = interval_size(universe)

        test_kernel()
        assert contains[0] == 0
        assert contains[1] == 1
        assert sizes[0] < 0.0
        assert sizes[1] > 0.0
        assert EMPTY == (math.inf, -math.inf)
        assert UNIVERSE == (-math.inf, math.inf)


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        from pathtracer.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_make_sphere_clamps_negative_radius(self):
        from pathtracer.geometry.sphere import make_sphere, vec3

        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            radius_result[None] = make_sphere(vec3(0.0, 0.0, 0.0), -2.0).radius

        test_kernel()
        assert radius_result[None] == 0.0

    def test_set_face_normal(self):
        """Test the stored normal always opposes the ray."""
        from pathtracer.geometry.sphere import set_face_normal, vec3

        front = ti.field(dtype=ti.i32, shape=2)
        normals = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            outward = vec3(0.0, 0.0, 1.0)
            f0, n0 = set_face_normal(vec3(0.0, 0.0, -1.0), outward)
            f1, n1 = set_face_normal(vec3(0.0, 0.0, 1.0), outward)
            front[0] = f0
            front[1] = f1
            normals[0] = n0
            normals[1] = n1

        test_kernel()
        assert front[0] == 1
        assert abs(normals[0][2] - 1.0) < 1e-6
        assert front[1] == 0
        assert abs(normals[1][2] - (-1.0)) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, -1.0), radius=0.5)

            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 7)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point
            normal[None] = record.normal
            front_face[None] = record.front_face
            material_id[None] = record.material_id

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 0.5) < 1e-5
        p = point[None]
        assert abs(p[0]) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] - (-0.5)) < 1e-5
        n = normal[None]
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert front_face[None] == 1
        assert material_id[None] == 7

    def test_hit_sphere_unnormalized_direction(self):
        """Test t is measured in multiples of the direction vector."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -2.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            t_val[None] = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 0).t

        test_kernel()
        assert abs(t_val[None] - 2.0) < 1e-5

    def test_hit_sphere_miss(self):
        """Test ray missing sphere entirely."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(5.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 3)
            hit[None] = record.hit
            material_id[None] = record.material_id

        test_kernel()
        assert hit[None] == 0
        assert material_id[None] == -1

    def test_hit_sphere_inside(self):
        """Test ray starting inside sphere (back face hit)."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)

            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 0)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal
            front_face[None] = record.front_face

        test_kernel()
        assert hit[None] == 1
        # The nearer root is behind the origin, so the far root is used
        assert abs(t_val[None] - 1.0) < 1e-5
        n = normal[None]
        assert abs(n[2] - (-1.0)) < 1e-5
        assert front_face[None] == 0

    def test_hit_sphere_tangent(self):
        """Test ray tangent to sphere reports the single touching point."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            # Grazes the top of the sphere at (0, 1, 0)
            ray = make_ray(vec3(0.0, 1.0, 5.0), vec3(0.0, 0.0, -1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 0)
            hit[None] = record.hit
            t_val[None] = record.t

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 5.0) < 1e-3

    def test_hit_sphere_behind_ray(self):
        """Test sphere entirely behind the origin is not hit."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, -3.0), radius=1.0)
            hit[None] = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 0).hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_respects_interval_max(self):
        """Test a root beyond ray_t.max is rejected."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            hit[None] = hit_sphere(ray, sphere, make_interval(0.001, 3.0), 0).hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_root_on_boundary_rejected(self):
        """Test a root exactly on the interval bound is not accepted."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
            # Near root is t=4, far root t=6; only the far one survives
            record = hit_sphere(ray, sphere, make_interval(4.0, 100.0), 0)
            hit[None] = record.hit
            t_val[None] = record.t

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 6.0) < 1e-5

    def test_hit_sphere_zero_radius_is_never_hit(self):
        """Test a ray through the center of a collapsed sphere misses."""
        from pathtracer.core.interval import make_interval
        from pathtracer.core.ray import make_ray
        from pathtracer.geometry.sphere import hit_sphere, make_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            sphere = make_sphere(vec3(0.0, 0.0, -2.0), -3.0)
            record = hit_sphere(ray, sphere, make_interval(0.001, 1e30), 0)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
