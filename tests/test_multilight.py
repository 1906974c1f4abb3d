import math

import pytest

from lidarview.multilight import (
    light_cube_matrices,
    multilight_uniforms,
    point_light_positions,
)
from lidarview.scene import Material


def test_point_light_positions_from_source():
    positions = point_light_positions()
    assert len(positions) == 4
    assert positions[0] == (0.7, 0.2, 2.0)
    assert positions[2] == (-4.0, 2.0, -12.0)


def test_point_light_positions_returns_fresh_list():
    positions = point_light_positions()
    positions.clear()
    assert len(point_light_positions()) == 4


def test_uniforms_have_every_point_light():
    uniforms = multilight_uniforms(Material())
    positions = point_light_positions()
    for index, position in enumerate(positions):
        assert uniforms[f"pointLights[{index}].position"] == position
        assert uniforms[f"pointLights[{index}].constant"] == 1.0
        assert uniforms[f"pointLights[{index}].linear"] == 0.09
        assert uniforms[f"pointLights[{index}].quadratic"] == 0.032
    assert "pointLights[4].position" not in uniforms


def test_uniforms_follow_material():
    material = Material()
    material.key_press("A")
    uniforms = multilight_uniforms(material)
    assert uniforms["material.shininess"] == material.shininess
    assert uniforms["dirLight.direction"] == material.light_direction
    assert uniforms["spotLight.direction"] == material.light_direction
    assert uniforms["lightColor"] == material.light_color
    assert uniforms["dirLight.ambient"] == material.light_ambient
    assert uniforms["material.diffuse"] == 0
    assert uniforms["material.specular"] == 1


def test_spot_cutoffs():
    uniforms = multilight_uniforms(Material())
    assert uniforms["spotLight.cutoff"] == pytest.approx(math.cos(math.radians(6.0)))
    assert uniforms["spotLight.outerCutOff"] == pytest.approx(math.cos(math.radians(9.0)))
    assert uniforms["spotLight.cutoff"] > uniforms["spotLight.outerCutOff"]
    assert uniforms["spotLight.position"] == (0.0, 0.0, 3.0)


def test_view_matrix_maps_eye_to_origin():
    uniforms = multilight_uniforms(Material())
    eye = uniforms["u_viewPos"]
    mapped = uniforms["viewMat"].map_point(eye)
    assert mapped == pytest.approx((0.0, 0.0, 0.0))


def test_first_light_cube_sits_at_first_light():
    first = light_cube_matrices()[0]
    assert first.map_point((0.0, 0.0, 0.0)) == pytest.approx(point_light_positions()[0])


def test_light_cubes_accumulate_scale():
    matrices = light_cube_matrices()
    assert len(matrices) == 4
    for index, matrix in enumerate(matrices):
        origin = matrix.map_point((0.0, 0.0, 0.0))
        unit = matrix.map_point((1.0, 0.0, 0.0))
        length = math.dist(origin, unit)
        assert length == pytest.approx(0.5 ** (index + 1))


def test_light_cubes_build_on_previous():
    matrices = light_cube_matrices()
    positions = point_light_positions()
    for previous, current, position in zip(matrices, matrices[1:], positions[1:]):
        assert current.map_point((0.0, 0.0, 0.0)) == pytest.approx(
            previous.map_point(position)
        )