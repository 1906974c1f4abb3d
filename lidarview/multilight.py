"""Lighting set-up of the multi-light demo.

The scene has one directional light, four point lights and a flashlight.
"""

from __future__ import annotations

import math

from .scene import VIEW_CENTER, VIEW_EYE, VIEW_UP, Material, Vec3
from .transforms import Matrix4

LIGHT_CUBE_SCALE = 0.5
"""Scale applied to the model matrix after each light-cube translation."""

ATTENUATION_CONSTANT = 1.0
ATTENUATION_LINEAR = 0.09
ATTENUATION_QUADRATIC = 0.032

SPOT_POSITION: Vec3 = (0.0, 0.0, 3.0)
SPOT_CUTOFF_DEGREES = 6.0
SPOT_OUTER_CUTOFF_DEGREES = 9.0

_POINT_LIGHT_POSITIONS: tuple[Vec3, ...] = (
    (0.7, 0.2, 2.0),
    (2.3, -3.3, -4.0),
    (-4.0, 2.0, -12.0),
    (0.0, 0.0, -3.0),
)


def point_light_positions() -> list[Vec3]:
    """Positions of the four point lights."""
    return list(_POINT_LIGHT_POSITIONS)


def multilight_uniforms(material: Material) -> dict[str, object]:
    """Uniform values of the light and material shaders for one frame."""
    uniforms: dict[str, object] = {
        "lightColor": material.light_color,
        "material.diffuse": 0,
        "material.specular": 1,
        "material.shininess": material.shininess,
        "dirLight.ambient": material.light_ambient,
        "dirLight.diffuse": material.light_diffuse,
        "dirLight.specular": material.light_specular,
        "dirLight.direction": material.light_direction,
    }
    for index, position in enumerate(_POINT_LIGHT_POSITIONS):
        prefix = f"pointLights[{index}]"
        uniforms.update(
            {
                f"{prefix}.ambient": material.light_ambient,
                f"{prefix}.diffuse": material.light_diffuse,
                f"{prefix}.specular": material.light_specular,
                f"{prefix}.position": position,
                f"{prefix}.constant": ATTENUATION_CONSTANT,
                f"{prefix}.linear": ATTENUATION_LINEAR,
                f"{prefix}.quadratic": ATTENUATION_QUADRATIC,
            }
        )
    uniforms.update(
        {
            "spotLight.ambient": material.light_ambient,
            "spotLight.diffuse": material.light_diffuse,
            "spotLight.specular": material.light_specular,
            "spotLight.position": SPOT_POSITION,
            "spotLight.direction": material.light_direction,
            "spotLight.cutoff": math.cos(math.radians(SPOT_CUTOFF_DEGREES)),
            "spotLight.outerCutOff": math.cos(math.radians(SPOT_OUTER_CUTOFF_DEGREES)),
            "spotLight.constant": ATTENUATION_CONSTANT,
            "spotLight.linear": ATTENUATION_LINEAR,
            "spotLight.quadratic": ATTENUATION_QUADRATIC,
            "u_viewPos": VIEW_EYE,
            "viewMat": Matrix4.identity().look_at(VIEW_EYE, VIEW_CENTER, VIEW_UP),
        }
    )
    return uniforms


def light_cube_matrices() -> list[Matrix4]:
    """Model matrices of the four light cubes.

    The matrix is not reset between cubes: each one builds on the previous
    translation and halving, so later cubes are smaller and relative.
    """
    matrices = []
    model = Matrix4.identity()
    for position in _POINT_LIGHT_POSITIONS:
        model = model.translate(*position).scale(
            LIGHT_CUBE_SCALE, LIGHT_CUBE_SCALE, LIGHT_CUBE_SCALE
        )
        matrices.append(model)
    return matrices