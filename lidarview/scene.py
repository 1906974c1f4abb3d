"""State of the flashlight demo: mouse-driven spin, FPS counter and lighting."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .transforms import Matrix4, Quaternion

logger = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]

FRICTION = 0.99
"""Factor applied to the angular speed on every tick."""

MIN_ANGULAR_SPEED = 0.01
"""Below this speed the spin stops."""

SHININESS_STEP = 8.0
MIN_SHININESS = 8.0

FPS_SAMPLE_FRAMES = 100
"""Frames counted before the frame rate is measured again."""

TITLE_INTERVAL = 100
"""Frames between two window-title updates."""

VIEW_EYE: Vec3 = (0.0, 0.0, 3.0)
VIEW_CENTER: Vec3 = (0.0, 0.0, 2.0)
VIEW_UP: Vec3 = (0.0, 1.0, 0.0)

_CUBE_POSITIONS: tuple[Vec3, ...] = (
    (0.0, 0.0, 0.0),
    (2.0, 5.0, -15.0),
    (-1.5, -2.2, -2.5),
    (-3.8, -2.0, -12.3),
    (2.4, -0.4, -3.5),
    (-1.7, 3.0, -7.5),
    (1.3, -2.0, -2.5),
    (1.5, 2.0, -2.5),
    (1.5, 0.2, -1.5),
    (-1.3, 1.0, -1.5),
)


def _normalized(v: Vec3) -> Vec3:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


@dataclass
class ArcballRotation:
    """Spin given by mouse sweeps that slows down with friction."""

    rotation_axis: Vec3 = (0.0, 0.0, 0.0)
    angular_speed: float = 0.0
    rotation: Quaternion = field(default_factory=Quaternion)
    press_position: tuple[float, float] = (0.0, 0.0)

    def press(self, x: float, y: float) -> None:
        """Remember where the mouse button went down."""
        self.press_position = (float(x), float(y))

    def release(self, x: float, y: float) -> None:
        """Add the sweep since the press to the spin axis and speed."""
        dx = x - self.press_position[0]
        dy = y - self.press_position[1]
        # The axis is perpendicular to the sweep on screen.
        n = _normalized((dy, dx, 0.0))
        acceleration = math.hypot(dx, dy) / 100.0
        speed = self.angular_speed
        self.rotation_axis = _normalized(
            tuple(a * speed + b * acceleration for a, b in zip(self.rotation_axis, n))
        )
        self.angular_speed += acceleration

    def tick(self) -> Quaternion:
        """Apply friction and advance the rotation by one timer step."""
        self.angular_speed *= FRICTION
        if self.angular_speed < MIN_ANGULAR_SPEED:
            self.angular_speed = 0.0
        else:
            step = Quaternion.from_axis_and_angle(self.rotation_axis, self.angular_speed)
            self.rotation = step * self.rotation
        return self.rotation


@dataclass
class FpsCounter:
    """Measures frames per second and produces a window title now and then."""

    fps: float = 60.0
    _start: Optional[float] = None
    _frames: int = 0
    _title_count: int = 0

    def frame(self, now: float) -> Optional[str]:
        """Count a frame painted at ``now`` seconds.

        Returns a new window title every ``TITLE_INTERVAL`` frames, else None.
        """
        if self._start is None:
            self._start = now
        previous = self._frames
        self._frames += 1
        if previous > FPS_SAMPLE_FRAMES:
            elapsed = now - self._start
            self.fps = self._frames / elapsed if elapsed > 0 else math.inf
            self._start = now
            self._frames = 0

        self._title_count += 1
        if self._title_count >= TITLE_INTERVAL:
            self._title_count = 0
            logger.debug("fps %s", self.fps)
            return self.title()
        return None

    def title(self) -> str:
        return f"FPS:{self.fps:.3f}"


@dataclass
class Material:
    """Material shininess and the colours of the flashlight."""

    shininess: float = 64.0
    light_ambient: Vec3 = (0.2, 0.2, 0.2)
    light_diffuse: Vec3 = (0.5, 0.5, 0.5)
    light_specular: Vec3 = (1.0, 1.0, 1.0)
    light_direction: Vec3 = (0.0, 0.0, -3.0)
    light_color: Vec3 = (1.0, 1.0, 1.0)

    def key_press(self, key: str) -> float:
        """'A' raises the shininess, 'D' lowers it; returns the new value."""
        pressed = key.upper()
        if pressed == "A":
            self.shininess += SHININESS_STEP
        elif pressed == "D":
            self.shininess = max(self.shininess - SHININESS_STEP, MIN_SHININESS)
        return self.shininess


def cube_positions() -> list[Vec3]:
    """Centres of the ten cubes of the scene."""
    return list(_CUBE_POSITIONS)


def flashlight_uniforms(material: Material) -> dict[str, object]:
    """Uniform values of the material shader for one frame."""
    return {
        "material.diffuse": 0,
        "material.specular": 1,
        "material.shininess": material.shininess,
        "light.ambient": material.light_ambient,
        "light.diffuse": material.light_diffuse,
        "light.specular": material.light_specular,
        "light.direction": material.light_direction,
        "light.position": (0.0, 0.0, 3.0),
        "light.constant": 1.0,
        "light.linear": 0.09,
        "light.quadratic": 0.032,
        "light.cutoff": math.cos(math.radians(6.0)),
        "light.outerCutOff": math.cos(math.radians(9.0)),
        "viewPos": (0.0, 0.0, 3.0),
        "viewMat": Matrix4.identity().look_at(VIEW_EYE, VIEW_CENTER, VIEW_UP),
    }


def model_matrices(rotation: Quaternion) -> list[Matrix4]:
    """Model matrix of each cube: moved to its place, then spun in place."""
    return [
        Matrix4.identity().translate(*position).rotate_quaternion(rotation)
        for position in _CUBE_POSITIONS
    ]