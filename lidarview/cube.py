"""Fixed meshes used by the demo scenes: a textured cube, a quad and axis points."""

from __future__ import annotations

from dataclasses import dataclass

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class Mesh:
    """Vertex attributes for one draw call.

    ``normals`` and ``tex_coords`` are either empty or hold one entry per
    vertex; ``colors`` is free-form.
    """

    mode: str
    vertices: tuple[Vec3, ...]
    normals: tuple[Vec3, ...] = ()
    tex_coords: tuple[Vec2, ...] = ()
    colors: tuple[tuple[float, ...], ...] = ()

    def __post_init__(self) -> None:
        for name in ("vertices", "normals", "tex_coords", "colors"):
            object.__setattr__(self, name, tuple(tuple(item) for item in getattr(self, name)))
        for name in ("normals", "tex_coords"):
            values = getattr(self, name)
            if values and len(values) != len(self.vertices):
                raise ValueError(
                    f"{name} has {len(values)} entries for {len(self.vertices)} vertices"
                )

    def __len__(self) -> int:
        return len(self.vertices)


_TEX_A = ((0, 0), (1, 0), (1, 1), (1, 1), (0, 1), (0, 0))
_TEX_B = ((1, 0), (1, 1), (0, 1), (0, 1), (0, 0), (1, 0))
_TEX_C = ((0, 1), (1, 1), (1, 0), (1, 0), (0, 0), (0, 1))

_H = 0.5

# (triangle vertices, face normal, texture coordinates), back/front/left/right/down/up
_CUBE_FACES = (
    (
        ((-_H, -_H, -_H), (_H, -_H, -_H), (_H, _H, -_H), (_H, _H, -_H), (-_H, _H, -_H), (-_H, -_H, -_H)),
        (0.0, 0.0, -1.0),
        _TEX_A,
    ),
    (
        ((-_H, -_H, _H), (_H, -_H, _H), (_H, _H, _H), (_H, _H, _H), (-_H, _H, _H), (-_H, -_H, _H)),
        (0.0, 0.0, 1.0),
        _TEX_A,
    ),
    (
        ((-_H, _H, _H), (-_H, _H, -_H), (-_H, -_H, -_H), (-_H, -_H, -_H), (-_H, -_H, _H), (-_H, _H, _H)),
        (-1.0, 0.0, 0.0),
        _TEX_B,
    ),
    (
        ((_H, _H, _H), (_H, _H, -_H), (_H, -_H, -_H), (_H, -_H, -_H), (_H, -_H, _H), (_H, _H, _H)),
        (1.0, 0.0, 0.0),
        _TEX_B,
    ),
    (
        ((-_H, -_H, -_H), (_H, -_H, -_H), (_H, -_H, _H), (_H, -_H, _H), (-_H, -_H, _H), (-_H, -_H, -_H)),
        (0.0, -1.0, 0.0),
        _TEX_C,
    ),
    (
        ((-_H, _H, -_H), (_H, _H, -_H), (_H, _H, _H), (_H, _H, _H), (-_H, _H, _H), (-_H, _H, -_H)),
        (0.0, 1.0, 0.0),
        _TEX_C,
    ),
)


def build_cube() -> Mesh:
    """Unit cube centred on the origin: 12 triangles with normals and UVs."""
    vertices: list[Vec3] = []
    normals: list[Vec3] = []
    tex_coords: list[Vec2] = []
    for face_vertices, normal, face_tex in _CUBE_FACES:
        vertices.extend(face_vertices)
        normals.extend([normal] * len(face_vertices))
        tex_coords.extend((float(u), float(v)) for u, v in face_tex)
    return Mesh("triangles", tuple(vertices), tuple(normals), tuple(tex_coords))


def build_textured_quad() -> Mesh:
    """Square in the z=0 plane drawn as a triangle fan, with UVs and colours."""
    return Mesh(
        "triangle_fan",
        vertices=((-1.0, -1.0, 0.0), (1.0, -1.0, 0.0), (1.0, 1.0, 0.0), (-1.0, 1.0, 0.0)),
        tex_coords=((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)),
        colors=((1.0, 0.0, 0.0, 1.0), (0.0, 0.0, 1.0, 1.0), (0.0, 1.0, 0.0, 1.0)),
    )


def axis_points() -> Mesh:
    """Six coloured marker points around the origin."""
    return Mesh(
        "points",
        vertices=(
            (-4.0, -4.0, 0.0),
            (-4.0, 4.0, 0.0),
            (4.0, 4.0, 0.0),
            (4.0, -4.0, 0.0),
            (0.0, 0.0, 4.0),
            (0.0, 0.0, -4.0),
        ),
        colors=(
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
        ),
    )