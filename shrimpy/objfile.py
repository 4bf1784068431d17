"""Loading triangle meshes from Wavefront OBJ files."""

from __future__ import annotations

import os
import re

from shrimpy.tracer import Triangle
from shrimpy.vec3 import Vec3

_INDEX = re.compile(r"\+?[0-9]+")


def _parse_float(text: str) -> float:
    """Parse a number, falling back to 0.0 when the text is not one."""
    if "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def _vertex(vertices: list[Vec3], token: str) -> Vec3:
    if not _INDEX.fullmatch(token):
        raise ValueError(f"invalid face index: {token!r}")
    index = int(token)
    if not 1 <= index <= len(vertices):
        raise ValueError(f"face index {index} out of range (1..{len(vertices)})")
    return vertices[index - 1]


def load_mesh(path: str | os.PathLike, material_id: int = 0) -> list[Triangle]:
    """Read the triangles of an OBJ file, all assigned to ``material_id``.

    Lines that are not valid UTF-8 are skipped. Raises ``OSError`` when the
    file cannot be opened and ``ValueError`` for a malformed face index.
    """
    triangles: list[Triangle] = []
    vertices: list[Vec3] = []
    has_texture = False

    with open(path, "rb") as handle:
        for raw in handle:
            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError:
                continue

            if line.startswith("vt"):
                has_texture = True
            elif line.startswith("v"):
                parts = line.split()
                if len(parts) >= 4:
                    vertices.append(Vec3(*(_parse_float(p) for p in parts[1:4])))
            elif line.startswith("f"):
                if has_texture:
                    tokens = [
                        piece for token in line.split()[1:] for piece in token.split("/")
                    ]
                    corners = tokens[0:6:2] if len(tokens) >= 6 else None
                else:
                    parts = line.split()
                    corners = parts[1:4] if len(parts) >= 4 else None
                if corners is not None:
                    v0, v1, v2 = (_vertex(vertices, c) for c in corners)
                    triangles.append(Triangle(v0, v1, v2, material_id))

    return triangles