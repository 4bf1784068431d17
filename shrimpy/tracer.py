"""Scene description types, their GPU byte layouts, and BVH construction."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable

from shrimpy.vec3 import Vec3

TRIANGLES_PER_LEAF = 7

_CAMERA_LAYOUT = struct.Struct("<3fI3f5fI3I")
_MATERIAL_LAYOUT = struct.Struct("<3f3f2I")
_SPHERE_LAYOUT = struct.Struct("<3ffI3I")
_TRIANGLE_LAYOUT = struct.Struct("<3fI3fI3fI4I")
_BVH_NODE_LAYOUT = struct.Struct(f"<3fI3fII{TRIANGLES_PER_LEAF}I")
_SCENE_COUNTS_LAYOUT = struct.Struct("<4I")

_WORLD_UP = Vec3(0.0, 1.0, 0.0)


class SceneFullError(Exception):
    """Raised when an item is added to a scene whose fixed storage is full."""


@dataclass
class Camera:
    """A movable pinhole/thin-lens camera."""

    position: Vec3 = field(default_factory=Vec3.zero)
    direction: Vec3 = field(default_factory=lambda: Vec3(0.0, 0.0, -1.0))
    fov: float = 75.0 * 0.01745329251
    width: float = 1.0
    focus_distance: float = 2.0
    aperture: float = 0.02
    diverge_strength: float = 0.004
    max_ray_bounces: int = 50

    def right_direction(self) -> Vec3:
        return -self.direction.cross(_WORLD_UP).normalized()

    def up_direction(self) -> Vec3:
        return self.direction.cross(self.right_direction()).normalized()

    def move_forward(self, amount: float) -> None:
        self.position = self.position + self.direction * amount

    def move_right(self, amount: float) -> None:
        self.position = self.position + self.right_direction() * amount

    def move_up(self, amount: float) -> None:
        self.position = self.position + self.up_direction() * amount

    def pan(self, amount: float) -> None:
        """Turn the view sideways by nudging the direction toward the right."""
        self.direction = (self.direction + self.right_direction() * amount).normalized()

    def tilt(self, amount: float) -> None:
        """Turn the view vertically by nudging the direction toward up."""
        self.direction = (self.direction + self.up_direction() * amount).normalized()

    def to_bytes(self) -> bytes:
        """The 64-byte GPU layout."""
        return _CAMERA_LAYOUT.pack(
            *self.position,
            0,
            *self.direction,
            self.fov,
            self.width,
            self.focus_distance,
            self.aperture,
            self.diverge_strength,
            self.max_ray_bounces,
            0,
            0,
            0,
        )


@dataclass(frozen=True)
class Material:
    """Surface properties; a negative ``roughness_or_ior`` marks a refractive material."""

    color: Vec3 = field(default_factory=lambda: Vec3.all(1.0))
    roughness_or_ior: float = 1.0
    emission_strength: float = 0.0
    volume_density: float = 1.0

    def to_bytes(self) -> bytes:
        """The 32-byte GPU layout."""
        return _MATERIAL_LAYOUT.pack(
            *self.color,
            self.roughness_or_ior,
            self.emission_strength,
            self.volume_density,
            0,
            0,
        )


@dataclass(frozen=True)
class Sphere:
    center: Vec3 = field(default_factory=Vec3.zero)
    radius: float = 1.0
    material_id: int = 0

    def to_bytes(self) -> bytes:
        """The 32-byte GPU layout."""
        return _SPHERE_LAYOUT.pack(*self.center, self.radius, self.material_id, 0, 0, 0)


@dataclass(frozen=True)
class Triangle:
    vertex_0: Vec3 = field(default_factory=Vec3.zero)
    vertex_1: Vec3 = field(default_factory=Vec3.zero)
    vertex_2: Vec3 = field(default_factory=Vec3.zero)
    material_id: int = 0

    def bounding_box(self) -> tuple[Vec3, Vec3]:
        """The (min, max) corners of the axis-aligned box around the triangle."""
        lo = self.vertex_0.min(self.vertex_1).min(self.vertex_2)
        hi = self.vertex_0.max(self.vertex_1).max(self.vertex_2)
        return lo, hi

    def center(self) -> Vec3:
        return (self.vertex_0 + self.vertex_1 + self.vertex_2) / 3.0

    def translated(self, offset: Vec3) -> Triangle:
        return replace(
            self,
            vertex_0=self.vertex_0 + offset,
            vertex_1=self.vertex_1 + offset,
            vertex_2=self.vertex_2 + offset,
        )

    def scaled(self, factor: float) -> Triangle:
        return replace(
            self,
            vertex_0=self.vertex_0 * factor,
            vertex_1=self.vertex_1 * factor,
            vertex_2=self.vertex_2 * factor,
        )

    def to_bytes(self) -> bytes:
        """The 64-byte GPU layout."""
        return _TRIANGLE_LAYOUT.pack(
            *self.vertex_0,
            0,
            *self.vertex_1,
            0,
            *self.vertex_2,
            0,
            self.material_id,
            0,
            0,
            0,
        )


@dataclass(frozen=True)
class BVHNode:
    """A BVH node; a leaf holds triangle indices, an inner node two child indices."""

    bbox_min: Vec3 = field(default_factory=Vec3.zero)
    bbox_max: Vec3 = field(default_factory=Vec3.zero)
    child1: int = 0
    child2: int = 0
    triangle_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "triangle_ids", tuple(self.triangle_ids))
        if len(self.triangle_ids) > TRIANGLES_PER_LEAF:
            raise ValueError(
                f"a BVH leaf holds at most {TRIANGLES_PER_LEAF} triangles, "
                f"got {len(self.triangle_ids)}"
            )

    @property
    def triangle_count(self) -> int:
        return len(self.triangle_ids)

    def is_leaf(self) -> bool:
        return self.triangle_count != 0

    def to_bytes(self) -> bytes:
        """The 64-byte GPU layout."""
        ids = self.triangle_ids + (0,) * (TRIANGLES_PER_LEAF - self.triangle_count)
        return _BVH_NODE_LAYOUT.pack(
            *self.bbox_min,
            self.child1,
            *self.bbox_max,
            self.child2,
            self.triangle_count,
            *ids,
        )


def _pad_flat_axes(lo: Vec3, hi: Vec3) -> tuple[Vec3, Vec3]:
    """Widen any axis on which the box is (nearly) flat."""
    pairs = [
        (a - 0.01, b + 0.01) if abs(b - a) < 1e-4 else (a, b)
        for a, b in zip(lo, hi)
    ]
    mins, maxs = zip(*pairs)
    return Vec3(*mins), Vec3(*maxs)


def _longest_axis(extent: Vec3) -> int:
    if extent.x > extent.y and extent.x > extent.z:
        return 0
    if extent.y > extent.z:
        return 1
    return 2


def build_bvh(
    triangles: Iterable[Triangle], max_triangles_per_leaf: int = TRIANGLES_PER_LEAF
) -> list[BVHNode]:
    """Build a median-split BVH; node 0 is the root, leaves index into ``triangles``.

    A leaf never holds more than ``TRIANGLES_PER_LEAF`` triangles, whatever
    ``max_triangles_per_leaf`` asks for.
    """
    if max_triangles_per_leaf < 1:
        raise ValueError("max_triangles_per_leaf must be at least 1")
    leaf_limit = min(max_triangles_per_leaf, TRIANGLES_PER_LEAF)

    tris = list(triangles)
    boxes = [t.bounding_box() for t in tris]
    centers = [t.center() for t in tris]
    tree: list[BVHNode] = []

    def build(indices: list[int]) -> int:
        node_index = len(tree)

        lo = Vec3.all(math.inf)
        hi = Vec3.all(-math.inf)
        for i in indices:
            box_lo, box_hi = boxes[i]
            lo = lo.min(box_lo)
            hi = hi.max(box_hi)
        lo, hi = _pad_flat_axes(lo, hi)

        if len(indices) <= leaf_limit:
            tree.append(BVHNode(bbox_min=lo, bbox_max=hi, triangle_ids=tuple(indices)))
            return node_index

        axis = _longest_axis(hi - lo)
        ordered = sorted(indices, key=lambda i: centers[i][axis])

        # Reserve the parent's slot so children are numbered after it.
        tree.append(BVHNode())
        mid = len(ordered) // 2
        child1 = build(ordered[:mid])
        child2 = build(ordered[mid:])
        tree[node_index] = BVHNode(bbox_min=lo, bbox_max=hi, child1=child1, child2=child2)
        return node_index

    build(list(range(len(tris))))
    return tree


def _take(items: list, capacity: int, filler: object) -> list:
    return items[:capacity] + [filler] * (capacity - min(len(items), capacity))


@dataclass
class Scene:
    """A scene with fixed-capacity storage matching the GPU buffer."""

    MAX_MATERIALS: ClassVar[int] = 64
    MAX_SPHERES: ClassVar[int] = 64
    MAX_TRIANGLES: ClassVar[int] = 256
    BVH_CAPACITY: ClassVar[int] = 96

    materials: list[Material] = field(default_factory=list)
    spheres: list[Sphere] = field(default_factory=list)
    triangles: list[Triangle] = field(default_factory=list)
    bvh: list[BVHNode] = field(default_factory=list)

    @property
    def sphere_count(self) -> int:
        return len(self.spheres)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def add_material(self, material: Material) -> int:
        """Store a material and return its id."""
        if len(self.materials) >= self.MAX_MATERIALS:
            raise SceneFullError(f"scene holds at most {self.MAX_MATERIALS} materials")
        self.materials.append(material)
        return len(self.materials) - 1

    def add_sphere(self, sphere: Sphere) -> None:
        if len(self.spheres) >= self.MAX_SPHERES:
            raise SceneFullError(f"scene holds at most {self.MAX_SPHERES} spheres")
        self.spheres.append(sphere)

    def add_triangles(self, triangles: Iterable[Triangle]) -> None:
        new = list(triangles)
        if len(self.triangles) + len(new) > self.MAX_TRIANGLES:
            raise SceneFullError(f"scene holds at most {self.MAX_TRIANGLES} triangles")
        self.triangles.extend(new)

    def build(self) -> None:
        """Rebuild the BVH, keeping as many nodes as the buffer has room for."""
        self.bvh = build_bvh(self.triangles, 8)[: self.BVH_CAPACITY]

    def to_bytes(self) -> bytes:
        """The full GPU scene buffer, unused slots filled with defaults."""
        parts = [m.to_bytes() for m in _take(self.materials, self.MAX_MATERIALS, Material())]
        parts += [s.to_bytes() for s in _take(self.spheres, self.MAX_SPHERES, Sphere())]
        parts += [t.to_bytes() for t in _take(self.triangles, self.MAX_TRIANGLES, Triangle())]
        parts.append(_SCENE_COUNTS_LAYOUT.pack(self.sphere_count, self.triangle_count, 0, 0))
        parts += [n.to_bytes() for n in _take(self.bvh, self.BVH_CAPACITY, BVHNode())]
        return b"".join(parts)