"""Demo scene setup, input handling and the command-line entry point."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from shrimpy.objfile import load_mesh
from shrimpy.render import Uniforms
from shrimpy.tracer import BVHNode, Camera, Material, Scene, Sphere, Triangle
from shrimpy.vec3 import Vec3

WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600

_WHEEL_SPEED = 0.001
_MOTION_SPEED = 0.004
_BUTTON_COUNT = 4
_SAVE_BUTTON = 2
_MOVE_BUTTON = 1
_LOOK_BUTTON = 3


@dataclass
class Controls:
    """Mouse controls that steer the camera and restart accumulation on change."""

    uniforms: Uniforms
    on_save: Callable[[], None] | None = None
    button_state: list[bool] = field(default_factory=lambda: [False] * _BUTTON_COUNT)

    @property
    def camera(self) -> Camera:
        return self.uniforms.camera

    def on_wheel(self, delta: float) -> None:
        """Move the camera along its view direction by a scroll amount."""
        self.camera.move_forward(-(delta * _WHEEL_SPEED))
        self.uniforms.reset()

    def on_button(self, button: int, pressed: bool) -> None:
        """Record a button's state; pressing the save button saves the render."""
        if not 0 <= button < _BUTTON_COUNT:
            raise IndexError(f"mouse button out of range: {button}")
        self.button_state[button] = bool(pressed)
        if pressed and button == _SAVE_BUTTON and self.on_save is not None:
            self.on_save()

    def on_motion(self, dx: float, dy: float) -> None:
        """Look around or move sideways while the matching button is held."""
        if self.button_state[_LOOK_BUTTON]:
            self.camera.pan(-dx * _MOTION_SPEED)
            self.camera.tilt(dy * _MOTION_SPEED)
            self.uniforms.reset()
        elif self.button_state[_MOVE_BUTTON]:
            self.camera.move_up(dy * _MOTION_SPEED)
            self.camera.move_right(-dx * _MOTION_SPEED)
            self.uniforms.reset()


def format_bvh(nodes: Sequence[BVHNode], node_id: int = 0, level: int = 0) -> str:
    """Render the BVH below ``node_id`` as an indented tree, one node per line."""
    node = nodes[node_id]
    line = "    " * level + f"node {node_id} "
    if node.is_leaf():
        return line + "-> " + "".join(f"{i} " for i in node.triangle_ids) + "\n"
    text = line + "\n"
    # An empty node whose children do not lie after it has nothing below it.
    if node.child1 <= node_id or node.child2 <= node_id:
        return text
    return (
        text
        + format_bvh(nodes, node.child1, level + 1)
        + format_bvh(nodes, node.child2, level + 1)
    )


def _load_or_empty(path: Path, material_id: int) -> list[Triangle]:
    try:
        return load_mesh(path, material_id)
    except OSError:
        print(f"failed to load file {path}", file=sys.stderr)
        return []


def build_demo_scene(assets_dir: str | Path = "assets") -> tuple[Scene, Uniforms]:
    """Build the demo scene from the meshes in ``assets_dir`` with its camera settings."""
    assets = Path(assets_dir)
    scene = Scene()

    ground_mat_id = scene.add_material(
        Material(color=Vec3(217.0, 177.0, 104.0) / 255.0, roughness_or_ior=1.0)
    )
    trans_mat_id = scene.add_material(Material(roughness_or_ior=-1.33))

    ground = [t.scaled(5.0) for t in _load_or_empty(assets / "plane.obj", ground_mat_id)]
    scene.add_triangles(ground)

    scene.add_sphere(Sphere(center=Vec3(2.5, 1.0, 0.0), radius=0.7, material_id=trans_mat_id))
    scene.add_sphere(Sphere(center=Vec3(1.5, 1.0, -2.0), material_id=ground_mat_id))

    dodec = _load_or_empty(assets / "dodecahedron.obj", trans_mat_id)
    for offset in (Vec3(0.0, 1.35, 0.0), Vec3(0.0, 3.35, 0.0), Vec3(4.0, 3.35, 0.0)):
        dodec = [t.translated(offset) for t in dodec]
        scene.add_triangles(dodec)

    scene.build()

    uniforms = Uniforms(width=WINDOW_WIDTH, height=WINDOW_HEIGHT)
    camera = uniforms.camera
    camera.max_ray_bounces = 50
    camera.width = 1.0
    camera.fov = 90.0 * 3.141592654 / 180.0
    camera.aperture = 0.0
    camera.position = Vec3(0.0, 1.5, 2.0)

    uniforms.pseudo_chromatic_aberration = 0.12
    uniforms.gamma_correction = 1.8
    return scene, uniforms


def main(argv: Sequence[str] | None = None) -> int:
    """Build the demo scene, print its BVH layout and optionally write the scene buffer."""
    parser = argparse.ArgumentParser(prog="shrimpy", description="Build the demo scene.")
    parser.add_argument("--assets", default="assets", help="directory holding the OBJ meshes")
    parser.add_argument("--scene-out", help="file to write the GPU scene buffer to")
    parser.add_argument("--uniforms-out", help="file to write the GPU uniform buffer to")
    args = parser.parse_args(argv)

    scene, uniforms = build_demo_scene(args.assets)

    print("bvh tree layout")
    if scene.bvh:
        print(format_bvh(scene.bvh), end="")

    if args.scene_out:
        Path(args.scene_out).write_bytes(scene.to_bytes())
    if args.uniforms_out:
        Path(args.uniforms_out).write_bytes(uniforms.to_bytes())
    return 0


if __name__ == "__main__":
    sys.exit(main())