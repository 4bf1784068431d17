import math

import pytest

from shrimpy.app import Controls, build_demo_scene, format_bvh, main
from shrimpy.render import Uniforms
from shrimpy.tracer import BVHNode
from shrimpy.vec3 import Vec3

PLANE = """v -1 0 -1
v 1 0 -1
v 1 0 1
v -1 0 1
f 1 2 3
f 1 3 4
"""

DODEC = """v 0 0 0
v 1 0 0
v 0 1 0
f 1 2 3
"""


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "plane.obj").write_text(PLANE)
    (tmp_path / "dodecahedron.obj").write_text(DODEC)
    return tmp_path


def _controls(saves=None):
    uniforms = Uniforms(width=4, height=4)
    uniforms.frame_count = 7
    callback = (lambda: saves.append(True)) if saves is not None else None
    return Controls(uniforms, on_save=callback)


def test_wheel_moves_backward_along_direction_and_resets():
    controls = _controls()
    controls.on_wheel(1000.0)
    assert controls.uniforms.camera.position.z == pytest.approx(1.0)
    assert controls.uniforms.frame_count == 0


def test_save_button_triggers_callback():
    saves = []
    controls = _controls(saves)
    controls.on_button(2, True)
    controls.on_button(2, False)
    assert saves == [True]
    assert controls.button_state == [False, False, False, False]


def test_button_out_of_range():
    with pytest.raises(IndexError):
        _controls().on_button(4, True)
    with pytest.raises(IndexError):
        _controls().on_button(-1, True)


def test_motion_without_buttons_changes_nothing():
    controls = _controls()
    controls.on_motion(10.0, 10.0)
    assert controls.uniforms.camera.position == Vec3.zero()
    assert controls.uniforms.frame_count == 7


def test_motion_with_move_button_translates():
    controls = _controls()
    controls.on_button(1, True)
    controls.on_motion(0.0, 250.0)
    pos = controls.uniforms.camera.position
    assert pos.length() == pytest.approx(1.0)
    assert controls.uniforms.camera.direction == Vec3(0.0, 0.0, -1.0)
    assert controls.uniforms.frame_count == 0


def test_motion_with_look_button_turns_keeping_unit_direction():
    controls = _controls()
    controls.on_button(3, True)
    controls.on_motion(25.0, 0.0)
    cam = controls.uniforms.camera
    assert cam.direction.length() == pytest.approx(1.0)
    assert cam.direction.x < 0.0
    assert cam.position == Vec3.zero()
    assert controls.uniforms.frame_count == 0


def test_format_bvh_tree():
    nodes = [
        BVHNode(child1=1, child2=2),
        BVHNode(triangle_ids=(0, 1)),
        BVHNode(triangle_ids=(2,)),
    ]
    assert format_bvh(nodes, 0, 0) == "node 0 \n    node 1 -> 0 1 \n    node 2 -> 2 \n"


def test_format_bvh_empty_root_terminates():
    assert format_bvh([BVHNode()]) == "node 0 \n"


def test_demo_scene_contents(assets):
    scene, uniforms = build_demo_scene(assets)
    assert len(scene.materials) == 2
    assert scene.materials[1].roughness_or_ior == -1.33
    assert scene.materials[0].color.x == pytest.approx(217.0 / 255.0)
    assert scene.sphere_count == 2
    assert scene.spheres[0].radius == 0.7
    assert scene.spheres[1].radius == 1.0
    assert scene.triangle_count == 2 + 3
    assert scene.triangles[0].vertex_0 == Vec3(-5.0, 0.0, -5.0)
    assert scene.triangles[2].material_id == 1
    first, second, third = scene.triangles[2:5]
    assert second.vertex_0.y - first.vertex_0.y == pytest.approx(3.35)
    assert third.vertex_0.x - second.vertex_0.x == pytest.approx(4.0)
    assert sorted(i for n in scene.bvh for i in n.triangle_ids) == list(range(5))
    cam = uniforms.camera
    assert cam.fov == pytest.approx(math.pi / 2)
    assert cam.aperture == 0.0
    assert cam.position == Vec3(0.0, 1.5, 2.0)
    assert uniforms.gamma_correction == 1.8
    assert uniforms.pseudo_chromatic_aberration == 0.12
    assert (uniforms.width, uniforms.height) == (800, 600)


def test_demo_scene_missing_assets(tmp_path):
    scene, _ = build_demo_scene(tmp_path / "nowhere")
    assert scene.triangle_count == 0
    assert scene.sphere_count == 2


def test_main_prints_layout_and_writes_buffers(assets, tmp_path, capsys):
    scene_out = tmp_path / "scene.bin"
    uniforms_out = tmp_path / "uniforms.bin"
    code = main(
        ["--assets", str(assets), "--scene-out", str(scene_out), "--uniforms-out", str(uniforms_out)]
    )
    out = capsys.readouterr().out
    scene, uniforms = build_demo_scene(assets)
    assert code == 0
    assert out == "bvh tree layout\n" + format_bvh(scene.bvh)
    assert scene_out.read_bytes() == scene.to_bytes()
    assert uniforms_out.read_bytes() == uniforms.to_bytes()
    assert len(uniforms_out.read_bytes()) == 96