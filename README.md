# shrimpy

shrimpy holds the scene side of a progressive path tracer. It describes a
scene of materials, spheres and triangle meshes, builds a bounding volume
hierarchy over the triangles, packs everything into the byte layouts a GPU
shader reads, loads meshes from Wavefront OBJ files, and turns accumulated
RGBA radiance samples into a gamma-corrected PNG image.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package provides the `shrimpy` command. It builds the demo
scene (a ground plane, two spheres and three stacked dodecahedra) from the
meshes `plane.obj` and `dodecahedron.obj`, and prints the layout of its BVH
tree, one node per line, leaves followed by their triangle indices:

```
shrimpy
shrimpy --assets path/to/meshes --scene-out scene.bin --uniforms-out uniforms.bin
```

Options:

- `--assets DIR` – directory holding the OBJ meshes (default `assets`). A
  mesh that cannot be opened is reported on standard error and left out.
- `--scene-out FILE` – write the packed scene buffer to `FILE`.
- `--uniforms-out FILE` – write the packed 96-byte uniform buffer to `FILE`.

## Library use

### Vectors

`shrimpy.vec3.Vec3` is an immutable three-component vector with `+`, `-`,
scalar `*` and `/`, unary `-`, indexing and iteration, plus `dot`, `cross`,
`length`, `length_squared`, `normalized`, component-wise `min` / `max`
(a NaN operand is ignored), and `with_component(index, value)` for a copy
with one component replaced. `Vec3.zero()` and `Vec3.all(v)` build common
values.

### Scene description

`shrimpy.tracer` holds the scene types:

- `Camera`, with `move_forward`, `move_right`, `move_up`, `pan` and `tilt`,
  and the derived `right_direction()` and `up_direction()`.
- `Material` (a negative `roughness_or_ior` marks a refractive material),
  `Sphere` and `Triangle`; triangles offer `bounding_box()`, `center()`,
  `translated(offset)` and `scaled(factor)`.
- `BVHNode` and `build_bvh(triangles, max_triangles_per_leaf)`, which splits
  triangles at the median centre along the longest axis of their bounds.
  Node 0 is the root; a leaf holds at most seven triangle indices
  (`TRIANGLES_PER_LEAF`), whatever larger limit is asked for.
- `Scene`, with `add_material` (returns the material id), `add_sphere`,
  `add_triangles` and `build`. A scene holds at most 64 materials, 64
  spheres and 256 triangles; going past them raises `SceneFullError`.
  `build` keeps at most 96 BVH nodes.

Every type has `to_bytes()`, giving its packed little-endian layout for a
GPU buffer; `Scene.to_bytes()` fills unused slots with default values.

```python
from shrimpy.tracer import Material, Scene, Sphere
from shrimpy.vec3 import Vec3

scene = Scene()
ground = scene.add_material(Material(color=Vec3(217, 177, 104) / 255))
scene.add_sphere(Sphere(center=Vec3(1.5, 1.0, -2.0), material_id=ground))
scene.build()
buffer = scene.to_bytes()
```

### Meshes

`shrimpy.objfile.load_mesh(path, material_id)` reads vertex and face lines
from an OBJ file, with or without texture coordinates, and returns a list of
triangles carrying the given material. Faces use only their first three
corners. It raises `OSError` when the file cannot be opened and
`ValueError` for a face index that is malformed or out of range.

### Frames and output

`shrimpy.render` holds:

- `Uniforms`, the per-frame values (size, camera, elapsed time, frame count,
  gamma, pseudo chromatic aberration), with `reset`, `advance_frame`,
  `current_buffer` (which of two accumulation textures is current) and
  `to_bytes`.
- `tonemap(samples, frame_count, gamma)`, which averages accumulated float
  samples over the frame count, applies gamma correction and clamps to
  bytes.
- `render_image(samples, width, height, frame_count, gamma)`, which returns
  an 8-bit RGBA Pillow image.
- `save_render(samples, uniforms, directory, now)`, which writes that image
  as a PNG named `YYYY-MM-DD-HH-MM-SS.png` in `directory` (default `imgs`,
  which must exist) and returns its path.

`shrimpy.app` has `build_demo_scene(assets_dir)`, `format_bvh(nodes)`, and
`Controls`, which maps mouse wheel, button and motion events onto camera
movement and restarts accumulation when the view changes; pressing button 2
calls its `on_save` callback.

## What it does not do

shrimpy does not open a window or trace rays itself: there is no shader and
no GPU or CPU renderer. It prepares the buffers a renderer would read and
converts accumulated samples that a renderer produced into an image.