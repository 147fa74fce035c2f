import pytest

from framefit_viewer.errors import MeshLoadError
from framefit_viewer.mesh import Mesh

OBJ = """\
# a square pyramid
v 0 0 0
v 1 0 0
v 1 0 1
v 0 0 1
v 0.5 1 0.5
vt 0 0
vn 0 1 0
f 1/1/1 2/1/1 3/1/1 4/1/1
f 1//1 2//1 5//1
f -4 -3 -1
f 1 2
"""


def test_parse_obj_reads_vertices_and_faces():
    mesh = Mesh.parse_obj(OBJ)
    assert len(mesh.vertices) == 5
    assert mesh.vertices[4] == [0.5, 1.0, 0.5]
    assert mesh.faces[0] == [0, 1, 2, 3]
    assert mesh.faces[1] == [0, 1, 4]


def test_parse_obj_resolves_negative_indices():
    mesh = Mesh.parse_obj(OBJ)
    assert mesh.faces[2] == [1, 2, 4]


def test_parse_obj_drops_degenerate_faces():
    assert len(Mesh.parse_obj(OBJ).faces) == 3


def test_out_of_range_index_raises():
    with pytest.raises(MeshLoadError, match="line 2"):
        Mesh.parse_obj("v 0 0 0\nf 1 2 3\n")


def test_short_vertex_raises():
    with pytest.raises(MeshLoadError):
        Mesh.parse_obj("v 0 0\n")


def test_from_obj_reads_file(tmp_path):
    path = tmp_path / "pyramid.obj"
    path.write_text(OBJ)
    mesh = Mesh.from_obj(path)
    assert len(mesh.vertices) == 5


def test_from_obj_missing_file_raises(tmp_path):
    with pytest.raises(MeshLoadError, match="could not read"):
        Mesh.from_obj(tmp_path / "missing.obj")


def test_from_bytes_rejects_binary():
    with pytest.raises(MeshLoadError):
        Mesh.from_bytes(b"\xff\xfe\x00v")


def test_empty_text_gives_empty_mesh():
    assert Mesh.parse_obj("").is_empty()


def test_cube_and_translate():
    mesh = Mesh.cube(2.0)
    assert len(mesh.vertices) == 8
    assert len(mesh.faces) == 6
    mesh.translate(1, 0, -1)
    assert mesh.vertices[0] == [-1.0, -2.0, -3.0]
