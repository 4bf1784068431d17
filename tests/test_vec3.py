import dataclasses
import math

import pytest

from shrimpy.vec3 import Vec3


def test_length_of_pythagorean_vector():
    assert Vec3(3, 4, 0).length() == 5.0


def test_length_squared_matches_dot_with_self():
    v = Vec3(1.5, -2.0, 0.25)
    assert v.length_squared() == v.dot(v)


def test_cross_of_x_and_y_axes():
    assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)


def test_cross_is_orthogonal_to_both_inputs():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(-4.0, 0.5, 2.0)
    c = a.cross(b)
    assert c.dot(a) == pytest.approx(0.0, abs=1e-9)
    assert c.dot(b) == pytest.approx(0.0, abs=1e-9)


def test_cross_is_anticommutative():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(-4.0, 0.5, 2.0)
    assert a.cross(b) == -b.cross(a)


def test_normalized_has_unit_length_and_same_direction():
    v = Vec3(2.0, -3.0, 6.0)
    n = v.normalized()
    assert n.length() == pytest.approx(1.0)
    assert n.cross(v).length() == pytest.approx(0.0, abs=1e-9)
    assert n.dot(v) > 0


def test_normalized_zero_vector_is_nan():
    n = Vec3.zero().normalized()
    assert [math.isnan(component) for component in n] == [True, True, True]
    assert math.isnan(n.x)
    assert math.isnan(n.y)
    assert math.isnan(n.z)


def test_min_and_max_are_componentwise():
    a = Vec3(1, 5, 3)
    b = Vec3(4, 2, 6)
    assert a.min(b) == Vec3(1, 2, 3)
    assert a.max(b) == Vec3(4, 5, 6)


def test_min_and_max_ignore_nan():
    a = Vec3(math.nan, 1.0, 1.0)
    b = Vec3(2.0, 2.0, 2.0)
    assert a.min(b) == Vec3(2.0, 1.0, 1.0)
    assert a.max(b) == Vec3(2.0, 2.0, 2.0)


def test_add_then_subtract_round_trips():
    a = Vec3(1.5, -2.25, 8.0)
    b = Vec3(0.5, 4.0, -1.0)
    assert (a + b) - b == a


def test_scalar_multiplication_commutes_and_matches_addition():
    a = Vec3(1.5, -2.25, 8.0)
    assert 2 * a == a * 2
    assert a * 2 == a + a


def test_division_undoes_multiplication():
    a = Vec3(1.5, -2.25, 8.0)
    assert (a * 4.0) / 4.0 == a


def test_negation_sums_to_zero():
    a = Vec3(1.5, -2.25, 8.0)
    assert -a + a == Vec3.zero()


def test_indexing_and_iteration_agree():
    a = Vec3(7.0, 8.0, 9.0)
    assert list(a) == [a[0], a[1], a[2]]
    assert list(a) == [a.x, a.y, a.z]


def test_index_out_of_range_raises():
    with pytest.raises(IndexError):
        Vec3()[3]
    with pytest.raises(IndexError):
        Vec3()[-1]


def test_with_component_replaces_one_value():
    v = Vec3(1.0, 2.0, 3.0)
    w = v.with_component(1, 9.0)
    assert w == Vec3(1.0, 9.0, 3.0)
    assert v == Vec3(1.0, 2.0, 3.0)


def test_with_component_rejects_bad_index():
    with pytest.raises(IndexError):
        Vec3().with_component(5, 1.0)


def test_all_and_zero_constructors():
    assert Vec3.all(2.5) == Vec3(2.5, 2.5, 2.5)
    assert Vec3.zero() == Vec3()


def test_vector_times_vector_is_rejected():
    with pytest.raises(TypeError):
        Vec3(1, 1, 1) * Vec3(1, 1, 1)


def test_vectors_are_immutable():
    v = Vec3(1, 2, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        v.x = 4.0
    assert v.x == 1.0