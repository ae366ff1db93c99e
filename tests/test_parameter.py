import pytest

from vizgraph.parameter import (
    Parameter,
    ParameterChangeType,
    ParameterObserver,
    ParameterType,
)


class Recorder(ParameterObserver):
    def __init__(self):
        self.calls = []

    def parameter_changed(self, parameter, change_type):
        self.calls.append((parameter.name, change_type))


def test_construction_notifies_once_for_zero_value():
    rec = Recorder()
    Parameter(rec, "x", ParameterType.FLOAT, 0.0)
    assert rec.calls == [("x", ParameterChangeType.NEW_VALUE)]


def test_construction_notifies_once_for_nonzero_value():
    rec = Recorder()
    Parameter(rec, "x", ParameterType.FLOAT, 0.5)
    assert rec.calls == [("x", ParameterChangeType.NEW_VALUE)]


def test_name_and_type():
    p = Parameter(None, "steps", ParameterType.INT, 100)
    assert p.name == "steps"
    assert p.type is ParameterType.INT


def test_float_round_trip():
    p = Parameter(None, "f", ParameterType.FLOAT, 0.5)
    assert p.value_as(float) == 0.5


def test_float_is_single_precision():
    p = Parameter(None, "f", ParameterType.FLOAT, 0.1)
    assert p.value_as(float) == pytest.approx(0.1, rel=1e-6)


def test_int_and_bool_round_trip():
    pi = Parameter(None, "i", ParameterType.INT, 7)
    pb = Parameter(None, "b", ParameterType.BOOL, True)
    assert pi.value_as(int) == 7
    assert pb.value_as(bool) is True
    pb.set_value(False)
    assert pb.value_as(bool) is False


def test_int_coerced_for_float_parameter():
    p = Parameter(None, "f", ParameterType.FLOAT, 0.0)
    p.set_value(2)
    assert p.value_as(float) == 2.0


def test_setting_same_value_reports_no_change():
    rec = Recorder()
    p = Parameter(rec, "b", ParameterType.BOOL, True)
    rec.calls.clear()
    assert p.set_value(True) is False
    assert rec.calls == []
    assert p.set_value(False) is True
    assert rec.calls == [("b", ParameterChangeType.NEW_VALUE)]


def test_string_values():
    p = Parameter(None, "filename", ParameterType.FILENAME, "")
    assert p.value_as(str) == ""
    assert p.set_value("data.vtk") is True
    assert p.value_as(str) == "data.vtk"


def test_empty_string_does_not_replace_existing_string():
    p = Parameter(None, "filename", ParameterType.FILENAME, "data.vtk")
    assert p.set_value("") is False
    assert p.value_as(str) == "data.vtk"


def test_first_min_max_sets_initial_value():
    rec = Recorder()
    p = Parameter(rec, "size", ParameterType.BOUNDED_INT, 64)
    rec.calls.clear()
    assert p.set_min_max(8, 256, 32) is True
    assert p.has_min_max()
    assert p.min_as(int) == 8
    assert p.max_as(int) == 256
    assert p.value_as(int) == 32
    assert rec.calls == [
        ("size", ParameterChangeType.NEW_VALUE),
        ("size", ParameterChangeType.NEW_MINMAX),
    ]


def test_repeated_min_max_keeps_value():
    p = Parameter(None, "a", ParameterType.BOUNDED_FLOAT, 0.5)
    p.set_min_max(0.0, 1.0, 0.5)
    assert p.set_min_max(0.0, 1.0, 0.25) is False
    assert p.value_as(float) == 0.5
    assert p.set_min_max(0.0, 2.0, 0.25) is True
    assert p.max_as(float) == 2.0
    assert p.value_as(float) == 0.5


def test_unset_min_max():
    p = Parameter(None, "a", ParameterType.BOUNDED_FLOAT, 0.5)
    p.set_min_max(0.25, 1.0, 0.5)
    p.unset_min_max()
    assert not p.has_min_max()
    assert p.min_as(float) == 0.0
    assert p.max_as(float) == 0.0


def test_is_type():
    bounded = Parameter(None, "n", ParameterType.BOUNDED_INT, 3)
    assert bounded.is_type(int)
    assert not bounded.is_type(float)
    assert Parameter(None, "f", ParameterType.FILENAME, "").is_type(str)
    assert Parameter(None, "v", ParameterType.BOOL, True).is_type(bool)


def test_invalid_kinds_raise():
    p = Parameter(None, "f", ParameterType.FLOAT, 0.0)
    with pytest.raises(TypeError):
        p.value_as(list)
    with pytest.raises(TypeError):
        p.set_value([1])
    with pytest.raises(TypeError):
        p.min_as(str)