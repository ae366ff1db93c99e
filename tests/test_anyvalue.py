import pytest

from vizgraph.anyvalue import AnyValue


def test_empty_is_invalid():
    assert not AnyValue().valid()


def test_get_from_empty_raises():
    with pytest.raises(LookupError):
        AnyValue().get(int)


def test_round_trip():
    assert AnyValue(1).get(int) == 1
    assert AnyValue("abc").get(str) == "abc"


def test_get_with_wrong_type_raises():
    with pytest.raises(TypeError):
        AnyValue(1).get(str)


def test_value_falls_back_to_default():
    assert AnyValue(1).value(str) == ""
    assert AnyValue().value(int) == 0
    assert AnyValue().value(list) == []


def test_type_match_is_exact():
    held = AnyValue(True)
    assert held.is_type(bool)
    assert not held.is_type(int)


def test_set_and_reset():
    held = AnyValue(1)
    held.set("x")
    assert held.get(str) == "x"
    held.reset()
    assert not held.valid()
    assert not held.is_type(str)


def test_none_is_a_value():
    held = AnyValue(None)
    assert held.valid()
    assert held.get(type(None)) is None