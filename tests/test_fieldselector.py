import numpy as np
import pytest

from vizgraph.dataset import Association, DataSet, Field, make_uniform_dataset
from vizgraph.fieldselector import FieldSelector


def _dataset():
    ds = make_uniform_dataset(2)
    ds.add_field(Field("noise", Association.POINTS, np.zeros(8)))
    ds.add_field(Field("temp", Association.CELLS, np.zeros(1)))
    return ds


def test_empty_selector():
    fs = FieldSelector()
    assert len(fs) == 0
    with pytest.raises(IndexError):
        fs.field_name()


def test_excludes_coordinates_by_default():
    fs = FieldSelector()
    fs.set_field_names(_dataset())
    assert fs.names == ("noise", "temp", "[none]")


def test_includes_coordinates_on_request():
    fs = FieldSelector()
    fs.set_field_names(_dataset(), include_coordinate_systems=True)
    assert fs.names == ("coords", "noise", "temp", "[none]")


def test_empty_dataset_offers_only_none():
    fs = FieldSelector()
    fs.set_field_names(DataSet())
    assert fs.names == ("[none]",)
    assert fs.field_name() == "[none]"


def test_current_field_reset_when_out_of_range():
    fs = FieldSelector()
    fs.current_field = 5
    fs.set_field_names(_dataset())
    assert fs.current_field == 0


def test_current_field_kept_when_in_range():
    fs = FieldSelector()
    fs.current_field = 1
    fs.set_field_names(_dataset())
    assert fs.current_field == 1
    assert fs.field_name() == "temp"
    assert fs.field_name(0) == "noise"


def test_out_of_range_index_raises():
    fs = FieldSelector()
    fs.set_field_names(_dataset())
    with pytest.raises(IndexError):
        fs.field_name(len(fs))