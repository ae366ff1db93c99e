"""Choice of one field name out of those a dataset offers."""

from __future__ import annotations

from .dataset import DataSet

NONE_FIELD = "[none]"


class FieldSelector:
    """Field names from a dataset plus a trailing "[none]", with a current pick."""

    def __init__(self) -> None:
        self._fields: list[str] = []
        self.current_field = 0

    def set_field_names(self, dataset: DataSet, include_coordinate_systems: bool = False) -> None:
        """Refresh names from ``dataset``; resets the pick if it no longer fits."""
        self._fields = [
            f.name
            for f in dataset.fields
            if include_coordinate_systems or not dataset.has_coordinate_system(f.name)
        ]
        self._fields.append(NONE_FIELD)
        if self.current_field >= len(self._fields):
            self.current_field = 0

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def field_name(self, index: int | None = None) -> str:
        """Name at ``index``, or of the current field when no index is given."""
        if index is None:
            index = self.current_field
        if not 0 <= index < len(self._fields):
            raise IndexError(f"field index {index} out of range")
        return self._fields[index]