from __future__ import annotations

from track_core.model.fields import (
    ALTITUDE,
    LATITUDE,
    LONGITUDE,
    TIMESTAMP,
    Field,
    FieldList,
)


def test_field_list_keeps_first_seen_order_without_duplicates() -> None:
    fields = FieldList([LATITUDE, LONGITUDE, LATITUDE, ALTITUDE])

    assert fields.fields() == [LATITUDE, LONGITUDE, ALTITUDE]
    assert fields.index_of(ALTITUDE) == 2
    assert fields.index_of(TIMESTAMP) is None
    assert fields.field_at(5) is None


def test_merge_appends_only_unseen_fields_from_other_list() -> None:
    heart_rate = Field("heart rate")
    first = FieldList([LATITUDE, LONGITUDE, ALTITUDE])
    second = FieldList([heart_rate, LONGITUDE, TIMESTAMP, heart_rate])

    merged = first.merge(second)

    assert merged.fields() == [LATITUDE, LONGITUDE, ALTITUDE, heart_rate, TIMESTAMP]
    assert first.fields() == [LATITUDE, LONGITUDE, ALTITUDE]


def test_custom_fields_compare_by_name() -> None:
    fields = FieldList([Field("cadence")])

    assert fields.contains(Field("cadence"))
    assert not fields.extend(Field("cadence"))
    assert fields.extend(Field("power"))
    assert len(fields) == 2
