"""Invariant checks for an editable track."""

from __future__ import annotations

from typing import TYPE_CHECKING

from track_core.model.projection_cache import Fresh
from track_core.model.segments import next_track_point_index

if TYPE_CHECKING:
    from track_core.model.track import Track


class InvariantError(ValueError):
    """Raised when a track violates a structural invariant."""


def assert_count_in_bounds(track: "Track") -> None:
    """Assert ``0 <= count <= len(storage)`` and no empty slots below ``count``."""

    count = track.num_points
    storage = track.storage_length
    if count < 0 or count > storage:
        raise InvariantError(f"Point count {count} is out of bounds for storage {storage}.")
    for index in range(count):
        if track.get_point(index) is None:
            raise InvariantError(f"Empty point slot at index {index}.")


def assert_cache_consistent(track: "Track") -> None:
    """Assert a fresh cache covers exactly the counted points."""

    state = track.cache_state
    if not isinstance(state, Fresh):
        return
    count = track.num_points
    if len(state.data.x_values) != count or len(state.data.y_values) != count:
        raise InvariantError(
            "Projection cache length mismatch: "
            f"x={len(state.data.x_values)} y={len(state.data.y_values)} count={count}."
        )


def assert_first_segment_start(track: "Track") -> None:
    """Assert the first track point opens a segment."""

    points = track.clone_contents()
    first = next_track_point_index(points, len(points), 0)
    if first is not None and not points[first].segment_start:
        raise InvariantError(f"First track point at index {first} is not a segment start.")


def validate_track(track: "Track", *, check_segments: bool = False) -> None:
    """Run the core track invariants.

    Insertions and moves may put a non-start track point first, so the
    segment check only runs when asked for.
    """

    assert_count_in_bounds(track)
    assert_cache_consistent(track)
    if check_segments:
        assert_first_segment_start(track)
