from __future__ import annotations

import pytest

from raincheck.core.fusion import combine
from raincheck.core.models import MergedPoint

from conftest import T0


def test_combine_boundary_values() -> None:
    assert combine(5.0, None) == 5.0
    assert combine(None, 5.0) == 5.0
    assert combine(None, None) == 0.0
    assert combine(10.0, 0.0) == pytest.approx(7.0)


def test_combine_weights_primary_more() -> None:
    assert combine(1.0, 3.0) == pytest.approx(1.6)
    assert combine(0.0, 10.0) == pytest.approx(3.0)


@pytest.mark.parametrize(
    "primary,secondary",
    [(None, None), (2.5, None), (None, 0.4), (1.0, 3.0), (0.0, 0.0)],
)
def test_merged_point_combined_value_is_derived(primary, secondary) -> None:
    mp = MergedPoint(timestamp=T0, primary_value=primary, secondary_value=secondary)

    assert mp.combined_value == combine(primary, secondary)

    # A dumped value does not override the derived one
    rebuilt = MergedPoint(**{**mp.model_dump(), "combined_value": 99.0})
    assert rebuilt.combined_value == mp.combined_value
