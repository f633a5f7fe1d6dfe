"""Unit tests for ledger entries."""

import pytest

from stockflow.domain.exceptions import ValidationError
from stockflow.domain.model.movement import MovementKind, StockMovement


def _movement(kind: MovementKind, quantity: int) -> StockMovement:
    return StockMovement(
        product_id=1, warehouse_id=None, kind=kind, quantity=quantity, reason="test"
    )


class TestStockMovement:

    def test_out_delta_is_negative(self):
        assert _movement(MovementKind.OUT, 3).delta == -3

    @pytest.mark.parametrize("kind", [MovementKind.IN, MovementKind.RETURN])
    def test_inbound_delta_is_positive(self, kind):
        assert _movement(kind, 3).delta == 3

    @pytest.mark.parametrize("kind", [MovementKind.ADJUST, MovementKind.TRANSFER])
    def test_signed_kinds_keep_their_sign(self, kind):
        assert _movement(kind, -4).delta == -4
        assert _movement(kind, 4).delta == 4

    @pytest.mark.parametrize("kind", [MovementKind.IN, MovementKind.OUT, MovementKind.RETURN])
    def test_magnitude_kinds_must_be_positive(self, kind):
        with pytest.raises(ValidationError, match="must be positive"):
            _movement(kind, -1)

    def test_zero_adjustment_rejected(self):
        with pytest.raises(ValidationError, match="cannot be zero"):
            _movement(MovementKind.ADJUST, 0)

    def test_entries_are_immutable(self):
        movement = _movement(MovementKind.IN, 1)
        with pytest.raises(AttributeError):
            movement.quantity = 2  # type: ignore[misc]
