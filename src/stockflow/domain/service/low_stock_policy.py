"""Domain service: low-stock threshold evaluation.

Only fulfillment evaluates thresholds.  Restocks, adjustments, transfers and
cancellations never emit alerts.
"""

from __future__ import annotations

from stockflow.domain.model.alert import LowStockAlert
from stockflow.domain.model.inventory import StockLevel
from stockflow.domain.model.product import Product


def evaluate(products: dict[int, Product], levels: list[StockLevel]) -> list[LowStockAlert]:
    """Return one alert per distinct stock row at or below its min threshold.

    *levels* are the rows as they stand after the fulfillment; a row that
    appears several times (duplicate order lines) yields a single alert
    carrying its final quantity.
    """
    final: dict[tuple[int, int | None], StockLevel] = {}
    for level in levels:
        final[(level.product_id, level.warehouse_id)] = level

    alerts: list[LowStockAlert] = []
    for (product_id, warehouse_id), level in final.items():
        product = products[product_id]
        if product.is_low(level.quantity):
            alerts.append(
                LowStockAlert(
                    product_id=product_id,
                    product_name=product.name,
                    warehouse_id=warehouse_id,
                    remaining_quantity=level.quantity,
                    min_threshold=product.min_threshold,
                )
            )
    return alerts
