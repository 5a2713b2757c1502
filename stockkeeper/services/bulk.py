"""
Bulk stock operations — apply a list of add/deduct requests in order.

A failing entry never stops the run. The overall flag is True only if
every entry succeeded.
"""

import logging

from stockkeeper.exceptions import StockError
from stockkeeper.quantities import as_quantity
from stockkeeper.results import BulkItemResult, BulkResult, BulkStockOperation

logger = logging.getLogger('stockkeeper')

ADD = 'add'
DEDUCT = 'deduct'


def as_operation(operation) -> BulkStockOperation:
    """Accept BulkStockOperation or a plain dict."""
    if isinstance(operation, BulkStockOperation):
        return operation
    if not isinstance(operation, dict):
        raise StockError('INVALID_OPERATION', operation=repr(operation))
    return BulkStockOperation(
        product_id=str(operation.get('product_id', operation.get('productId'))),
        quantity=as_quantity(operation.get('quantity')),
        type=operation.get('type'),
        reason=operation.get('reason'),
        reference=operation.get('reference'),
    )


def bulk_operation(movements, operations) -> BulkResult:
    """
    Run each operation through movements.deduct() or movements.add().

    Args:
        movements: StockMovements instance
        operations: Iterable of BulkStockOperation or dicts

    Returns:
        BulkResult with one BulkItemResult per operation, in input order
    """
    results = []

    for raw in operations:
        try:
            op = as_operation(raw)
        except StockError as e:
            product_id = raw.get('product_id', raw.get('productId')) if isinstance(raw, dict) else None
            results.append(BulkItemResult(str(product_id), False, e.message))
            continue

        if op.type == DEDUCT:
            result = movements.deduct(op.product_id, op.quantity, order_number=op.reference)
        elif op.type == ADD:
            result = movements.add(op.product_id, op.quantity,
                                   reason=op.reason or 'Bulk operation',
                                   reference=op.reference)
        else:
            results.append(BulkItemResult(
                op.product_id, False, f"Unknown operation type: {op.type!r}",
            ))
            continue

        results.append(BulkItemResult(op.product_id, result.success, result.message))

    success = all(r.success for r in results)
    logger.info(
        "stock.bulk",
        extra={
            "operations": len(results),
            "failed": sum(1 for r in results if not r.success),
        },
    )
    return BulkResult(success=success, results=results)
