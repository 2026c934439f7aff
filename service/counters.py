"""Relative counter adjustments on denormalized columns.

Counters are written as ``col = col + n`` expressions so two requests touching
the same row never overwrite each other's increments. Decrements are clamped
at zero, which absorbs drift left behind by earlier partial failures.
"""
import logging

from sqlalchemy import case, update
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def adjust_counter(session: Session, model, row_id, field: str, delta: int) -> bool:
    """
    Apply ``delta`` to ``model.field`` for one row, never going below zero.

    Does not commit; the caller owns the transaction.

    Returns:
        bool: False when no row matched ``row_id``
    """
    column = getattr(model, field)
    if delta >= 0:
        new_value = column + delta
    else:
        new_value = case((column + delta > 0, column + delta), else_=0)

    stmt = (
        update(model)
        .where(model.id == row_id)
        .values({field: new_value})
        .execution_options(synchronize_session=False)
    )
    result = session.execute(stmt)

    if result.rowcount == 0:
        logger.warning("Counter target missing", extra={
            "target": f"{model.__tablename__}:{row_id}",
        })
        return False
    return True
