"""Shared helpers for status transitions."""

from typing import Any, Type
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AlreadyProcessedError, ConflictError

logger = logging.getLogger(__name__)


async def compare_and_set(
    session: AsyncSession,
    model: Type[Any],
    entity_name: str,
    entity_id: int,
    expected_status: Any,
    **values: Any,
) -> None:
    """
    Apply ``values`` only if the row still has ``expected_status``.

    Raises:
        AlreadyProcessedError: another writer moved the row first; carries
            the status it moved to
    """
    result = await session.execute(
        update(model)
        .where(model.id == entity_id, model.status == expected_status)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        current = await session.scalar(select(model.status).where(model.id == entity_id))
        logger.info(
            f"{entity_name} {entity_id} lost status race: expected "
            f"{getattr(expected_status, 'value', expected_status)}, found "
            f"{getattr(current, 'value', current)}"
        )
        raise AlreadyProcessedError(entity_name, current)


async def flush_unique(session: AsyncSession, message: str) -> None:
    """Flush pending inserts, turning a unique violation into ``ConflictError``."""
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        logger.info(f"Unique constraint rejected insert: {e.orig}")
        raise ConflictError(message) from e
