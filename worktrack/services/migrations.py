"""
One-way migration of legacy leave rows to structured leave fields.

Older rows carry their category and paid state only inside ``notes``.
Running the pass again is a no-op.
"""

from __future__ import annotations

import logging

from worktrack.services.quota import classify_record
from worktrack.store.attendance_store import AttendanceStore

logger = logging.getLogger(__name__)


async def migrate_legacy_leave_notes(store: AttendanceStore) -> int:
    """Fill ``leave_category``/``is_paid`` for unclassified leave rows; returns the count."""
    records = await store.find_unclassified_leaves()
    for record in records:
        annotation = classify_record(record)
        await store.update(
            record,
            leave_category=annotation.category.value,
            is_paid=annotation.is_paid,
        )
    await store.commit()
    logger.info("Migrated %d legacy leave records", len(records))
    return len(records)
