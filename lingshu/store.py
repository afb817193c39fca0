import logging
import time
from typing import Dict, List, Optional

from lingshu.models import Category, Formula
from lingshu.seed import initial_records

logger = logging.getLogger(__name__)

_last_minted = 0


def mint_id() -> str:
    """Millisecond timestamp, bumped if this process already handed it out."""
    global _last_minted
    candidate = int(time.time() * 1000)
    if candidate <= _last_minted:
        candidate = _last_minted + 1
    _last_minted = candidate
    return str(candidate)


class EntityStore:
    """
    In-memory home of the five collections. Lists are never mutated in place:
    every write swaps in a new list, so a snapshot handed to a renderer stays
    consistent for as long as it is held.
    """

    def __init__(self):
        self.collections: Dict[Category, List] = initial_records()

    def reset(self):
        self.collections = initial_records()
        logger.info("Store reset to the starter dataset.")

    def records(self, category) -> List:
        return self.collections[Category(category)]

    def get(self, category, record_id):
        for record in self.records(category):
            if record.id == record_id:
                return record
        return None

    def counts(self) -> Dict[str, int]:
        return {c.value: len(rows) for c, rows in self.collections.items()}

    def total(self) -> int:
        return sum(len(rows) for rows in self.collections.values())

    def save(self, category, record):
        category = Category(category)
        current = self.collections[category]

        if any(r.id == record.id for r in current):
            self.collections[category] = [
                record if r.id == record.id else r for r in current
            ]
            logger.info(f"Updated {category.value}/{record.id}")
        else:
            self.collections[category] = current + [record]
            logger.info(f"Created {category.value}/{record.id}")
        return record

    def delete(self, category, record_id) -> bool:
        category = Category(category)
        current = self.collections[category]
        remaining = [r for r in current if r.id != record_id]
        if len(remaining) == len(current):
            logger.debug(f"Delete miss: {category.value}/{record_id}")
            return False
        # Dangling references elsewhere are left alone
        self.collections[category] = remaining
        logger.info(f"Deleted {category.value}/{record_id}")
        return True

    # --- Cross-References ---

    def resolve_name(self, category, record_id) -> str:
        """
        Returns the display label for `record_id`, or the id itself when the
        target is missing. Never raises.
        """
        try:
            record = self.get(category, record_id)
        except ValueError:
            record = None  # Unknown category tag

        if record is None:
            logger.debug(f"Unresolved reference: {category}/{record_id}")
            return record_id

        return getattr(record, "name", None) or getattr(record, "title", None) or record_id

    def resolve_names(self, category, record_ids) -> List[str]:
        return [self.resolve_name(category, rid) for rid in record_ids or []]

    def resolve_formula(self, formula_id) -> Optional[Formula]:
        if not formula_id:
            return None
        return self.get(Category.FORMULAS, formula_id)
