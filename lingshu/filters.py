import logging
import math
from typing import Callable, Dict, Iterable, List, NamedTuple, Tuple

import pandas as pd

from lingshu.config import ADMIN_PAGE_SIZE
from lingshu.models import Category

logger = logging.getLogger(__name__)

# Each searchable field: (extractor returning the field's strings, case-insensitive?)
# Only transliterations and point codes are compared without case.
FieldSpec = Tuple[Callable[[object], Iterable[str]], bool]

SEARCH_FIELDS: Dict[Category, List[FieldSpec]] = {
    Category.HERBS: [
        (lambda h: [h.name], False),
        (lambda h: [h.pinyin], True),
        (lambda h: [h.category], False),
        (lambda h: [h.nature], False),
        (lambda h: [e.description for e in h.effects], False),
    ],
    Category.FORMULAS: [
        (lambda f: [f.name], False),
        (lambda f: [f.pinyin], True),
        (lambda f: [f.category], False),
        (lambda f: [f.functions], False),
        (lambda f: [i.name for i in f.ingredients], False),
    ],
    Category.ACUPOINTS: [
        (lambda p: [p.name], False),
        (lambda p: [p.code], True),
        (lambda p: [p.location], False),
        (lambda p: p.indications, False),
        (lambda p: p.functions, False),
    ],
    Category.EXAM: [
        (lambda k: [k.title], False),
        (lambda k: [k.content], False),
        (lambda k: [k.category], False),
    ],
    Category.SKILLS: [
        (lambda s: [s.title], False),
        (lambda s: [s.description], False),
        (lambda s: [s.category], False),
    ],
}


def matches(record, category, query: str) -> bool:
    """True if `query` is a substring of ANY configured field of `record`."""
    folded = query.lower()
    for extract, ignore_case in SEARCH_FIELDS[Category(category)]:
        for value in extract(record):
            if not value:
                continue
            if ignore_case:
                if folded in value.lower():
                    return True
            elif query in value:
                return True
    return False


def filter_records(records, category, query) -> List:
    """
    Stable filter of `records` by free text. A blank query returns the
    collection unchanged.
    """
    query = query or ""
    if not query.strip():
        return list(records)
    return [r for r in records if matches(r, category, query)]


# --- Admin Search ---


class Page(NamedTuple):
    items: List
    page: int
    page_size: int
    total: int
    pages: int


def search_page(records, category, query="", page=1, page_size=ADMIN_PAGE_SIZE) -> Page:
    """1-based pagination over the filtered collection; out-of-range pages clamp."""
    hits = filter_records(records, category, query)
    page_size = max(1, int(page_size))
    pages = max(1, math.ceil(len(hits) / page_size))
    page = min(max(1, int(page)), pages)
    logger.debug(f"Admin search {Category(category).value} q={query!r}: {len(hits)} hits, page {page}/{pages}")

    start = (page - 1) * page_size
    return Page(hits[start : start + page_size], page, page_size, len(hits), pages)


def admin_row(record, category) -> Dict[str, str]:
    category = Category(category)
    if category == Category.HERBS:
        title, subtitle = f"{record.name} ({record.pinyin})", record.category
    elif category == Category.FORMULAS:
        title, subtitle = record.name, record.usage
    elif category == Category.ACUPOINTS:
        title, subtitle = f"{record.code} - {record.name}", record.location[:50] + "..."
    else:
        title, subtitle = record.title, record.category
    return {"id": record.id, "title": title, "subtitle": subtitle}


def listing_frame(records, category) -> pd.DataFrame:
    """Admin list as a table (id / title / subtitle), in collection order."""
    rows = [admin_row(r, category) for r in records]
    return pd.DataFrame(rows, columns=["id", "title", "subtitle"])
