import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

import pytest

from lingshu.filters import filter_records, listing_frame, search_page
from lingshu.models import Category
from lingshu.store import EntityStore


@pytest.fixture
def store():
    return EntityStore()


def ids(records):
    return [r.id for r in records]


def test_blank_query_returns_collection(store):
    herbs = store.records(Category.HERBS)
    assert filter_records(herbs, Category.HERBS, "") == herbs
    assert filter_records(herbs, Category.HERBS, "   ") == herbs
    assert filter_records(herbs, Category.HERBS, None) == herbs


def test_herb_fields(store):
    herbs = store.records(Category.HERBS)
    assert ids(filter_records(herbs, Category.HERBS, "麻黄")) == ["h1"]
    assert ids(filter_records(herbs, Category.HERBS, "解表药")) == ["h1", "h2"]
    assert ids(filter_records(herbs, Category.HERBS, "微温")) == ["h3"]
    # Effect descriptions
    assert ids(filter_records(herbs, Category.HERBS, "发汗")) == ["h1", "h2"]


def test_pinyin_ignores_case(store):
    herbs = store.records(Category.HERBS)
    assert ids(filter_records(herbs, Category.HERBS, "ren shen")) == ["h3"]
    formulas = store.records(Category.FORMULAS)
    assert ids(filter_records(formulas, Category.FORMULAS, "GUI ZHI")) == ["f2"]


def test_acupoint_code_ignores_case(store):
    points = store.records(Category.ACUPOINTS)
    assert ids(filter_records(points, Category.ACUPOINTS, "st36")) == ["a2"]
    assert ids(filter_records(points, Category.ACUPOINTS, "咳嗽")) == ["a1"]
    assert ids(filter_records(points, Category.ACUPOINTS, "胃气")) == ["a2"]


def test_formula_ingredient_names(store):
    formulas = store.records(Category.FORMULAS)
    assert ids(filter_records(formulas, Category.FORMULAS, "甘草")) == ["f1", "f2", "f3"]
    assert ids(filter_records(formulas, Category.FORMULAS, "人参")) == ["f3"]


def test_exam_and_skills(store):
    exam = store.records(Category.EXAM)
    assert ids(filter_records(exam, Category.EXAM, "脉浮紧")) == ["k2"]
    skills = store.records(Category.SKILLS)
    assert ids(filter_records(skills, Category.SKILLS, "手法")) == ["s2"]


def test_idempotent_subset(store):
    formulas = store.records(Category.FORMULAS)
    once = filter_records(formulas, Category.FORMULAS, "解表")
    assert filter_records(once, Category.FORMULAS, "解表") == once
    assert all(f in formulas for f in once)


def test_no_match(store):
    assert filter_records(store.records(Category.SKILLS), Category.SKILLS, "针刺") == []


def test_search_page_clamps(store):
    herbs = store.records(Category.HERBS)
    page = search_page(herbs, Category.HERBS, "", page=2, page_size=2)
    assert ids(page.items) == ["h3"]
    assert (page.page, page.pages, page.total) == (2, 2, 3)

    page = search_page(herbs, Category.HERBS, "", page=9, page_size=2)
    assert page.page == 2

    empty = search_page(herbs, Category.HERBS, "不存在", page=1, page_size=2)
    assert empty.items == [] and empty.pages == 1


def test_listing_frame(store):
    frame = listing_frame(store.records(Category.HERBS), Category.HERBS)
    assert list(frame.columns) == ["id", "title", "subtitle"]
    assert frame.iloc[0]["title"] == "麻黄 (Ma Huang)"

    points = listing_frame(store.records(Category.ACUPOINTS), Category.ACUPOINTS)
    assert points.iloc[1]["title"] == "ST36 - 足三里"
    assert points.iloc[1]["subtitle"].endswith("...")


def test_query_is_not_trimmed(store):
    herbs = store.records(Category.HERBS)
    assert filter_records(herbs, Category.HERBS, "麻黄 ") == []
    assert ids(filter_records(herbs, Category.HERBS, "麻黄")) == ["h1"]
