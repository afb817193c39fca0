"""
Admin form transcoding.

Records are structured (lists, nested effects, ingredients); the admin editor
works on a flat dict of mostly-text fields. Each category gets its own codec,
picked by the explicit `Category` tag:

    form = to_form(herb, Category.HERBS)          # {"flavor": "辛,微苦", ...}
    herb = from_form(form, Category.HERBS, "h1")  # back to a Herb

`save_form` is the only path that writes into the store.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from lingshu.models import (
    Acupoint,
    Category,
    FormField,
    Formula,
    Herb,
    HerbEffect,
    Ingredient,
    KnowledgePoint,
    Skill,
)
from lingshu.store import mint_id

logger = logging.getLogger(__name__)

COMMA_SPLIT = re.compile(r"[,，]")
DOSAGE_SPLIT = re.compile(r"[:：]")
DIFFICULTIES = ("Easy", "Medium", "Hard")


# --- Text <-> List Helpers ---


def join_lines(values) -> str:
    return "\n".join(values or [])


def join_tags(values) -> str:
    return ",".join(values or [])


def split_lines(text) -> List[str]:
    if not isinstance(text, str):
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def split_tags(text) -> List[str]:
    """Splits on ASCII or full-width commas."""
    if not isinstance(text, str):
        return []
    return [part.strip() for part in COMMA_SPLIT.split(text) if part.strip()]


def split_ids(value) -> List[str]:
    """Reference ids arrive as a list, or as comma-separated text."""
    if isinstance(value, str):
        return split_tags(value)
    if not isinstance(value, (list, tuple)):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


def parse_ingredient(line: str) -> Ingredient:
    """'麻黄:9g' -> 麻黄 / 9g. Without a separator the dosage is empty."""
    parts = DOSAGE_SPLIT.split(line, maxsplit=1)
    name = parts[0].strip()
    dosage = parts[1].strip() if len(parts) > 1 else ""
    return Ingredient(name=name, dosage=dosage)


def _text(form, key, default="") -> str:
    value = form.get(key)
    return value if isinstance(value, str) else default


# --- Codecs ---


class FormCodec:
    category: Category

    def to_form(self, record) -> Dict[str, Any]:
        raise NotImplementedError

    def from_form(self, form: Dict[str, Any], record_id: str):
        raise NotImplementedError

    def blank(self) -> Dict[str, Any]:
        return {}

    def fields(self) -> List[FormField]:
        return []


class HerbCodec(FormCodec):
    category = Category.HERBS

    def to_form(self, record: Herb):
        form = record.model_dump()
        form["flavor"] = join_tags(record.flavor)
        form["channels"] = join_tags(record.channels)
        # Effects stay structured so each row keeps its formula link
        form["effects"] = [
            {
                "description": e.description,
                "related_formula_id": e.related_formula_id or "",
            }
            for e in record.effects
        ]
        return form

    def from_form(self, form, record_id):
        effects = []
        for row in form.get("effects") or []:
            if not isinstance(row, dict):
                continue
            description = _text(row, "description").strip()
            if not description:
                continue  # Incomplete rows are dropped, not rejected
            effects.append(
                HerbEffect(
                    description=description,
                    related_formula_id=_text(row, "related_formula_id").strip() or None,
                )
            )

        return Herb(
            id=record_id,
            name=_text(form, "name"),
            pinyin=_text(form, "pinyin"),
            nature=_text(form, "nature"),
            flavor=split_tags(form.get("flavor")),
            channels=split_tags(form.get("channels")),
            effects=effects,
            category=_text(form, "category"),
        )

    def blank(self):
        return {"effects": [], "flavor": "", "channels": ""}

    def fields(self):
        return [
            FormField(name="name", label="名称"),
            FormField(name="pinyin", label="拼音"),
            FormField(name="nature", label="性 (如: 温, 寒)"),
            FormField(name="category", label="分类"),
            FormField(name="flavor", label="味 (逗号分隔)", placeholder="辛,微苦"),
            FormField(name="channels", label="归经 (逗号分隔)", placeholder="肺,膀胱"),
            FormField(name="effects", label="功效与关联方剂", widget="effects"),
        ]


class FormulaCodec(FormCodec):
    category = Category.FORMULAS

    def to_form(self, record: Formula):
        form = record.model_dump()
        form["ingredients"] = "\n".join(
            f"{i.name}:{i.dosage}" for i in record.ingredients
        )
        return form

    def from_form(self, form, record_id):
        return Formula(
            id=record_id,
            name=_text(form, "name"),
            pinyin=_text(form, "pinyin"),
            ingredients=[
                parse_ingredient(line) for line in split_lines(form.get("ingredients"))
            ],
            usage=_text(form, "usage"),
            functions=_text(form, "functions"),
            category=_text(form, "category"),
        )

    def fields(self):
        return [
            FormField(name="name", label="方名"),
            FormField(name="pinyin", label="拼音"),
            FormField(name="category", label="分类"),
            FormField(
                name="ingredients",
                label="组成 (每行一味: 药名:剂量)",
                widget="textarea",
                placeholder="麻黄:9g\n桂枝:6g",
            ),
            FormField(name="functions", label="功用", widget="textarea"),
            FormField(name="usage", label="用法"),
        ]


class AcupointCodec(FormCodec):
    category = Category.ACUPOINTS

    def to_form(self, record: Acupoint):
        form = record.model_dump()
        form["functions"] = join_lines(record.functions)
        form["indications"] = join_lines(record.indications)
        return form

    def from_form(self, form, record_id):
        return Acupoint(
            id=record_id,
            name=_text(form, "name"),
            code=_text(form, "code"),
            location=_text(form, "location"),
            functions=split_lines(form.get("functions")),
            indications=split_lines(form.get("indications")),
            related_herb_ids=split_ids(form.get("related_herb_ids")),
            related_formula_ids=split_ids(form.get("related_formula_ids")),
        )

    def fields(self):
        return [
            FormField(name="name", label="穴名"),
            FormField(name="code", label="代码 (如: LU7)"),
            FormField(name="location", label="定位", widget="textarea"),
            FormField(name="functions", label="功能 (每行一条)", widget="textarea"),
            FormField(name="indications", label="主治 (每行一条)", widget="textarea"),
        ]


class KnowledgeCodec(FormCodec):
    category = Category.EXAM

    def to_form(self, record: KnowledgePoint):
        return record.model_dump()

    def from_form(self, form, record_id):
        difficulty = form.get("difficulty")
        return KnowledgePoint(
            id=record_id,
            title=_text(form, "title"),
            category=_text(form, "category"),
            content=_text(form, "content"),
            difficulty=difficulty if difficulty in DIFFICULTIES else "Easy",
        )

    def blank(self):
        return {"difficulty": "Easy"}

    def fields(self):
        return [
            FormField(name="title", label="标题"),
            FormField(name="category", label="分类"),
            FormField(
                name="difficulty",
                label="难度",
                widget="select",
                options=["Easy", "Medium", "Hard"],
            ),
            FormField(name="content", label="内容", widget="textarea"),
        ]


class SkillCodec(FormCodec):
    category = Category.SKILLS

    def to_form(self, record: Skill):
        form = record.model_dump()
        form["steps"] = join_lines(record.steps)
        return form

    def from_form(self, form, record_id):
        return Skill(
            id=record_id,
            title=_text(form, "title"),
            category=_text(form, "category"),
            description=_text(form, "description"),
            steps=split_lines(form.get("steps")),
        )

    def fields(self):
        return [
            FormField(name="title", label="技能名称"),
            FormField(name="category", label="分类"),
            FormField(name="description", label="描述", widget="textarea"),
            FormField(name="steps", label="操作步骤 (每行一步)", widget="textarea"),
        ]


CODECS: Dict[Category, FormCodec] = {
    codec.category: codec
    for codec in (
        HerbCodec(),
        FormulaCodec(),
        AcupointCodec(),
        KnowledgeCodec(),
        SkillCodec(),
    )
}


def codec_for(category) -> FormCodec:
    return CODECS[Category(category)]


# --- Public API ---


def to_form(record, category) -> Dict[str, Any]:
    return codec_for(category).to_form(record)


def from_form(form, category, existing_id: Optional[str] = None):
    """
    Rebuilds a record from its form. Editing keeps `existing_id` (or the id a
    `to_form` result carries); a blank form gets a fresh id.
    """
    record_id = existing_id or (form or {}).get("id") or mint_id()
    return codec_for(category).from_form(form or {}, record_id)


def save_form(store, category, form, existing_id: Optional[str] = None):
    record = from_form(form, category, existing_id)
    return store.save(category, record)


def blank_form(category) -> Dict[str, Any]:
    return codec_for(category).blank()


def field_definitions(category) -> List[FormField]:
    return codec_for(category).fields()


# --- Herb Effect Rows ---


def add_effect(form) -> Dict[str, Any]:
    effects = list(form.get("effects") or [])
    effects.append({"description": "", "related_formula_id": ""})
    return {**form, "effects": effects}


def remove_effect(form, index: int) -> Dict[str, Any]:
    effects = list(form.get("effects") or [])
    if 0 <= index < len(effects):
        effects.pop(index)
    return {**form, "effects": effects}


def update_effect(form, index: int, field: str, value: str) -> Dict[str, Any]:
    effects = list(form.get("effects") or [])
    if 0 <= index < len(effects):
        effects[index] = {**effects[index], field: value}
    return {**form, "effects": effects}


def formula_options(store) -> List[Dict[str, str]]:
    """Choices for an effect's related-formula selector, from the live list."""
    return [{"id": f.id, "name": f.name} for f in store.records(Category.FORMULAS)]


def formula_choices(store, linked: str = "") -> List[str]:
    """
    Selector values for one effect row: "" (no link), every live formula id,
    and `linked` itself when it points at a formula that no longer exists.
    """
    choices = [""] + [o["id"] for o in formula_options(store)]
    if linked and linked not in choices:
        choices.append(linked)
    return choices
