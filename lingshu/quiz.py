import logging
import random
from typing import List

from lingshu.config import QUIZ_SIZE
from lingshu.models import Category, QuizItem

logger = logging.getLogger(__name__)

SOURCE_LABELS = {
    Category.HERBS: "中药学",
    Category.FORMULAS: "方剂学",
    Category.ACUPOINTS: "经络穴位",
    Category.EXAM: "重点考点",
    Category.SKILLS: "技能操作",
}


def herb_item(herb) -> QuizItem:
    return QuizItem(
        id=f"herb-{herb.id}",
        source_category=SOURCE_LABELS[Category.HERBS],
        sub_label=herb.pinyin,
        question=f"请简述中药【{herb.name}】({herb.nature}，{','.join(herb.flavor)}) 的主要功效。",
        answer="；".join(e.description for e in herb.effects),
    )


def formula_item(formula) -> QuizItem:
    return QuizItem(
        id=f"formula-{formula.id}",
        source_category=SOURCE_LABELS[Category.FORMULAS],
        sub_label=formula.category,
        question=f"请简述方剂【{formula.name}】的功用与主治。",
        answer=f"功用：{formula.functions}",
    )


def acupoint_item(point) -> QuizItem:
    return QuizItem(
        id=f"point-{point.id}",
        source_category=SOURCE_LABELS[Category.ACUPOINTS],
        sub_label=point.code,
        question=f"请描述穴位【{point.name}】的定位及主治。",
        answer=f"定位：{point.location}\n主治：{'、'.join(point.indications)}",
    )


def knowledge_item(kp) -> QuizItem:
    return QuizItem(
        id=f"kp-{kp.id}",
        source_category=SOURCE_LABELS[Category.EXAM],
        sub_label=kp.category,
        question=f"【{kp.category}】{kp.title}",
        answer=kp.content,
    )


def skill_item(skill) -> QuizItem:
    return QuizItem(
        id=f"skill-{skill.id}",
        source_category=SOURCE_LABELS[Category.SKILLS],
        sub_label=skill.category,
        question=f"请简述【{skill.title}】的操作步骤。",
        answer="\n".join(skill.steps),
    )


TEMPLATES = {
    Category.HERBS: herb_item,
    Category.FORMULAS: formula_item,
    Category.ACUPOINTS: acupoint_item,
    Category.EXAM: knowledge_item,
    Category.SKILLS: skill_item,
}


def build_pool(store) -> List[QuizItem]:
    """One question per record, across every collection."""
    pool = []
    for category, template in TEMPLATES.items():
        pool.extend(template(record) for record in store.records(category))
    return pool


def generate_quiz(store, size: int = QUIZ_SIZE) -> List[QuizItem]:
    """
    Shuffles the whole pool and keeps the first `size` items. Unseeded, so
    every call draws a new paper; a small pool is returned whole.
    """
    pool = build_pool(store)
    random.shuffle(pool)
    selected = pool[: max(0, size)]
    logger.info(f"Quiz drawn: {len(selected)} of {len(pool)} questions.")
    return selected


class QuizSession:
    """The paper currently on screen and whether its answers are showing."""

    def __init__(self, store, size: int = QUIZ_SIZE):
        self.store = store
        self.size = size
        self.questions: List[QuizItem] = []
        self.show_answers = False
        self.has_generated = False

    def generate(self):
        self.questions = generate_quiz(self.store, self.size)
        self.show_answers = False
        self.has_generated = True
        return self.questions

    def toggle_answers(self):
        self.show_answers = not self.show_answers
        return self.show_answers
