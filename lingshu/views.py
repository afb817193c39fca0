"""
Plain view models for the presentation layer: headings, badges and cards
with their cross-references already resolved to display names.
"""
from typing import Any, Dict, List

from lingshu.models import Category

TITLES = {
    "herbs": "中药学资料库",
    "acupoints": "经络穴位图谱",
    "formulas": "方剂学宝典",
    "exam": "中医重点考点",
    "skills": "临床技能操作",
    "quiz": "综合模拟试卷",
    "admin": "后台管理系统",
    "ai_chat": "AI 灵枢助手",
}

SUBTITLES = {
    "herbs": "探索四气五味、升降浮沉。",
    "acupoints": "掌握穴位定位与主治功效。",
    "formulas": "学习君臣佐使的组方艺术。",
    "exam": "备战执业医师与期末考试。",
    "skills": "精进望闻问切与推拿针灸。",
    "quiz": "从中药、方剂、穴位、考点及技能中随机抽取10题。",
}

NAV_LABELS = {
    "herbs": "中药学",
    "acupoints": "经络穴位",
    "formulas": "方剂学",
    "exam": "重点考点",
    "skills": "技能操作",
    "quiz": "模拟考试",
    "ai_chat": "AI 灵枢助手",
    "admin": "后台管理",
}

ADMIN_TABS = {
    Category.HERBS: "中药管理",
    Category.FORMULAS: "方剂管理",
    Category.ACUPOINTS: "穴位管理",
    Category.EXAM: "考点管理",
    Category.SKILLS: "技能管理",
}

EMPTY_MESSAGES = {
    Category.HERBS: "未找到匹配的中药",
    Category.FORMULAS: "未找到匹配的方剂",
    Category.ACUPOINTS: "未找到匹配的穴位",
    Category.EXAM: "未找到匹配的考点",
    Category.SKILLS: "未找到匹配的技能",
}

DIFFICULTY_LABELS = {"Easy": "简单", "Medium": "中等", "Hard": "困难"}


def title_for(view: str) -> str:
    return TITLES.get(view, "")


def subtitle_for(view: str) -> str:
    return SUBTITLES.get(view, "")


def is_warm(nature: str) -> bool:
    """Warm/hot natures get the warm badge; everything else reads as cool."""
    return "温" in nature or "热" in nature


def herb_card(herb) -> Dict[str, Any]:
    return {
        "id": herb.id,
        "name": herb.name,
        "pinyin": herb.pinyin,
        "nature": herb.nature,
        "warm": is_warm(herb.nature),
        "flavor": list(herb.flavor),
        "channels": list(herb.channels),
        "effects": [
            {"description": e.description, "formula_id": e.related_formula_id}
            for e in herb.effects
        ],
    }


def acupoint_card(point, store) -> Dict[str, Any]:
    return {
        "id": point.id,
        "name": point.name,
        "code": point.code,
        "location": point.location,
        "indications": list(point.indications),
        "herbs": store.resolve_names(Category.HERBS, point.related_herb_ids),
        "formulas": [
            {"id": fid, "name": store.resolve_name(Category.FORMULAS, fid)}
            for fid in point.related_formula_ids
        ],
    }


def knowledge_card(kp) -> Dict[str, Any]:
    return {
        "id": kp.id,
        "title": kp.title,
        "category": kp.category,
        "difficulty": DIFFICULTY_LABELS.get(kp.difficulty, kp.difficulty),
        "content": kp.content,
    }


def chat_role_label(role: str) -> str:
    return "您" if role == "user" else "灵枢"


def formula_lines(formula) -> List[str]:
    return [f"{i.name} {i.dosage}".strip() for i in formula.ingredients]
