from enum import Enum
from pydantic import BaseModel
from typing import List, Optional, Literal


class Category(str, Enum):
    HERBS = "herbs"
    FORMULAS = "formulas"
    ACUPOINTS = "acupoints"
    EXAM = "exam"  # Knowledge points
    SKILLS = "skills"


Difficulty = Literal["Easy", "Medium", "Hard"]


# --- Formulas ---
class Ingredient(BaseModel):
    name: str
    dosage: str = ""  # Unit-bearing, e.g. "9g" or "3枚"


class Formula(BaseModel):
    id: str
    name: str
    pinyin: str = ""
    ingredients: List[Ingredient] = []
    usage: str = ""
    functions: str = ""
    category: str = ""


# --- Herbs ---
class HerbEffect(BaseModel):
    description: str
    related_formula_id: Optional[str] = None  # Weak link to a Formula id


class Herb(BaseModel):
    id: str
    name: str
    pinyin: str = ""
    nature: str = ""  # e.g. 温, 微寒
    flavor: List[str] = []
    channels: List[str] = []
    effects: List[HerbEffect] = []
    category: str = ""


# --- Acupoints ---
class Acupoint(BaseModel):
    id: str
    name: str
    code: str = ""  # e.g. LU7
    location: str = ""
    functions: List[str] = []
    indications: List[str] = []
    related_herb_ids: List[str] = []
    related_formula_ids: List[str] = []


# --- Exam ---
class KnowledgePoint(BaseModel):
    id: str
    title: str
    category: str = ""
    content: str = ""  # The answer/explanation
    difficulty: Difficulty = "Easy"


# --- Clinical Skills ---
class Skill(BaseModel):
    id: str
    title: str  # e.g. 脉诊：滑脉
    category: str = ""
    description: str = ""
    steps: List[str] = []


RECORD_TYPES = {
    Category.HERBS: Herb,
    Category.FORMULAS: Formula,
    Category.ACUPOINTS: Acupoint,
    Category.EXAM: KnowledgePoint,
    Category.SKILLS: Skill,
}


# --- Mock Exam ---
class QuizItem(BaseModel):
    id: str  # "<kind>-<record id>"
    source_category: str
    sub_label: Optional[str] = None  # Pinyin, code or category
    question: str
    answer: str


# --- Admin Form Definitions ---
class FormField(BaseModel):
    name: str
    label: str
    widget: Literal["text", "textarea", "select", "effects"] = "text"
    options: List[str] = []
    placeholder: Optional[str] = None
