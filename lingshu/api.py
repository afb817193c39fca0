from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging
import uvicorn
from dotenv import load_dotenv

from lingshu.config import ADMIN_PAGE_SIZE, ENV_FILE, QUIZ_SIZE
from lingshu.filters import admin_row, filter_records, search_page
from lingshu.models import Category, FormField, QuizItem
from lingshu.oracle import ask
from lingshu.quiz import generate_quiz
from lingshu.store import EntityStore
from lingshu.transcoder import blank_form, field_definitions, formula_options, save_form, to_form

# 1. Logging & Config
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("lingshu-api")

app = FastAPI(title="Lingshu API", version="0.1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Store Lifecycle (in memory, one per process)
store = EntityStore()


@app.on_event("startup")
async def startup_event():
    logger.info(">>> STARTUP SEQUENCE <<<")
    if ENV_FILE.exists():
        load_dotenv(dotenv_path=ENV_FILE)
    logger.info(f"--- STORE: Ready. {store.counts()}")


# 3. Data Models
class SaveRequest(BaseModel):
    form: Dict[str, Any]
    existing_id: Optional[str] = None


class AskRequest(BaseModel):
    query: str
    context: Optional[str] = None


class FormResponse(BaseModel):
    form: Dict[str, Any]
    fields: List[FormField]
    formula_options: List[Dict[str, str]] = []


# 4. Helpers
def parse_category(category: str) -> Category:
    try:
        return Category(category)
    except ValueError:
        raise HTTPException(404, f"Unknown category: {category}")


def dump(records) -> List[Dict[str, Any]]:
    return [r.model_dump() for r in records]


# 5. Endpoints


@app.get("/catalog/{category}")
def browse(category: str, q: str = ""):
    cat = parse_category(category)
    hits = filter_records(store.records(cat), cat, q)
    return {"category": cat.value, "total": len(hits), "items": dump(hits)}


@app.get("/resolve/{category}/{record_id}")
def resolve(category: str, record_id: str):
    # Lookup misses echo the id rather than 404
    return {"id": record_id, "label": store.resolve_name(category, record_id)}


@app.get("/formulas/{formula_id}")
def formula_detail(formula_id: str):
    formula = store.resolve_formula(formula_id)
    if formula is None:
        raise HTTPException(404, f"Formula {formula_id} not found")
    return formula.model_dump()


@app.get("/admin/{category}")
def admin_list(category: str, q: str = "", page: int = 1, page_size: int = ADMIN_PAGE_SIZE):
    cat = parse_category(category)
    result = search_page(store.records(cat), cat, q, page, page_size)
    return {
        "items": [admin_row(r, cat) for r in result.items],
        "page": result.page,
        "page_size": result.page_size,
        "total": result.total,
        "pages": result.pages,
    }


@app.get("/admin/{category}/form", response_model=FormResponse)
def new_form(category: str):
    cat = parse_category(category)
    return FormResponse(
        form=blank_form(cat),
        fields=field_definitions(cat),
        formula_options=formula_options(store) if cat == Category.HERBS else [],
    )


@app.get("/admin/{category}/form/{record_id}", response_model=FormResponse)
def edit_form(category: str, record_id: str):
    cat = parse_category(category)
    record = store.get(cat, record_id)
    if record is None:
        raise HTTPException(404, f"{cat.value}/{record_id} not found")
    return FormResponse(
        form=to_form(record, cat),
        fields=field_definitions(cat),
        formula_options=formula_options(store) if cat == Category.HERBS else [],
    )


@app.post("/admin/{category}")
def save(category: str, request: SaveRequest):
    cat = parse_category(category)
    try:
        record = save_form(store, cat, request.form, request.existing_id)
        return record.model_dump()
    except Exception as e:
        logger.error(f"Save Error: {e}")
        raise HTTPException(500, str(e))


@app.delete("/admin/{category}/{record_id}")
def delete(category: str, record_id: str):
    cat = parse_category(category)
    if not store.delete(cat, record_id):
        raise HTTPException(404, f"{cat.value}/{record_id} not found")
    return {"deleted": record_id}


@app.get("/quiz", response_model=List[QuizItem])
def quiz(size: int = QUIZ_SIZE):
    return generate_quiz(store, size)


@app.post("/ask")
def ask_master(request: AskRequest):
    if not request.query or not request.query.strip():
        raise HTTPException(status_code=400, detail="Query cannot be empty")
    # The relay never raises; failures come back as fallback text
    return {"answer": ask(request.query, request.context)}


def main():
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
