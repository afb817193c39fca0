import logging
from typing import Any, Dict, Optional

from lingshu.models import Category
from lingshu.transcoder import blank_form, save_form, to_form

logger = logging.getLogger(__name__)

VIEWS = ["herbs", "acupoints", "formulas", "exam", "skills", "quiz", "ai_chat", "admin"]

# Views that show the search box
SEARCHABLE_VIEWS = {"herbs", "acupoints", "formulas", "exam", "skills"}


class AppState:
    """Navigation and search. Switching views always clears the search text."""

    def __init__(self, view: str = "herbs"):
        self.current_view = view
        self.search_term = ""
        self.selected_formula_id: Optional[str] = None

    def change_view(self, view: str):
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        if view != self.current_view:
            logger.debug(f"View change: {self.current_view} -> {view}")
            self.search_term = ""
            self.selected_formula_id = None
        self.current_view = view

    def set_search(self, text: str):
        self.search_term = text or ""

    @property
    def shows_search(self) -> bool:
        return self.current_view in SEARCHABLE_VIEWS

    def show_formula(self, formula_id: Optional[str]):
        if formula_id:
            self.selected_formula_id = formula_id

    def close_formula(self):
        self.selected_formula_id = None


class AdminState:
    """
    The admin editor: which tab is active and what is open in the modal.
    `form` is the flat, editable representation; saving goes through the
    transcoder and closes the editor.
    """

    def __init__(self, tab: Category = Category.HERBS):
        self.active_tab = Category(tab)
        self.is_open = False
        self.editing_id: Optional[str] = None
        self.form: Dict[str, Any] = {}

    def switch_tab(self, tab):
        self.active_tab = Category(tab)
        self.close()

    def open_editor(self, record=None):
        if record is not None:
            self.editing_id = record.id
            self.form = to_form(record, self.active_tab)
        else:
            self.editing_id = None
            self.form = blank_form(self.active_tab)
        self.is_open = True

    def update_field(self, name: str, value):
        self.form = {**self.form, name: value}

    def close(self):
        self.is_open = False
        self.editing_id = None
        self.form = {}

    def save(self, store):
        record = save_form(store, self.active_tab, self.form, self.editing_id)
        self.close()
        return record
