import unittest
from unittest.mock import patch
from fastapi.testclient import TestClient
import sys
from pathlib import Path

# Adjust sys.path to include the project root
sys.path.append(str(Path(__file__).resolve().parent.parent))

from lingshu.api import app, main
from lingshu.oracle import FALLBACK_REPLY
from lingshu.store import EntityStore


class TestApi(unittest.TestCase):

    def setUp(self):
        # Fresh in-memory store per test
        self.store = EntityStore()
        self.store_patcher = patch("lingshu.api.store", self.store)
        self.store_patcher.start()
        self.client = TestClient(app)

    def tearDown(self):
        self.store_patcher.stop()

    def test_browse_filters(self):
        response = self.client.get("/catalog/herbs", params={"q": "发汗"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["total"], 2)
        self.assertEqual([h["id"] for h in data["items"]], ["h1", "h2"])

    def test_browse_unknown_category(self):
        response = self.client.get("/catalog/minerals")
        self.assertEqual(response.status_code, 404)

    def test_resolve_echoes_missing(self):
        self.assertEqual(self.client.get("/resolve/formulas/f1").json()["label"], "麻黄汤")
        self.assertEqual(self.client.get("/resolve/formulas/f404").json()["label"], "f404")

    def test_formula_detail(self):
        self.assertEqual(self.client.get("/formulas/f2").json()["name"], "桂枝汤")
        self.assertEqual(self.client.get("/formulas/f404").status_code, 404)

    def test_admin_list_paginates(self):
        data = self.client.get("/admin/herbs", params={"page": 2, "page_size": 2}).json()
        self.assertEqual(data["items"], [{"id": "h3", "title": "人参 (Ren Shen)", "subtitle": "补气药"}])
        self.assertEqual(data["pages"], 2)

    def test_edit_form(self):
        data = self.client.get("/admin/herbs/form/h1").json()
        self.assertEqual(data["form"]["channels"], "肺,膀胱")
        self.assertEqual(len(data["formula_options"]), 3)
        self.assertEqual(self.client.get("/admin/herbs/form/h404").status_code, 404)

    def test_new_form(self):
        data = self.client.get("/admin/exam/form").json()
        self.assertEqual(data["form"], {"difficulty": "Easy"})
        self.assertEqual(data["formula_options"], [])

    def test_save_edit(self):
        form = self.client.get("/admin/herbs/form/h1").json()["form"]
        form["channels"] = "肺，膀胱, 心"
        form["effects"].append({"description": " ", "related_formula_id": "f2"})

        response = self.client.post("/admin/herbs", json={"form": form, "existing_id": "h1"})

        self.assertEqual(response.status_code, 200)
        herb = self.store.get("herbs", "h1")
        self.assertEqual(herb.channels, ["肺", "膀胱", "心"])
        self.assertEqual(len(herb.effects), 3)

    def test_save_create(self):
        response = self.client.post(
            "/admin/formulas", json={"form": {"name": "小柴胡汤", "ingredients": "柴胡:24g"}}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["ingredients"], [{"name": "柴胡", "dosage": "24g"}])
        self.assertEqual(len(self.store.records("formulas")), 4)

    def test_save_lowercase_difficulty(self):
        response = self.client.post(
            "/admin/exam", json={"form": {"title": "阴阳", "difficulty": "easy"}}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["difficulty"], "Easy")

    def test_save_acupoint_with_id_text(self):
        response = self.client.post(
            "/admin/acupoints",
            json={"form": {"name": "列缺", "related_herb_ids": "h1"}, "existing_id": "a1"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.store.get("acupoints", "a1").related_herb_ids, ["h1"])

    def test_delete(self):
        self.assertEqual(self.client.delete("/admin/skills/s1").status_code, 200)
        self.assertEqual(self.client.delete("/admin/skills/s1").status_code, 404)
        self.assertEqual(len(self.store.records("skills")), 1)

    def test_quiz(self):
        self.assertEqual(len(self.client.get("/quiz").json()), 10)
        self.assertEqual(len(self.client.get("/quiz", params={"size": 20}).json()), 12)

    @patch("lingshu.api.ask")
    def test_ask(self, mock_ask):
        mock_ask.return_value = "答复"
        response = self.client.post("/ask", json={"query": "什么是八纲？"})
        self.assertEqual(response.json(), {"answer": "答复"})
        mock_ask.assert_called_once_with("什么是八纲？", None)

    def test_ask_without_credentials(self):
        with patch.dict("os.environ", {"GOOGLE_API_KEY": "", "GEMINI_API_KEY": ""}):
            response = self.client.post("/ask", json={"query": "什么是八纲？"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["answer"], FALLBACK_REPLY)

    def test_ask_empty(self):
        self.assertEqual(self.client.post("/ask", json={"query": "  "}).status_code, 400)


    @patch("lingshu.api.uvicorn.run")
    def test_main_serves_app(self, mock_run):
        main()
        mock_run.assert_called_once_with(app, host="0.0.0.0", port=8000)

if __name__ == "__main__":
    unittest.main()
