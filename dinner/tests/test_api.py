import tempfile
import unittest
from unittest import mock

from fastapi.testclient import TestClient

from dinner.api.api_run import app
from dinner.domain.Outcome import Outcome
from dinner.events import web_observers
from dinner.infra.Store import JsonStore, get_store
from dinner.utilities.validators import ExtractedRecipe


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonStore(self._tmp.name)
        app.dependency_overrides[get_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self._tmp.cleanup()

    def create_recipe(self, title, *names):
        resp = self.client.post("/api/recipes", json={
            "title": title, "ingredients": [{"name": n} for n in names],
        })
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["id"]


class TestRecipesApi(ApiTestCase):

    def test_create_list_and_update(self):
        recipe_id = self.create_recipe("Tacos", "tortillas", "beef")
        listed = self.client.get("/api/recipes", params={"search": "taco"}).json()["recipes"]
        self.assertEqual([r["title"] for r in listed], ["Tacos"])
        self.assertEqual(listed[0]["meal_count"], 0)

        resp = self.client.put(f"/api/recipes/{recipe_id}/ingredients",
                               json={"ingredients": [{"name": "tortillas"}, {"name": "Cheese", "qty": 2}]})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["recipe"]["edit_count"], 1)

    def test_validation_errors(self):
        self.assertEqual(self.client.post("/api/recipes", json={"title": "   "}).status_code, 422)
        resp = self.client.put("/api/recipes/missing/ingredients", json={"ingredients": []})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Recipe not found"})
        self.assertEqual(self.client.post("/api/recipes", json={"title": " quick note "}).status_code, 400)

    def test_non_finite_qty_rejected_or_dropped(self):
        resp = self.client.post("/api/recipes", json={"title": "Soup", "ingredients": [{"name": "salt", "qty": "inf"}]})
        self.assertEqual(resp.status_code, 422)

        saved = self.client.post("/api/recipes/import/save", json={
            "recipe": {"title": "Chili", "ingredients": [{"name": "beans", "qty": "NaN"}]},
            "source_url": "https://example.com/chili",
        })
        self.assertEqual(saved.status_code, 201, saved.text)
        listed = self.client.get("/api/recipes")
        self.assertEqual(listed.status_code, 200)
        self.assertIsNone(listed.json()["recipes"][0]["ingredients"][0]["qty"])

    def test_favorites(self):
        soup = self.create_recipe("Soup", "leek")
        self.create_recipe("Salad", "lettuce")
        for _ in range(2):
            self.client.post("/api/meals", json={"recipe_id": soup})
        favorites = self.client.get("/api/recipes/favorites", params={"limit": 1}).json()["recipes"]
        self.assertEqual([(r["title"], r["meal_count"]) for r in favorites], [("Soup", 2)])

    def test_import_scrape_and_save(self):
        extracted = ExtractedRecipe.model_validate({"title": "Chili", "ingredients": [{"name": "beans"}]})
        with mock.patch("dinner.api.api_ai.scrape_recipe_from_url", return_value=Outcome.success(extracted)):
            resp = self.client.post("/api/recipes/import/scrape", json={"url": "https://example.com/chili"})
        self.assertEqual(resp.status_code, 200, resp.text)
        preview = resp.json()
        self.assertEqual(self.store.query("recipes"), [])

        saved = self.client.post("/api/recipes/import/save", json=preview)
        self.assertEqual(saved.status_code, 201, saved.text)
        row = self.store.get("recipes", saved.json()["id"])
        self.assertEqual(row["source_url"], "https://example.com/chili")
        self.assertEqual([s["name"] for s in self.store.query("pantry_staples")], ["beans"])

    def test_import_fetch_failure_is_bad_gateway(self):
        with mock.patch("dinner.api.api_ai.scrape_recipe_from_url",
                        return_value=Outcome.failure("Fetch failed: 503")):
            resp = self.client.post("/api/recipes/import/scrape", json={"url": "https://example.com/x"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), {"error": "Fetch failed: 503"})

    def test_import_rejects_non_http_url(self):
        resp = self.client.post("/api/recipes/import/scrape", json={"url": "ftp://example.com"})
        self.assertEqual(resp.status_code, 422)


class TestMealsApi(ApiTestCase):

    def test_log_meal_depletes_pantry(self):
        pasta = self.create_recipe("Garlic Pasta", "garlic")
        for _ in range(3):
            resp = self.client.post("/api/meals", json={"recipe_id": pasta, "consumed_at": "2025-01-06T19:00:00Z"})
            self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertTrue(body["ok"])
        self.assertFalse(body["stale"])
        staples = self.client.get("/api/pantry").json()["staples"]
        self.assertEqual((staples[0]["status"], staples[0]["meal_count"]), ("Half", 3))

        meals = self.client.get("/api/meals").json()["meals"]
        self.assertEqual(len(meals), 3)
        self.assertEqual(meals[0]["recipe"]["title"], "Garlic Pasta")

    def test_log_unknown_recipe(self):
        resp = self.client.post("/api/meals", json={"recipe_id": "missing"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Recipe not found"})

    def test_quick_note_and_reuse(self):
        self.assertEqual(self.client.post("/api/meals/quick-note", json={"note": "  "}).status_code, 422)
        resp = self.client.post("/api/meals/quick-note", json={"note": "leftovers"})
        self.assertEqual(resp.status_code, 201, resp.text)

        resp = self.client.post("/api/meals/reuse-last", json={"target_date": "2025-01-13"})
        self.assertEqual(resp.status_code, 404)

        tacos = self.create_recipe("Tacos", "tortillas")
        self.client.post("/api/meals", json={"recipe_id": tacos, "consumed_at": "2025-01-06T19:00:00"})
        resp = self.client.post("/api/meals/reuse-last", json={"target_date": "2025-01-13"})
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["meal"]["recipe_id"], tacos)


class TestSuggestionsApi(ApiTestCase):

    def test_weekday_and_surprise(self):
        curry = self.create_recipe("Curry", "rice", "chicken")
        self.client.post("/api/meals", json={"recipe_id": curry, "consumed_at": "2025-01-06T19:00:00"})

        body = self.client.get("/api/suggestions", params={"date": "2025-01-13"}).json()
        self.assertEqual(body["day"], "Monday")
        self.assertEqual(body["primary"]["title"], "Curry")

        surprise = self.client.get("/api/suggestions/surprise").json()
        self.assertEqual(surprise["recipe"]["title"], "Curry")
        self.assertEqual(surprise["coverage"]["ratio"], 1.0)

    def test_empty_state(self):
        body = self.client.get("/api/suggestions", params={"date": "2025-01-13"}).json()
        self.assertTrue(body["empty"])
        self.assertIsNone(self.client.get("/api/suggestions/surprise").json()["recipe"])


class TestPantryApi(ApiTestCase):

    def test_status_stock_up_and_alerts(self):
        web_observers.start()
        web_observers.clear()
        self.create_recipe("Rice Bowl", "rice", "beans")
        staples = {s["name"]: s["id"] for s in self.client.get("/api/pantry").json()["staples"]}

        self.assertEqual(self.client.put(f"/api/pantry/{staples['rice']}/status",
                                         json={"status": "Out"}).status_code, 200)
        self.client.put(f"/api/pantry/{staples['beans']}/status", json={"status": "Low"})
        self.assertEqual(self.client.put(f"/api/pantry/{staples['beans']}/status",
                                         json={"status": "Gone"}).status_code, 422)

        stock_up = self.client.get("/api/pantry/stock-up").json()
        self.assertEqual([r["name"] for r in stock_up["out"]], ["rice"])
        self.assertEqual([r["name"] for r in stock_up["low"]], ["beans"])

        alerts = self.client.get("/api/pantry/alerts").json()
        self.assertIn("pantry.low_stock", [e["type"] for e in alerts["events"]])
        later = self.client.get("/api/pantry/alerts", params={"since": alerts["next_cursor"]}).json()
        self.assertEqual(later["events"], [])

        resp = self.client.post(f"/api/pantry/{staples['rice']}/stocked")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/pantry/stock-up").json()["count"], 1)
        self.assertEqual(self.client.post("/api/pantry/missing/stocked").status_code, 404)

    def test_recalculate(self):
        self.create_recipe("Bread", "flour")
        resp = self.client.post("/api/pantry/recalculate")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["ok"])


class TestShoppingApi(ApiTestCase):

    def test_shopping_flow(self):
        recipe_id = self.create_recipe("Pancakes", "flour", "eggs")
        self.assertEqual(self.client.post(f"/api/shopping-list/from-recipe/{recipe_id}").json()["added"], 2)
        milk = self.client.post("/api/shopping-list", json={"name": "Milk", "qty": "1 l"}).json()["id"]

        items = self.client.get("/api/shopping-list").json()["items"]
        self.assertEqual(len(items), 3)

        self.client.post(f"/api/shopping-list/{milk}/toggle", params={"checked": True})
        self.assertEqual(self.client.delete("/api/shopping-list/checked").json()["removed"], 1)
        self.assertEqual(self.client.delete(f"/api/shopping-list/{milk}").status_code, 404)

        pdf = self.client.get("/api/shopping-list/pdf")
        self.assertEqual(pdf.headers["content-type"], "application/pdf")
        self.assertTrue(pdf.content.startswith(b"%PDF"))

    def test_missing_recipe(self):
        self.assertEqual(self.client.post("/api/shopping-list/from-recipe/nope").status_code, 404)


if __name__ == "__main__":
    unittest.main()
