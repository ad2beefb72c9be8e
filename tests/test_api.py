import unittest

from fastapi.testclient import TestClient

from shopledger.main import create_app
from tests.helpers import make_store

AUTH = {"X-API-Key": "test-key"}


class ApiTest(unittest.TestCase):
    def setUp(self):
        self.store, self.engine = make_store()
        self.app = create_app(self.store, watch=False)
        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)
        self.engine.dispose()

    def _post_expense(self, day, category, amount, item="Item", notes=None):
        body = {"date": day, "category": category, "item": item, "amount": amount}
        if notes is not None:
            body["notes"] = notes
        response = self.client.post("/expenses", json=body, headers=AUTH)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def _post_revenue(self, day, amount, source="cash"):
        response = self.client.post(
            "/revenue",
            json={"date": day, "amount": amount, "source": source},
            headers=AUTH,
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["status"], "ok")
        self.assertEqual(payload["subscriptions"], 4)
        self.assertFalse(payload["loading"])
        self.assertEqual(
            payload["collections"],
            {"expenses": 0, "revenue": 0, "stock": 0, "consumables": 0},
        )

    def test_writes_require_auth(self):
        body = {"date": "2024-03-05", "category": "salary", "item": "Wages", "amount": 10}
        self.assertEqual(self.client.post("/expenses", json=body).status_code, 401)
        self.assertEqual(
            self.client.post("/expenses", json=body, headers={"X-API-Key": "nope"}).status_code,
            401,
        )
        self.assertEqual(self.client.delete("/expenses/e1").status_code, 401)
        self.assertEqual(self.store.snapshot("expenses", "createdAt").records, ())

    def test_invalid_body_is_rejected(self):
        response = self.client.post(
            "/expenses",
            json={"date": "2024-02-30", "category": "salary", "item": "Wages", "amount": 10},
            headers=AUTH,
        )
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/revenue", json={"date": "2024-03-05"}, headers=AUTH)
        self.assertEqual(response.status_code, 422)

    def test_non_finite_numbers_are_rejected(self):
        headers = {**AUTH, "Content-Type": "application/json"}
        response = self.client.post(
            "/expenses",
            content='{"date": "2024-03-05", "category": "salary", "item": "Wages", "amount": Infinity}',
            headers=headers,
        )
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/revenue", content='{"date": "2024-03-05", "amount": NaN}', headers=headers)
        self.assertEqual(response.status_code, 422)

        beef = self.client.post("/stock", json={"name": "Beef", "currentQuantity": 2}, headers=AUTH).json()["id"]
        response = self.client.post("/stock/{}/adjust".format(beef), content='{"delta": NaN}', headers=headers)
        self.assertEqual(response.status_code, 422)

        self.assertEqual(self.client.get("/expenses").json()["count"], 0)
        self.assertEqual(self.store.get("stock", beef)["currentQuantity"], 2)
        all_time = self.client.get("/summary/all-time")
        self.assertEqual(all_time.status_code, 200)
        self.assertEqual(all_time.json()["totals"]["net_profit"], 0)

    def test_expense_is_attributed_and_listed(self):
        record_id = self._post_expense("2024-03-05", "salary", 300, item="Wages")

        response = self.client.get("/expenses")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["count"], 1)
        row = payload["results"][0]
        self.assertEqual(row["id"], record_id)
        self.assertEqual(row["userId"], "tester")
        self.assertIn("createdAt", row)

    def test_expense_filters_and_grouping(self):
        self._post_expense("2024-03-01", "salary", 100, item="Wages")
        self._post_expense("2024-03-02", "meta_ads", 20, item="Boost", notes="spring promo")
        self._post_expense("2024-03-02", "other", 5, item="Tape")

        response = self.client.get("/expenses", params={"search": "PROMO"})
        self.assertEqual([row["item"] for row in response.json()["results"]], ["Boost"])
        self.assertTrue(response.json()["filtered"])
        self.assertFalse(self.client.get("/expenses").json()["filtered"])

        response = self.client.get("/expenses", params={"category": "salary"})
        self.assertEqual(response.json()["count"], 1)

        response = self.client.get("/expenses", params={"date_from": "2024-03-02", "grouped": "true"})
        groups = response.json()["groups"]
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0]["date"], "2024-03-02")
        self.assertEqual(groups[0]["total"], 25)

        self.assertEqual(self.client.get("/expenses", params={"category": "rent"}).status_code, 400)
        self.assertEqual(self.client.get("/expenses", params={"date_to": "March"}).status_code, 400)

    def test_delete_expense(self):
        record_id = self._post_expense("2024-03-05", "salary", 300)

        self.assertEqual(self.client.delete("/expenses/{}".format(record_id), headers=AUTH).status_code, 204)
        self.assertEqual(self.client.get("/expenses").json()["count"], 0)
        self.assertEqual(self.client.delete("/expenses/{}".format(record_id), headers=AUTH).status_code, 204)

    def test_daily_and_monthly_summary(self):
        self._post_expense("2024-03-01", "salary", 100)
        self._post_expense("2024-03-01", "meta_ads", 20)
        self._post_expense("2024-04-01", "salary", 999)
        self._post_revenue("2024-03-01", 500)
        self._post_revenue("2024-03-15", 50, source="online")

        daily = self.client.get("/summary/daily/2024-03-01").json()
        self.assertEqual(daily["total_revenue"], 500)
        self.assertEqual(daily["total_expenses"], 120)
        self.assertEqual(daily["net_profit"], 380)
        self.assertEqual(daily["expenses_by_category"], {"salary": 100, "meta_ads": 20})

        monthly = self.client.get("/summary/monthly/2024/3").json()
        self.assertEqual(monthly["summary"]["total_revenue"], 550)
        self.assertEqual(monthly["summary"]["total_expenses"], 120)
        self.assertEqual(len(monthly["series"]), 31)
        self.assertEqual(monthly["series"][14]["revenue"], 50)
        self.assertEqual(monthly["series"][1]["profit"], 0)
        self.assertEqual([row["category"] for row in monthly["categories"]], ["salary", "meta_ads"])

        empty = self.client.get("/summary/monthly/2024/13").json()
        self.assertEqual(empty["summary"]["total_revenue"], 0)
        self.assertEqual(empty["series"], [])

        self.assertEqual(self.client.get("/summary/daily/2024-3-1").status_code, 400)

    def test_category_totals_and_all_time(self):
        self._post_expense("2024-03-01", "salary", 100)
        self._post_expense("2024-03-10", "salary", 50)
        self._post_revenue("2024-03-01", 400)

        ranged = self.client.get(
            "/summary/categories", params={"date_from": "2024-03-05", "date_to": "2024-03-31"}
        ).json()
        self.assertEqual(ranged["totals"], {"salary": 50})
        self.assertEqual(len(ranged["breakdown"]), 8)

        half_open = self.client.get("/summary/categories", params={"date_from": "2024-03-05"}).json()
        self.assertEqual(half_open["totals"], {"salary": 150})

        all_time = self.client.get("/summary/all-time").json()
        self.assertEqual(all_time["totals"]["net_profit"], 250)
        self.assertEqual(len(all_time["recent_expenses"]), 2)

    def test_stock_adjust_and_low_stock(self):
        response = self.client.post(
            "/stock",
            json={"name": "Beef", "category": "meat", "currentQuantity": 2, "minLevel": 3},
            headers=AUTH,
        )
        self.assertEqual(response.status_code, 201, response.text)
        beef = response.json()["id"]
        self.client.post("/consumables", json={"name": "Boxes", "currentQuantity": 50, "minLevel": 10}, headers=AUTH)

        low = self.client.get("/summary/low-stock").json()
        self.assertEqual(low["count"], 1)
        self.assertEqual(low["stock"][0]["name"], "Beef")

        response = self.client.post("/stock/{}/adjust".format(beef), json={"delta": 5}, headers=AUTH)
        self.assertEqual(response.json()["currentQuantity"], 7)
        self.assertEqual(self.client.get("/stock", params={"low_only": "true"}).json()["count"], 0)

        response = self.client.post("/stock/{}/adjust".format(beef), json={"delta": -20}, headers=AUTH)
        self.assertEqual(response.json()["currentQuantity"], 0)

        response = self.client.post("/consumables/missing/adjust", json={"delta": 1}, headers=AUTH)
        self.assertEqual(response.status_code, 404)

        self.assertEqual(self.client.delete("/stock/{}".format(beef), headers=AUTH).status_code, 204)
        self.assertEqual(self.client.get("/stock").json()["count"], 0)

    def test_category_options(self):
        payload = self.client.get("/meta/categories").json()
        self.assertEqual(len(payload["expense_categories"]), 8)
        self.assertIn({"value": "cash", "label": "Cash"}, payload["revenue_sources"])


if __name__ == "__main__":
    unittest.main()
