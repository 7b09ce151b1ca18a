"""Tests for the health endpoint and the root route."""

import unittest

from support import API, ApiTestCase


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client().get(f"{API}/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertIn(body["auth_strategy"], ("session", "token"))

    def test_root_lists_endpoints(self) -> None:
        body = self.client().get("/").json()
        self.assertTrue(body["success"])
        self.assertEqual(body["endpoints"]["recipes"], f"{API}/recipes")


if __name__ == "__main__":
    unittest.main()
