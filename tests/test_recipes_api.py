"""API tests for recipes: ownership enforcement, admin bypass, optional auth, and ratings."""

import unittest

from recipe_api.core.database import SessionLocal
from recipe_api.models import Recipe

from support import API, ApiTestCase


def _recipe_rows(recipe_id: int) -> int:
    db = SessionLocal()
    try:
        return db.query(Recipe).filter(Recipe.id == recipe_id).count()
    finally:
        db.close()


class TestRecipeOwnership(ApiTestCase):
    """Alice and Bob each own a recipe; only owners (or admins) may change them."""

    def setUp(self) -> None:
        super().setUp()
        self.alice = self.client()
        self.register(self.alice, "alice", "a@x.test")
        self.bob = self.client()
        self.register(self.bob, "bob", "b@x.test")
        self.alice_recipe = self.create_recipe(self.alice, "Pancakes")
        self.bob_recipe = self.create_recipe(self.bob, "Waffles")

    def test_delete_someone_elses_recipe_is_forbidden(self) -> None:
        resp = self.alice.delete(f"{API}/recipes/{self.bob_recipe}")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Forbidden: You can only modify your own recipes")
        self.assertEqual(_recipe_rows(self.bob_recipe), 1)

    def test_delete_own_recipe_then_again(self) -> None:
        resp = self.alice.delete(f"{API}/recipes/{self.alice_recipe}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Recipe deleted successfully")
        self.assertEqual(_recipe_rows(self.alice_recipe), 0)

        again = self.alice.delete(f"{API}/recipes/{self.alice_recipe}")
        self.assertEqual(again.status_code, 404)
        self.assertEqual(again.json()["message"], "Recipe not found")

    def test_missing_recipe_is_not_found_not_forbidden(self) -> None:
        resp = self.bob.delete(f"{API}/recipes/9999")
        self.assertEqual(resp.status_code, 404)

    def test_update_title_owner_only(self) -> None:
        denied = self.bob.put(
            f"{API}/recipes/{self.alice_recipe}/title", json={"title": "Bob's now"}
        )
        self.assertEqual(denied.status_code, 403)
        ok = self.alice.put(
            f"{API}/recipes/{self.alice_recipe}/title", json={"title": "Fluffy pancakes"}
        )
        self.assertEqual(ok.status_code, 200)
        detail = self.client().get(f"{API}/recipes/{self.alice_recipe}").json()["data"]
        self.assertEqual(detail["title"], "Fluffy pancakes")

    def test_blank_title_rejected(self) -> None:
        resp = self.alice.put(f"{API}/recipes/{self.alice_recipe}/title", json={"title": "   "})
        self.assertEqual(resp.status_code, 400)

    def test_unauthenticated_delete_is_401(self) -> None:
        resp = self.client().delete(f"{API}/recipes/{self.alice_recipe}")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(
            resp.json(), {"success": False, "message": "Access denied. Please login to continue."}
        )

    def test_admin_deletes_any_recipe(self) -> None:
        self.create_admin("root", "root@x.test")
        admin = self.client()
        self.login(admin, "root@x.test")
        resp = admin.delete(f"{API}/recipes/{self.bob_recipe}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(_recipe_rows(self.bob_recipe), 0)

    def test_admin_on_missing_recipe_is_not_found(self) -> None:
        self.create_admin("root", "root@x.test")
        admin = self.client()
        self.login(admin, "root@x.test")
        resp = admin.delete(f"{API}/recipes/9999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Recipe not found")

    def test_list_mine(self) -> None:
        resp = self.alice.get(f"{API}/recipes/mine")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([r["recipe_id"] for r in resp.json()["data"]], [self.alice_recipe])


class TestRecipeViewerFlags(ApiTestCase):
    """GET /recipes/{id} is public; can_edit depends on who is looking."""

    def setUp(self) -> None:
        super().setUp()
        self.alice = self.client()
        self.register(self.alice, "alice", "a@x.test")
        self.recipe_id = self.create_recipe(self.alice, "Pancakes")

    def test_anonymous_viewer(self) -> None:
        resp = self.client().get(f"{API}/recipes/{self.recipe_id}")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertFalse(data["can_edit"])
        self.assertFalse(data["is_favorite"])

    def test_garbage_cookie_is_treated_as_anonymous(self) -> None:
        resp = self.client().get(
            f"{API}/recipes/{self.recipe_id}", headers={"Cookie": "recipe_session=garbage"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["data"]["can_edit"])

    def test_owner_can_edit(self) -> None:
        data = self.alice.get(f"{API}/recipes/{self.recipe_id}").json()["data"]
        self.assertTrue(data["can_edit"])

    def test_other_user_cannot_edit(self) -> None:
        bob = self.client()
        self.register(bob, "bob", "b@x.test")
        data = bob.get(f"{API}/recipes/{self.recipe_id}").json()["data"]
        self.assertFalse(data["can_edit"])

    def test_missing_recipe(self) -> None:
        resp = self.client().get(f"{API}/recipes/9999")
        self.assertEqual(resp.status_code, 404)


class TestRecipeRatings(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        owner = self.client()
        self.register(owner, "owner", "owner@x.test")
        self.recipe_id = self.create_recipe(owner, "Pancakes")

    def _rater(self, n: int):
        client = self.client()
        self.register(client, f"rater{n}", f"rater{n}@x.test")
        return client

    def test_unrated_recipe_summary(self) -> None:
        resp = self.client().get(f"{API}/recipes/{self.recipe_id}/ratings")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["average_rating"], 0.0)
        self.assertEqual(data["total_ratings"], 0)

    def test_average_rounds_half_up(self) -> None:
        for n, value in enumerate((4, 4, 4, 5)):
            resp = self._rater(n).post(
                f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": value}
            )
            self.assertEqual(resp.status_code, 201)
        data = self.client().get(f"{API}/recipes/{self.recipe_id}/ratings").json()["data"]
        self.assertEqual(data["average_rating"], 4.3)
        self.assertEqual(data["total_ratings"], 4)

    def test_rating_again_replaces(self) -> None:
        rater = self._rater(0)
        rater.post(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 2})
        rater.post(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 5, "review": "Better"})
        data = self.client().get(f"{API}/recipes/{self.recipe_id}/ratings").json()["data"]
        self.assertEqual(data["total_ratings"], 1)
        self.assertEqual(data["ratings"][0]["rating"], 5)
        self.assertEqual(data["ratings"][0]["review_text"], "Better")

    def test_rating_out_of_range(self) -> None:
        resp = self._rater(0).post(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 6})
        self.assertEqual(resp.status_code, 400)

    def test_update_and_delete_own_rating(self) -> None:
        rater = self._rater(0)
        missing = rater.put(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 3})
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(
            missing.json()["message"], "Rating not found. You must create a rating first."
        )
        rater.post(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 2})
        self.assertEqual(
            rater.put(f"{API}/recipes/{self.recipe_id}/ratings", json={"rating": 3}).status_code,
            200,
        )
        mine = rater.get(f"{API}/users/ratings").json()["data"]
        self.assertEqual(mine[0]["rating"], 3)
        self.assertEqual(mine[0]["recipe_title"], "Pancakes")
        self.assertEqual(rater.delete(f"{API}/recipes/{self.recipe_id}/ratings").status_code, 200)
        self.assertEqual(rater.delete(f"{API}/recipes/{self.recipe_id}/ratings").status_code, 404)

    def test_rate_missing_recipe(self) -> None:
        resp = self._rater(0).post(f"{API}/recipes/9999/ratings", json={"rating": 3})
        self.assertEqual(resp.status_code, 404)


class TestCuisines(ApiTestCase):
    def test_admin_only_create_and_delete(self) -> None:
        user = self.client()
        self.register(user, "alice", "a@x.test")
        denied = user.post(f"{API}/cuisines", json={"name": "Italian"})
        self.assertEqual(denied.status_code, 403)

        self.create_admin("root", "root@x.test")
        admin = self.client()
        self.login(admin, "root@x.test")
        created = admin.post(f"{API}/cuisines", json={"name": "Italian"})
        self.assertEqual(created.status_code, 201)
        cuisine_id = created.json()["data"]["cuisine_id"]
        self.assertEqual(admin.post(f"{API}/cuisines", json={"name": "Italian"}).status_code, 409)

        listing = self.client().get(f"{API}/cuisines").json()
        self.assertEqual(listing["count"], 1)

        self.assertEqual(admin.delete(f"{API}/cuisines/{cuisine_id}").status_code, 200)
        self.assertEqual(admin.delete(f"{API}/cuisines/{cuisine_id}").status_code, 404)

    def test_detail_lists_recipes(self) -> None:
        self.create_admin("root", "root@x.test")
        admin = self.client()
        self.login(admin, "root@x.test")
        cuisine_id = admin.post(f"{API}/cuisines", json={"name": "French"}).json()["data"]["cuisine_id"]
        user = self.client()
        self.register(user, "alice", "a@x.test")
        created = user.post(
            f"{API}/recipes",
            json={"title": "Crepes", "description": "Thin", "cuisine_id": cuisine_id},
        )
        self.assertEqual(created.status_code, 201)

        detail = self.client().get(f"{API}/cuisines/{cuisine_id}")
        self.assertEqual(detail.status_code, 200)
        data = detail.json()["data"]
        self.assertEqual(data["name"], "French")
        self.assertEqual(data["recipe_count"], 1)
        self.assertEqual(data["recipes"][0]["title"], "Crepes")
        self.assertEqual(self.client().get(f"{API}/cuisines/9999").status_code, 404)

    def test_update_admin_only(self) -> None:
        self.create_admin("root", "root@x.test")
        admin = self.client()
        self.login(admin, "root@x.test")
        italian = admin.post(f"{API}/cuisines", json={"name": "Italian"}).json()["data"]["cuisine_id"]
        admin.post(f"{API}/cuisines", json={"name": "Greek"})

        user = self.client()
        self.register(user, "alice", "a@x.test")
        denied = user.put(f"{API}/cuisines/{italian}", json={"name": "Tuscan"})
        self.assertEqual(denied.status_code, 403)

        renamed = admin.put(f"{API}/cuisines/{italian}", json={"name": "Tuscan"})
        self.assertEqual(renamed.status_code, 200)
        self.assertEqual(renamed.json()["message"], "Cuisine updated successfully")
        self.assertEqual(renamed.json()["data"]["name"], "Tuscan")

        clash = admin.put(f"{API}/cuisines/{italian}", json={"name": "Greek"})
        self.assertEqual(clash.status_code, 409)
        self.assertEqual(admin.put(f"{API}/cuisines/9999", json={"name": "Nordic"}).status_code, 404)
        self.assertEqual(admin.put(f"{API}/cuisines/{italian}", json={"name": "  "}).status_code, 400)

    def test_recipe_with_unknown_cuisine(self) -> None:
        user = self.client()
        self.register(user, "alice", "a@x.test")
        resp = user.post(
            f"{API}/recipes", json={"title": "Soup", "description": "Hot", "cuisine_id": 42}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Unknown cuisine_id")


class TestRecipesWithTokenStrategy(ApiTestCase):
    auth_strategy = "token"

    def test_ownership_with_bearer_tokens(self) -> None:
        client = self.client()
        alice = self.auth_headers(self.register(client, "alice", "a@x.test")["access_token"])
        bob = self.auth_headers(self.register(client, "bob", "b@x.test")["access_token"])
        recipe_id = self.create_recipe(client, "Pancakes", headers=alice)

        self.assertEqual(client.delete(f"{API}/recipes/{recipe_id}", headers=bob).status_code, 403)
        detail = client.get(f"{API}/recipes/{recipe_id}", headers=alice).json()["data"]
        self.assertTrue(detail["can_edit"])
        self.assertEqual(client.delete(f"{API}/recipes/{recipe_id}", headers=alice).status_code, 200)
        self.assertEqual(client.delete(f"{API}/recipes/{recipe_id}", headers=alice).status_code, 404)


if __name__ == "__main__":
    unittest.main()
