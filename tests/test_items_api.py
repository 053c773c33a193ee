"""
Tests for companion/routers/items.py
"""
from conftest import create_item, create_user


class TestItemWrites:

    def test_admin_creates_item(self, client, admin_user):
        _, headers = admin_user
        resp = client.post("/items", json={
            "name": "Gauss Rifle",
            "type": "weapon",
            "category": "Rifle",
            "rarity": "epic",
            "weapon_stats": {"damage": 90, "ammo_type": "2mm EC"},
            "locations": ["Enclave Bunker"],
        }, headers=headers)
        assert resp.status_code == 201

        item = resp.json()
        assert item["weapon_stats"]["ammo_type"] == "2mm EC"
        assert item["farming_info"]["difficulty"] == "medium"
        assert item["average_rating"] == 0

    def test_non_admin_forbidden(self, client, regular_user):
        _, headers = regular_user
        resp = client.post("/items", json={"name": "Stimpak", "type": "aid", "category": "Medicine"}, headers=headers)
        assert resp.status_code == 403

    def test_invalid_type(self, client, admin_user):
        _, headers = admin_user
        resp = client.post("/items", json={"name": "Thing", "type": "gadget", "category": "Misc"}, headers=headers)
        assert resp.status_code == 422

    def test_duplicate_name(self, client, session_factory, admin_user):
        _, headers = admin_user
        create_item(session_factory, "Stimpak")
        resp = client.post("/items", json={"name": "Stimpak", "type": "aid", "category": "Medicine"}, headers=headers)
        assert resp.status_code == 400

    def test_admin_updates_item(self, client, session_factory, admin_user):
        _, headers = admin_user
        item_id = create_item(session_factory, "Stimpak")

        resp = client.put(f"/items/{item_id}", json={"description": "Heals 30%", "rarity": "uncommon"},
                          headers=headers)
        assert resp.status_code == 200
        assert resp.json()["description"] == "Heals 30%"
        assert resp.json()["rarity"] == "uncommon"


class TestItemReads:

    def test_list_filters(self, client, session_factory):
        create_item(session_factory, "Stimpak", level=5, description="Restores health")
        create_item(session_factory, "Lead", type="junk", category="Crafting Material", level=1)
        create_item(session_factory, "Gauss Rifle", type="weapon", category="Rifle", rarity="epic", level=45)

        names = lambda url: [i["name"] for i in client.get(url).json()["items"]]  # noqa: E731

        assert names("/items") == ["Gauss Rifle", "Lead", "Stimpak"]
        assert names("/items?type=junk") == ["Lead"]
        assert names("/items?category=craft") == ["Lead"]
        assert names("/items?rarity=epic") == ["Gauss Rifle"]
        assert names("/items?level=42") == ["Gauss Rifle"]
        assert names("/items?search=health") == ["Stimpak"]
        assert names("/items?sort_by=level&sort_order=desc") == ["Gauss Rifle", "Stimpak", "Lead"]

    def test_sort_by_rarity_tier(self, client, session_factory):
        for name, rarity in [("Epic", "epic"), ("Common", "common"), ("Legendary", "legendary"),
                             ("Rare", "rare"), ("Uncommon", "uncommon")]:
            create_item(session_factory, name, rarity=rarity)

        rarities = lambda order: [  # noqa: E731
            i["rarity"] for i in client.get(f"/items?sort_by=rarity&sort_order={order}").json()["items"]
        ]
        assert rarities("asc") == ["common", "uncommon", "rare", "epic", "legendary"]
        assert rarities("desc") == ["legendary", "epic", "rare", "uncommon", "common"]

    def test_search_is_literal(self, client, session_factory):
        create_item(session_factory, "Stimpak", description="Restores 25% health")
        create_item(session_factory, "Nuka_Cola", category="Drink")
        create_item(session_factory, "RadAway")

        names = lambda url: [i["name"] for i in client.get(url).json()["items"]]  # noqa: E731

        assert names("/items?search=%25") == ["Stimpak"]
        assert names("/items?search=_") == ["Nuka_Cola"]
        assert names("/items?category=%25") == []

    def test_filter_options(self, client, session_factory):
        create_item(session_factory, "Stimpak")
        create_item(session_factory, "Lead", type="junk", category="Crafting Material")

        body = client.get("/items/meta/filters").json()
        assert body["types"] == ["aid", "junk"]
        assert body["categories"] == ["Crafting Material", "Medicine"]
        assert body["rarities"] == ["common", "uncommon", "rare", "epic", "legendary"]

    def test_farming_checklist(self, client, session_factory):
        create_item(session_factory, "Lead", farming_info={"renewable": True, "difficulty": "easy"})
        create_item(session_factory, "Ultracite", farming_info={"renewable": True, "difficulty": "hard"})
        create_item(session_factory, "Unique Plan", farming_info={"renewable": False, "difficulty": "medium"})

        assert [i["name"] for i in client.get("/items/farming/checklist").json()["items"]] == ["Lead", "Ultracite"]
        hard = client.get("/items/farming/checklist?difficulty=hard").json()["items"]
        assert [i["name"] for i in hard] == ["Ultracite"]
        once = client.get("/items/farming/checklist?renewable=false").json()["items"]
        assert [i["name"] for i in once] == ["Unique Plan"]

    def test_missing_item(self, client):
        assert client.get("/items/00000000-0000-0000-0000-000000000000").status_code == 404


class TestRatings:

    def test_rerating_replaces(self, client, session_factory, regular_user):
        _, headers = regular_user
        item_id = create_item(session_factory, "Stimpak")

        assert client.post(f"/items/{item_id}/rate", json={"rating": 2}, headers=headers).json()["average_rating"] == 2
        assert client.post(f"/items/{item_id}/rate", json={"rating": 5}, headers=headers).json()["average_rating"] == 5

        item = client.get(f"/items/{item_id}").json()
        assert len(item["user_ratings"]) == 1
        assert item["user_ratings"][0]["username"] == "vaultdweller"

    def test_average_across_users(self, client, session_factory, regular_user):
        _, headers = regular_user
        _, other = create_user(session_factory, username="second_rater")
        item_id = create_item(session_factory, "Stimpak")

        client.post(f"/items/{item_id}/rate", json={"rating": 4}, headers=headers)
        resp = client.post(f"/items/{item_id}/rate", json={"rating": 5}, headers=other)
        assert resp.json()["average_rating"] == 4.5

    def test_out_of_range(self, client, session_factory, regular_user):
        _, headers = regular_user
        item_id = create_item(session_factory, "Stimpak")
        assert client.post(f"/items/{item_id}/rate", json={"rating": 6}, headers=headers).status_code == 422
