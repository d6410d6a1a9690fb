from conftest import bearer


def test_create_requires_product(client, super_admin):
    response = client.post("/api/cover", headers=bearer(super_admin.token), json={"name": "Hero"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing product_id"}


def test_first_cover_item_gets_order_one(client, fake_supabase, super_admin):
    response = client.post("/api/cover", headers=bearer(super_admin.token), json={"product_id": "p1"})
    assert response.status_code == 201
    assert response.json()["order"] == 1
    assert response.json()["is_public"] is True


def test_new_cover_item_goes_after_highest_order(client, fake_supabase, super_admin):
    fake_supabase.seed(
        "products_cover_items",
        {"product_id": "p1", "order": 1}, {"product_id": "p2", "order": 3}, {"product_id": "p3", "order": None},
    )
    response = client.post("/api/cover", headers=bearer(super_admin.token), json={"product_id": "p4", "is_public": False})
    assert response.json()["order"] == 4
    assert response.json()["is_public"] is False


def test_list_orders_by_position_nulls_last(client, fake_supabase, super_admin):
    fake_supabase.seed(
        "products_cover_items",
        {"id": "a", "order": 2}, {"id": "b", "order": None}, {"id": "c", "order": 1},
    )
    body = client.get("/api/cover", headers=bearer(super_admin.token)).json()
    assert [row["id"] for row in body] == ["c", "a", "b"]


def test_update_partial(client, fake_supabase, super_admin):
    fake_supabase.seed("products_cover_items", {"id": "a", "name": "Hero", "order": 1, "is_public": True})
    response = client.put("/api/cover", headers=bearer(super_admin.token), json={"id": "a", "is_public": False})
    assert response.status_code == 200
    assert response.json()["name"] == "Hero"
    assert response.json()["is_public"] is False


def test_update_requires_id(client, super_admin):
    assert client.put("/api/cover", headers=bearer(super_admin.token), json={"name": "x"}).json() == {"error": "Missing id"}


def test_delete(client, fake_supabase, super_admin):
    fake_supabase.seed("products_cover_items", {"id": "a"}, {"id": "b"})
    assert client.delete("/api/cover", params={"id": "a"}, headers=bearer(super_admin.token)).json() == {"ok": True}
    assert [row["id"] for row in fake_supabase.tables["products_cover_items"]] == ["b"]


def test_reorder_writes_one_based_positions(client, fake_supabase, super_admin):
    fake_supabase.seed("products_cover_items", {"id": "a", "order": 1}, {"id": "b", "order": 2}, {"id": "c", "order": 3})
    response = client.post("/api/cover/reorder", headers=bearer(super_admin.token), json={"ids": ["c", "a", "b"]})
    assert response.status_code == 200
    orders = {row["id"]: row["order"] for row in fake_supabase.tables["products_cover_items"]}
    assert orders == {"c": 1, "a": 2, "b": 3}


def test_cover_is_super_admin_only(client, cep):
    assert client.get("/api/cover", headers=bearer(cep.token)).status_code == 403
