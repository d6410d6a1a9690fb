import pytest

from fastapi import HTTPException

from app.modules.products.service import (
    build_pagination, page_range, parse_fee_perc, parse_limit, parse_page, parse_price
)
from conftest import bearer

API_TOKEN = "tok-123"


@pytest.fixture
def token_owner(fake_supabase, brand):
    fake_supabase.seed("profile_token", {"profile_id": brand.profile["id"], "nome": "Shop", "token": API_TOKEN})
    return brand.profile


@pytest.fixture
def products(fake_supabase, token_owner):
    rows = fake_supabase.seed("products", *[
        {"profile_id": token_owner["id"], "name": f"Prodotto {n}", "description": "pasta" if n % 2 else "vino"}
        for n in range(5)
    ])
    fake_supabase.seed("products", {"id": "foreign", "profile_id": "other", "name": "Altro"})
    return rows


def test_page_and_limit_parsing():
    assert parse_page(None) == 1
    assert parse_page("3") == 3
    assert parse_page("-2") == 1
    assert parse_page("abc") == 1
    assert parse_limit(None) == 100
    assert parse_limit("0") == 1
    assert parse_limit("500") == 100
    assert parse_limit("x") == 100
    assert parse_limit("25") == 25


def test_pagination_arithmetic():
    assert page_range(3, 20) == (40, 59)
    assert build_pagination(2, 2, 5) == {
        "current_page": 2, "total_pages": 3, "total_count": 5,
        "per_page": 2, "has_next": True, "has_prev": True,
    }
    assert build_pagination(1, 100, 0)["total_pages"] == 0
    assert build_pagination(1, 100, 0)["has_next"] is False


def test_non_finite_numbers_are_rejected():
    for value in ("inf", "-Infinity", float("inf"), "nan"):
        with pytest.raises(HTTPException):
            parse_price(value)
        with pytest.raises(HTTPException):
            parse_fee_perc(value)
    assert parse_price("0") == 0


def test_missing_or_malformed_header(client):
    response = client.get("/api/products")
    assert response.status_code == 401
    assert response.json() == {"error": "Token di autorizzazione mancante"}
    response = client.get("/api/products", headers={"Authorization": "Token abc"})
    assert response.json() == {"error": "Token di autorizzazione mancante"}


def test_unknown_token(client, token_owner):
    response = client.get("/api/products", headers=bearer("wrong"))
    assert response.status_code == 401
    assert response.json() == {"error": "Token non valido"}


def test_list_paginates_own_products_newest_first(client, products):
    response = client.get("/api/products", params={"page": "2", "limit": "2"}, headers=bearer(API_TOKEN))
    assert response.status_code == 200
    body = response.json()
    assert [p["name"] for p in body["products"]] == ["Prodotto 2", "Prodotto 1"]
    assert body["pagination"] == {
        "current_page": 2, "total_pages": 3, "total_count": 5,
        "per_page": 2, "has_next": True, "has_prev": True,
    }
    assert set(body["products"][0]) == {
        "id", "name", "description", "price", "price_currency", "selling_url", "fee_perc", "created_at", "edited_at"
    }


def test_list_search_matches_name_or_description(client, products):
    body = client.get("/api/products", params={"search": "VINO"}, headers=bearer(API_TOKEN)).json()
    assert body["pagination"]["total_count"] == 3
    assert all(p["description"] == "vino" for p in body["products"])


def test_search_text_with_commas_and_quotes(client, fake_supabase, token_owner):
    fake_supabase.seed(
        "products",
        {"profile_id": token_owner["id"], "name": "Caffè, crema \"bio\"", "description": ""},
        {"profile_id": token_owner["id"], "name": "Caffè", "description": "crema"},
    )
    response = client.get("/api/products", params={"search": "caffè, crema \"bio"}, headers=bearer(API_TOKEN))
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["products"]] == ["Caffè, crema \"bio\""]


def test_page_past_the_end_is_empty(client, products):
    body = client.get("/api/products", params={"page": "9", "limit": "2"}, headers=bearer(API_TOKEN)).json()
    assert body["products"] == []
    assert body["pagination"]["has_next"] is False


def test_create_validation(client, token_owner):
    cases = [
        ({}, "Il campo 'name' è obbligatorio"),
        ({"name": "   "}, "Il campo 'name' è obbligatorio"),
        ({"name": 42}, "Il campo 'name' è obbligatorio"),
        ({"name": "A", "price": -1}, "Il prezzo deve essere un numero valido >= 0"),
        ({"name": "A", "price": "abc"}, "Il prezzo deve essere un numero valido >= 0"),
        ({"name": "A", "fee_perc": 101}, "La percentuale fee deve essere tra 0 e 100"),
        ({"name": "A", "price": "Infinity"}, "Il prezzo deve essere un numero valido >= 0"),
        ({"name": "A", "fee_perc": "NaN"}, "La percentuale fee deve essere tra 0 e 100"),
    ]
    for body, message in cases:
        response = client.post("/api/products", json=body, headers=bearer(API_TOKEN))
        assert response.status_code == 400, body
        assert response.json() == {"error": message}


def test_create_product_for_token_owner(client, fake_supabase, token_owner):
    response = client.post("/api/products", headers=bearer(API_TOKEN), json={
        "name": "  Olio EVO ", "price": "12.5", "fee_perc": 0, "price_currency": "EUR"
    })
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Olio EVO"
    assert body["price"] == 12.5
    assert body["fee_perc"] == 0
    assert "profile_id" not in body
    assert fake_supabase.tables["products"][0]["profile_id"] == token_owner["id"]


def test_get_is_owner_scoped(client, products):
    own = client.get(f"/api/products/{products[0]['id']}", headers=bearer(API_TOKEN))
    assert own.json()["name"] == "Prodotto 0"
    foreign = client.get("/api/products/foreign", headers=bearer(API_TOKEN))
    assert foreign.status_code == 404
    assert foreign.json() == {"error": "Prodotto non trovato"}


def test_update_only_sent_fields(client, fake_supabase, products):
    product_id = products[0]["id"]
    response = client.put(f"/api/products/{product_id}", headers=bearer(API_TOKEN), json={"price": 9})
    assert response.status_code == 200
    body = response.json()
    assert body["price"] == 9
    assert body["name"] == "Prodotto 0"
    assert body["edited_at"]


def test_update_can_clear_price(client, fake_supabase, products):
    fake_supabase.tables["products"][0]["price"] = 5
    response = client.put(f"/api/products/{products[0]['id']}", headers=bearer(API_TOKEN), json={"price": None})
    assert response.json()["price"] is None


def test_update_rejects_empty_name(client, products):
    response = client.put(f"/api/products/{products[0]['id']}", headers=bearer(API_TOKEN), json={"name": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Il campo 'name' deve essere una stringa non vuota"}


def test_update_foreign_product(client, fake_supabase, products):
    response = client.put("/api/products/foreign", headers=bearer(API_TOKEN), json={"name": "Mio"})
    assert response.status_code == 404
    assert response.json() == {"error": "Prodotto non trovato o non autorizzato"}
    assert fake_supabase.tables["products"][-1]["name"] == "Altro"
