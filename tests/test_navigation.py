from app.config.acl_config import GOOGLE_ANALYTICS_URL
from app.modules.navigation.service import build_navigation
from conftest import bearer


def test_brand_sidebar_groups_and_active_item():
    nav = build_navigation("brand", "/brand/products/42")
    assert [i.path for i in nav.top] == ["/brand/products", "/brand/links"]
    assert [i.path for i in nav.bottom] == ["/profile", "/logout"]
    assert [i.active for i in nav.top] == [True, False]
    assert not any(i.active for i in nav.bottom)


def test_bottom_items_need_exact_path():
    assert build_navigation("cep", "/profile").bottom[0].active is True
    assert build_navigation("cep", "/profile/edit").bottom[0].active is False


def test_external_items_never_active():
    nav = build_navigation("super_admin", GOOGLE_ANALYTICS_URL)
    analytics = next(i for i in nav.top if i.external)
    assert analytics.path == GOOGLE_ANALYTICS_URL
    assert analytics.active is False


def test_no_role_no_items():
    nav = build_navigation(None, "/cover")
    assert nav.top == [] and nav.bottom == []
    assert nav.default_route == "/profile"


def test_navigation_endpoint(client, super_admin):
    response = client.get("/api/navigation", params={"path": "/cover"}, headers=bearer(super_admin.token))
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "super_admin"
    assert body["top"][0] == {
        "path": "/cover", "label": "Cover", "icon": "image",
        "position": "top", "external": False, "active": True,
    }
    assert [i["path"] for i in body["bottom"]] == ["/profile", "/logout"]


def test_navigation_endpoint_for_profile_without_navigation_role(client, fake_supabase):
    expert = fake_supabase.add_account("expert@ilpdg.it", role="expert")
    body = client.get("/api/navigation", headers=bearer(expert.token)).json()
    assert body["role"] is None
    assert body["top"] == [] and body["bottom"] == []


def test_navigation_requires_session(client):
    response = client.get("/api/navigation")
    assert response.status_code == 401
    assert response.json() == {"error": "Non autenticato"}
