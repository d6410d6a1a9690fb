import pytest

from app.scripts import audit_profile_roles
from app.scripts.audit_profile_roles import find_profiles_without_navigation


def test_groups_profiles_without_navigation_role(fake_supabase):
    fake_supabase.seed(
        "profile",
        {"nome": "anna", "role": "super_admin"},
        {"nome": "marco", "role": "expert"},
        {"nome": "luca", "role": None},
        {"nome": "sara", "role": "expert"},
        {"nome": "paola", "role": "admin"},
        {"nome": "bea", "role": "cep"},
    )
    grouped = find_profiles_without_navigation(fake_supabase)
    assert sorted(grouped) == ["(none)", "admin", "expert"]
    assert [p["nome"] for p in grouped["expert"]] == ["marco", "sara"]
    assert grouped["(none)"][0]["nome"] == "luca"


def test_nothing_to_report(fake_supabase):
    fake_supabase.seed("profile", {"nome": "anna", "role": "brand"})
    assert find_profiles_without_navigation(fake_supabase) == {}


def test_main_exits_on_backend_error(fake_supabase, monkeypatch):
    fake_supabase.failures[("profile", "select")] = RuntimeError("connection refused")
    monkeypatch.setattr(audit_profile_roles, "get_supabase", lambda: fake_supabase)
    with pytest.raises(SystemExit) as exc:
        audit_profile_roles.main()
    assert exc.value.code == 1
