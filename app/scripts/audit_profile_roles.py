"""
Audit Profile Roles Script
Lists profiles whose stored role grants no backoffice navigation (anything
outside super_admin / brand / cep), grouped by role. Read-only.

    python -m app.scripts.audit_profile_roles
"""

import sys
from collections import defaultdict
from typing import Dict, List

from app.core.acl import is_valid_role
from app.database.supabase_client import get_supabase
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_profiles_without_navigation(supabase: Client) -> Dict[str, List[dict]]:
    """Profiles grouped by role, keeping only roles that open no backoffice screen"""
    result = supabase.table("profile")\
        .select("id, user_id, nome, role")\
        .order("created_at", desc=False)\
        .execute()

    grouped: Dict[str, List[dict]] = defaultdict(list)
    for profile in result.data or []:
        role = profile.get("role")
        if not is_valid_role(role):
            grouped[role or "(none)"].append(profile)
    return dict(grouped)


def main():
    try:
        supabase = get_supabase()
        logger.info("Auditing profile roles...")
        grouped = find_profiles_without_navigation(supabase)

        if not grouped:
            logger.info("Every profile has a navigation role")
            return

        for role, profiles in sorted(grouped.items()):
            logger.info(f"Role {role}: {len(profiles)} profile(s)")
            for profile in profiles:
                logger.info(f"  {profile.get('id')} {profile.get('nome') or ''} (user {profile.get('user_id')})")

        logger.info(f"Total: {sum(len(p) for p in grouped.values())} profiles without backoffice navigation")

    except Exception as e:
        logger.error(f"Error during audit: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
