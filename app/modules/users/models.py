# Backoffice user management: auth.users (Supabase Auth, admin API) + profile
# This file documents the expected data; operations live in service.py

"""
auth.users (managed by Supabase Auth, reached through auth.admin):
- id, email, user_metadata {nome, bio}, banned_until, email_confirmed_at, ...

profile (see app/modules/auth/models.py):
- user_id references auth.users.id
- role defaults to "expert" when created from the users screen

Users created here start unconfirmed and receive an invite e-mail that lands
on {site_url}/auth/callback. Banning sets ban_duration to 876000h (about a
century); unbanning sets it to "none".
"""
