# Supabase table: usuarios (name configurable via USERS_TABLE)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

usuarios:
- id: uuid (primary key, references auth.users.id)
- username: text (unique, not null) - stored upper-case
- name: text (not null)
- is_super_user: boolean (not null, default: false)
- is_active: boolean (not null, default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Password hashes live in the same table but are never selected here;
authentication is handled outside this service.
"""
