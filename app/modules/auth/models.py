# Supabase Auth
# Tokens are issued and validated by Supabase's built-in authentication;
# this service only reads the user behind a bearer token.

"""
Supabase Auth provides:
- auth.get_user(jwt) - Get current user from JWT token

The auth user id is the primary key of the usuarios directory table.
app_metadata.type == "super_user" marks a super user regardless of the
directory row; app_metadata is set server-side and cannot be changed by users.
"""
