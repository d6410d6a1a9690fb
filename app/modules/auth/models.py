# Supabase Auth + profile
# Authentication uses Supabase's built-in auth.users table. The backoffice
# keeps its own user record in the "profile" table, one row per auth user.

"""
Table: profile
- id: UUID (Primary Key)
- user_id: UUID (auth.users.id, unique)
- nome: TEXT (display name, defaults to the e-mail local part at registration)
- bio: TEXT (nullable)
- img_url: TEXT (nullable, public URL in the images bucket)
- role: TEXT (super_admin | brand | cep | admin | expert)
- created_at: TIMESTAMP
- edited_at: TIMESTAMP (nullable)

Only super_admin, brand and cep grant backoffice navigation; admin and expert
are stored roles with no screens.

Supabase Auth calls used:
- auth.sign_in_with_password() - e-mail/password login
- auth.sign_in_with_otp() / auth.verify_otp() - registration with a 6 digit code
- auth.set_session() - adopt a token pair from a magic or recovery link
- auth.get_user() - resolve the user behind an access token
- auth.reset_password_for_email() - recovery e-mail
- auth.admin.* - password updates, sign out, user management
"""
