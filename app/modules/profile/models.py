# Profile (see app/modules/auth/models.py) and personal API tokens

"""
Table: profile_token
- id: UUID (Primary Key)
- profile_id: UUID (Foreign Key -> profile.id)
- nome: TEXT (label chosen by the user)
- token: TEXT (opaque bearer credential for the products sync API, unique)
- created_at: TIMESTAMP

The token value is shown once when created and never listed afterwards.
Profile images live under profiles/{profile_id}/ in the images bucket.
"""
