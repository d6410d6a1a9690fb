# Products owned by brand profiles and their images

"""
Table: products
- id: UUID (Primary Key)
- profile_id: UUID (Foreign Key -> profile.id, owner)
- name: TEXT (not empty)
- description: TEXT (nullable)
- price: NUMERIC (nullable, >= 0)
- price_currency: TEXT (nullable, e.g. EUR)
- selling_url: TEXT (nullable)
- fee_perc: NUMERIC (nullable, 0..100)
- data: JSONB (nullable)
- created_at: TIMESTAMP
- edited_at: TIMESTAMP (nullable)

Table: product_images
- id: UUID (Primary Key)
- product_id: UUID (Foreign Key -> products.id)
- img_url: TEXT (public URL under products/{product_id}/)
- created_at: TIMESTAMP

Every read and write is scoped to the owner's profile_id. Deleting a product
removes its image files, then the image rows, then the product.
"""
