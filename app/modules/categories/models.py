# Categories and category items

"""
Table: products_categories
- id: UUID (Primary Key)
- name: TEXT
- slug: TEXT (nullable, lowercase words joined by dashes)
- is_public: BOOLEAN (default true)
- expert_id: UUID (Foreign Key -> profile.id, nullable; must be an expert with an image)
- category_description: TEXT (nullable)
- created_at: TIMESTAMP

Table: products_categories_items
- id: UUID (Primary Key)
- category_id: UUID (Foreign Key -> products_categories.id, nullable)
- name: TEXT
- slug: TEXT (nullable)
- description: TEXT (nullable)
- image_url: TEXT (nullable)
- is_public: BOOLEAN (default true)
- created_at: TIMESTAMP

Deleting a category deletes its items first, then the category row.
"""
