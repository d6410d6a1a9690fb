# Homepage cover

"""
Table: products_cover_items
- id: UUID (Primary Key)
- product_id: UUID (Foreign Key -> products.id)
- name: TEXT (nullable)
- image_url: TEXT (nullable, public URL under cover/)
- is_public: BOOLEAN (default true)
- order: INTEGER (1-based display position, nullable)
- created_at: TIMESTAMP

Listed by order ascending with nulls last, then newest first. New entries are
appended after the current highest order.
"""
