# Selling links (external purchase links) and their attachments

"""
Table: selling_links
- id: UUID (Primary Key)
- name: TEXT (nullable)
- link: TEXT (nullable, external URL)
- descrizione: TEXT (nullable)
- img_url: TEXT (nullable, public URL under selling-links/)
- calltoaction: TEXT (nullable, button label)
- created_at: TIMESTAMP

Table: link_category_sellinglink (pivot)
- category_id: UUID (Foreign Key -> products_categories.id)
- selling_link_id: UUID (Foreign Key -> selling_links.id)

Table: link_items_sellinglinks (pivot)
- item_id: UUID (Foreign Key -> products_categories_items.id)
- sellinglink_id: UUID (Foreign Key -> selling_links.id)

Note the two pivots spell the link column differently. Deleting a link
removes its pivot rows first.
"""
