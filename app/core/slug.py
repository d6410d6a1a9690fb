import re
import unicodedata

_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def generate_slug(text: str) -> str:
    """URL-friendly slug: "Caffè Crema  Bio" -> "caffe-crema-bio" """
    if not text:
        return ""
    slug = re.sub(r"[\u0300-\u036f]", "", unicodedata.normalize("NFKD", text))
    slug = slug.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    """Lowercase letters, digits and single inner hyphens only"""
    if not slug:
        return False
    return bool(_SLUG_RE.match(slug))
