import re
import time
import unicodedata
import logging
from typing import List, Optional

from supabase import Client

from app.config import settings

logger = logging.getLogger(__name__)

# Key prefixes used inside the bucket
PRODUCTS_PREFIX = "products"
COVER_PREFIX = "cover"
PROFILES_PREFIX = "profiles"
SELLING_LINKS_PREFIX = "selling-links"
CATEGORIES_PREFIX = "categories"


def sanitize_file_name(name: str) -> str:
    """
    Make an uploaded file name safe for a storage key.

    Diacritics are stripped, anything outside [a-zA-Z0-9._-] becomes a dash,
    the result is lowercased and the base name keeps at most its last 100
    characters while the extension is preserved.
    """
    without_diacritics = re.sub(r"[\u0300-\u036f]", "", unicodedata.normalize("NFKD", name))
    safe = re.sub(r"[^a-zA-Z0-9._-]", "-", without_diacritics)
    safe = re.sub(r"-+", "-", safe)
    safe = re.sub(r"^-+", "", safe)
    safe = re.sub(r"\.+$", "", safe)
    safe = safe.lower()
    match = re.match(r"^(.*?)(\.[a-z0-9]+)$", safe)
    base = match.group(1) if match else safe
    ext = match.group(2) if match else ""
    return f"{base[-100:]}{ext}"


def build_object_path(prefix: str, file_name: str) -> str:
    """e.g. products/<id>/1717000000000-photo.jpg"""
    return f"{prefix}/{int(time.time() * 1000)}-{sanitize_file_name(file_name)}"


def public_url_base() -> str:
    return f"{settings.supabase_url.rstrip('/')}/storage/v1/object/public/{settings.storage_bucket}/"


def public_url_for(path: str) -> str:
    return f"{public_url_base()}{path}"


def extract_storage_path(public_url: Optional[str]) -> Optional[str]:
    """Reverse public_url_for. None when the URL is empty or not in our bucket."""
    if not public_url:
        return None
    base = public_url_base()
    if public_url.startswith(base):
        return public_url[len(base):]
    return None


def is_image_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith("image/")


class StorageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.bucket_name = settings.storage_bucket

    def upload_file(self, path: str, file_content: bytes, content_type: str) -> str:
        """Upload (overwriting) and return the public URL"""
        self.supabase.storage.from_(self.bucket_name).upload(
            path,
            file_content,
            {"cache-control": "3600", "upsert": "true", "content-type": content_type},
        )
        return public_url_for(path)

    def remove_paths(self, paths: List[str]) -> None:
        if not paths:
            return
        self.supabase.storage.from_(self.bucket_name).remove(paths)

    def remove_public_urls(self, urls: List[Optional[str]]) -> List[str]:
        """Delete the files behind public URLs; foreign URLs are skipped. Returns removed paths."""
        paths = [p for p in (extract_storage_path(u) for u in urls) if p]
        self.remove_paths(paths)
        if paths:
            logger.info(f"Removed {len(paths)} object(s) from storage bucket {self.bucket_name}")
        return paths
