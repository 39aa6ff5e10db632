"""
Draft document helpers.

Shallow merge of progress patches into a stored draft and normalization of
image URLs embedded in draft image entries.

Dependencies: re (stdlib)
System role: Pure draft manipulation for the session lifecycle
"""

import re
from typing import Any

IMAGE_URL_KEYS = ("imageUrl", "image_url", "src")
DISCOURAGED_PATCH_KEYS = ("session_id", "started_at", "context")


def merge_draft(stored: dict[str, Any] | None, patch: dict[str, Any] | None) -> dict[str, Any]:
    """
    Shallow-merge a patch into a stored draft.

    Top-level keys of the patch replace the same keys of the stored draft;
    keys absent from the patch are preserved. Neither input is mutated.
    """
    merged = dict(stored or {})
    merged.update(patch or {})
    return merged


def normalize_image_url(value: Any, prefix: str = "/images_v1/") -> Any:
    """Reduce an image URL to the path starting at ``prefix``."""
    if not isinstance(value, str):
        return value
    trimmed = value.strip()
    if not trimmed or trimmed.startswith(prefix):
        return trimmed or value
    match = re.search(re.escape(prefix) + r"[^?#]+(?:\?[^#]*)?", trimmed)
    return match.group(0) if match else trimmed


def normalize_draft_image_urls(
    draft: dict[str, Any] | None, prefix: str = "/images_v1/"
) -> dict[str, Any] | None:
    """
    Normalize URL fields of every entry in ``draft["images"]``.

    Returns the input object unchanged when nothing needed rewriting.
    """
    if not isinstance(draft, dict) or not isinstance(draft.get("images"), list):
        return draft

    changed = False
    images = []
    for image in draft["images"]:
        if not isinstance(image, dict):
            images.append(image)
            continue
        updated = dict(image)
        for key in IMAGE_URL_KEYS:
            if key in updated:
                normalized = normalize_image_url(updated[key], prefix)
                if normalized != updated[key]:
                    updated[key] = normalized
                    changed = True
        images.append(updated)

    if not changed:
        return draft
    return {**draft, "images": images}


def find_discouraged_keys(patch: dict[str, Any] | None, draft: dict[str, Any] | None) -> list[str]:
    """Identity keys a client should not resend in a progress patch."""
    patch = patch if isinstance(patch, dict) else {}
    draft = draft if isinstance(draft, dict) else {}
    return [key for key in DISCOURAGED_PATCH_KEYS if key in patch or key in draft]
