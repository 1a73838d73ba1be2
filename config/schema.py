"""Custom OpenAPI schema hooks for drf-spectacular.

Every operation is filed under exactly one feature tag so Swagger UI groups
rooms, bookings and the selection workflow separately.
"""

from __future__ import annotations

from typing import Any

# Method names that contain operations in the OpenAPI path item
_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/v1/rooms", "Rooms"),
    ("/api/v1/bookings", "Bookings"),
    ("/api/v1/selection/admin", "Admin"),
    ("/api/v1/selection/reset", "Admin"),
    ("/api/v1/selection", "Selection"),
    ("/api/v1/schema", "Meta"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Post-processing hook to force consistent tag grouping."""
    paths = result.get("paths", {})
    for path, path_item in paths.items():  # type: ignore[assignment]
        tag = assign_group_tag(path)
        if not tag:
            continue
        for method, op_obj in path_item.items():
            if method.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(op_obj, dict):
                continue
            op_obj["tags"] = [tag]

    # Ensure declared tags list contains all groups we used (order preserved)
    existing = {t.get("name") for t in result.get("tags", [])}
    tag_list = result.setdefault("tags", [])
    for tag in ALL_TAGS:
        if tag not in existing:
            tag_list.append({"name": tag})
    return result
