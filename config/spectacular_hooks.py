"""drf-spectacular post-processing: one tag per API area."""

API_PREFIX = "/api/v1/"

# Longest matching prefix wins, so "auth/jwt/" beats "auth/".
TAGS_BY_PREFIX = {
    "auth/jwt/": "JWT Authentication",
    "auth/": "Authentication",
    "admin/": "Admin",
    "users/": "Users",
    "vehicles/": "Vehicles",
    "location/": "Location",
    "emergency/": "Emergency",
    "chat/": "Chat",
    "notifications/": "Notifications",
    "schema/": "Meta",
}


def tag_for_path(path: str) -> str | None:
    if not path.startswith(API_PREFIX):
        return None
    rest = path[len(API_PREFIX) :]
    matches = [prefix for prefix in TAGS_BY_PREFIX if rest.startswith(prefix)]
    if not matches:
        return None
    return TAGS_BY_PREFIX[max(matches, key=len)]


def group_tags(result, generator, request, public):
    for path, operations in result.get("paths", {}).items():
        tag = tag_for_path(path)
        if tag is None:
            continue
        for operation in operations.values():
            operation["tags"] = [tag]
    return result
