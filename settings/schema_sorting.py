import re

_TAG_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?:\s+(.*)$")


def _tag_sort_key(tag):
    """Order "1.2: Name" style tags numerically; untagged or unnumbered tags go last.

    "1.1: Device" -> (1, 1, "Device")
    "2.10: Attendance" -> (2, 10, "Attendance")
    "Health" -> (999999, 0, "Health")
    """
    match = _TAG_PATTERN.match(tag or "")
    if not match:
        return (999999, 0, tag or "")
    return (int(match.group(1)), int(match.group(2) or 0), match.group(3))


def sort_schema_by_tags(result, generator, request, public):
    """drf-spectacular post-processing hook sorting tags and paths by tag number."""
    if not isinstance(result, dict) or "paths" not in result:
        return result

    if isinstance(result.get("tags"), list):
        result["tags"] = sorted(result["tags"], key=lambda tag_obj: _tag_sort_key(tag_obj.get("name", "")))

    def primary_tag(operations):
        for method in ("get", "post", "put", "patch", "delete"):
            tags = operations.get(method, {}).get("tags") or []
            if tags:
                return tags[0]
        return ""

    ordered = sorted(result["paths"].items(), key=lambda item: (_tag_sort_key(primary_tag(item[1])), item[0]))
    result["paths"] = dict(ordered)
    return result
