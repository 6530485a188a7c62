"""
Post-processing hooks for drf-spectacular schema generation.
"""

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")


def wrap_with_envelope(result, generator, request, public):
    """
    Wrap every 2xx application/json response schema in the envelope produced by
    ApiResponseWrapperMiddleware:

    {
        "success": true/false,
        "data": <original_schema>,
        "error": <error_data>
    }

    Streaming (text/event-stream) responses are left untouched since the
    middleware never wraps them.
    """
    if not isinstance(result, dict):
        return result

    for path_item in result.get("paths", {}).values():
        for method, operation in path_item.items():
            if method not in HTTP_METHODS:
                continue

            for status_code, response_def in operation.get("responses", {}).items():
                if not str(status_code).startswith("2"):
                    continue

                json_content = response_def.get("content", {}).get("application/json")
                if json_content is None:
                    continue

                original_schema = json_content.get("schema", {})
                props = original_schema.get("properties", {})
                if "success" in props and "data" in props:
                    continue

                json_content["schema"] = {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "description": "Indicates if the request was successful"},
                        "data": original_schema or {"type": "object", "nullable": True},
                        "error": {
                            "type": "object",
                            "nullable": True,
                            "description": "Error details (only present when success is false)",
                        },
                    },
                    "required": ["success"],
                }

    return result
