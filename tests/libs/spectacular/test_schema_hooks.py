"""
Tests for drf-spectacular schema post-processing hooks.
"""

from drf_spectacular.generators import SchemaGenerator

from libs.drf.spectacular.schema_hooks import wrap_with_envelope
from settings.schema_sorting import sort_schema_by_tags


def make_schema(content_type="application/json", schema=None, status_code="200"):
    return {
        "paths": {
            "/api/test/": {
                "get": {
                    "responses": {
                        status_code: {
                            "content": {
                                content_type: {
                                    "schema": schema
                                    or {"type": "object", "properties": {"count": {"type": "integer"}}},
                                }
                            }
                        }
                    }
                }
            }
        }
    }


def response_schema(result, content_type="application/json", status_code="200"):
    return result["paths"]["/api/test/"]["get"]["responses"][status_code]["content"][content_type]["schema"]


class TestWrapWithEnvelope:
    def test_wraps_json_success_response(self):
        result = wrap_with_envelope(make_schema(), None, None, True)

        schema = response_schema(result)
        assert set(schema["properties"]) == {"success", "data", "error"}
        assert schema["properties"]["success"]["type"] == "boolean"
        assert schema["properties"]["data"]["properties"]["count"] == {"type": "integer"}

    def test_leaves_event_stream_untouched(self):
        result = wrap_with_envelope(make_schema("text/event-stream", {"type": "string"}), None, None, True)

        assert response_schema(result, "text/event-stream") == {"type": "string"}

    def test_leaves_error_responses_untouched(self):
        result = wrap_with_envelope(make_schema(status_code="503"), None, None, True)

        assert "success" not in response_schema(result, status_code="503").get("properties", {})

    def test_does_not_double_wrap(self):
        once = wrap_with_envelope(make_schema(), None, None, True)
        twice = wrap_with_envelope(once, None, None, True)

        assert "success" not in response_schema(twice)["properties"]["data"].get("properties", {})


class TestSortSchemaByTags:
    def test_sorts_tags_and_paths(self):
        result = {
            "tags": [{"name": "2: Attendance"}, {"name": "Misc"}, {"name": "0: System"}, {"name": "1: Device"}],
            "paths": {
                "/api/attendances/": {"get": {"tags": ["2: Attendance"]}},
                "/health/": {"get": {"tags": ["0: System"]}},
                "/api/device/users/": {"get": {"tags": ["1: Device"]}},
                "/api/device/connect/": {"post": {"tags": ["1: Device"]}},
            },
        }

        result = sort_schema_by_tags(result, None, None, True)

        assert [tag["name"] for tag in result["tags"]] == ["0: System", "1: Device", "2: Attendance", "Misc"]
        assert list(result["paths"]) == [
            "/health/",
            "/api/device/connect/",
            "/api/device/users/",
            "/api/attendances/",
        ]


class TestGeneratedSchema:
    def test_schema_documents_every_endpoint(self):
        schema = SchemaGenerator().get_schema(request=None, public=True)

        paths = list(schema["paths"])
        assert paths[0] == "/health/"
        for path in (
            "/api/device/connect/",
            "/api/device/info/",
            "/api/device/enable/",
            "/api/device/disable/",
            "/api/device/users/",
            "/api/device/realtime-logs/",
            "/api/attendances/",
            "/api/attendances/summary/",
            "/api/attendances/clear/",
            "/api/attendances-unique/",
        ):
            assert path in schema["paths"]

        users_schema = schema["paths"]["/api/device/users/"]["get"]["responses"]["200"]["content"]["application/json"][
            "schema"
        ]
        assert "success" in users_schema["properties"]

        stream_content = schema["paths"]["/api/device/realtime-logs/"]["get"]["responses"]["200"]["content"]
        assert "text/event-stream" in stream_content
