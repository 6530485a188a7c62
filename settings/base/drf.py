from .base import config

REST_FRAMEWORK = {
    # Callers are not authenticated; the gateway is deployed behind the network boundary.
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "libs.drf.custom_exception_handler.exception_handler",
}

DRF_STANDARDIZED_ERRORS = {
    "ENABLE_IN_DEBUG_FOR_UNHANDLED_EXCEPTIONS": True,
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "ZK Attendance Gateway API",
    "DESCRIPTION": "HTTP API for ZKTeco fingerprint attendance terminals",
    "VERSION": config("API_DOC_VERSION", default="1.0.0"),
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATION_PARAMETERS": lambda parameter: parameter["name"],
    "TAGS": [],
    "SCHEMA_PATH_PREFIX": "/api/",
    "POSTPROCESSING_HOOKS": [
        "libs.drf.spectacular.schema_hooks.wrap_with_envelope",
        "settings.schema_sorting.sort_schema_by_tags",
    ],
}
