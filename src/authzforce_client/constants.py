"""Application-wide constants for authzforce-client.

Constants that define protocol identifiers and default behavior.
For user-configurable settings per deployment, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # PDP connection
    "DEFAULT_PDP_URL",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
    "XML_CONTENT_TYPE",
    # Readiness gate
    "DEFAULT_READINESS_TIMEOUT_SECONDS",
    "DEFAULT_READINESS_INTERVAL_SECONDS",
    # Namespaces
    "AUTHZ_NS",
    "XACML_CORE_NS",
    "AUTHORING_NS_PREFIX",
    # XACML identifiers
    "CATEGORY_ACCESS_SUBJECT",
    "CATEGORY_RESOURCE",
    "CATEGORY_ACTION",
    "CATEGORY_ENVIRONMENT",
    "ATTRIBUTE_ID_PREFIXES",
    "XS_STRING",
    "STATUS_OK",
    # Logging
    "LOG_LEVELS",
    "DEFAULT_LOG_LEVEL",
]

# ============================================================================
# Application Identity
# ============================================================================

# Application name used for logger names and the CLI
APP_NAME: str = "authzforce-client"

# ============================================================================
# PDP Connection
# ============================================================================

# Loopback AuthzForce CE deployment (docker image default port and context path)
DEFAULT_PDP_URL: str = "http://127.0.0.1:8080/authzforce-ce"

# Per-request HTTP timeout (seconds)
DEFAULT_HTTP_TIMEOUT_SECONDS: float = 10.0

# Timeout validation range (seconds)
MIN_HTTP_TIMEOUT_SECONDS: float = 1.0
MAX_HTTP_TIMEOUT_SECONDS: float = 300.0

# AuthzForce only speaks XML on the REST API
XML_CONTENT_TYPE: str = "application/xml"

# ============================================================================
# Readiness Gate
# ============================================================================

# AuthzForce takes ~30-60s to boot inside its container
DEFAULT_READINESS_TIMEOUT_SECONDS: float = 60.0
DEFAULT_READINESS_INTERVAL_SECONDS: float = 2.0

# ============================================================================
# Namespaces
# ============================================================================

# AuthzForce REST API model (domains, links, pdp.properties)
AUTHZ_NS: str = "http://authzforce.github.io/rest-api-model/xmlns/authz/5"

# XACML 3.0 core schema
XACML_CORE_NS: str = "urn:oasis:names:tc:xacml:3.0:core:schema:wd-17"

# Prefix emitted by the policy authoring tool; stripped by the build step
AUTHORING_NS_PREFIX: str = "xacml3"

# ============================================================================
# XACML Identifiers
# ============================================================================

CATEGORY_ACCESS_SUBJECT: str = "urn:oasis:names:tc:xacml:1.0:subject-category:access-subject"
CATEGORY_RESOURCE: str = "urn:oasis:names:tc:xacml:3.0:attribute-category:resource"
CATEGORY_ACTION: str = "urn:oasis:names:tc:xacml:3.0:attribute-category:action"
CATEGORY_ENVIRONMENT: str = "urn:oasis:names:tc:xacml:3.0:attribute-category:environment"

# AttributeId prefix per category; short names from the caller are appended
ATTRIBUTE_ID_PREFIXES: dict[str, str] = {
    CATEGORY_ACCESS_SUBJECT: "urn:oasis:names:tc:xacml:1.0:subject:",
    CATEGORY_RESOURCE: "urn:oasis:names:tc:xacml:1.0:resource:",
    CATEGORY_ACTION: "urn:oasis:names:tc:xacml:1.0:action:",
    CATEGORY_ENVIRONMENT: "urn:oasis:names:tc:xacml:1.0:environment:",
}

# Every attribute value is sent as a plain string
XS_STRING: str = "http://www.w3.org/2001/XMLSchema#string"

STATUS_OK: str = "urn:oasis:names:tc:xacml:1.0:status:ok"

# ============================================================================
# Logging
# ============================================================================

# Verbosity names accepted in config and on the CLI (WARN is an alias of WARNING)
LOG_LEVELS: tuple[str, ...] = ("ERROR", "WARN", "INFO", "DEBUG")
DEFAULT_LOG_LEVEL: str = "INFO"
