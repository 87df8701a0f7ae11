"""Constants for app discovery.

This module defines discovery-wide constants used across the codebase.
"""

# Query string appended to every discovery page URL
DISCOVERY_QUERY = "ac-discovery=1"

# Connection establishment timeout for discovery fetches
DEFAULT_DIAL_TIMEOUT_SECONDS = 5.0
"""Default timeout in seconds for establishing a connection.

Only connection establishment is bounded; reading a discovery page and
the walk as a whole have no deadline.
"""

# Environment variable overriding DEFAULT_DIAL_TIMEOUT_SECONDS
ENV_DIAL_TIMEOUT = "ACDISCOVERY_DIAL_TIMEOUT"

# Meta declarations
META_NAME_PREFIX = "ac-"
META_ACI_DISCOVERY = "ac-discovery"
META_PUBKEYS_DISCOVERY = "ac-discovery-pubkeys"
META_TAGS_DISCOVERY = "ac-discovery-tags"

# Values substituted for {ext} in rendered templates
ACI_EXTENSION = "aci"
SIGNATURE_EXTENSION = "aci.asc"

# Template variables
NAME_VARIABLE = "name"
EXT_VARIABLE = "ext"

# Label names
RESERVED_LABEL = "name"
VERSION_LABEL = "version"
OS_LABEL = "os"
ARCH_LABEL = "arch"

# AC identifier grammar: lowercase alphanumerics joined by single separators
AC_IDENTIFIER_PATTERN = r"^[a-z0-9]+([-._~/][a-z0-9]+)*$"
MAX_LABEL_VALUE_LENGTH = 255
