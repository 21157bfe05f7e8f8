"""Internal constants shared across the library."""

BASE_URL = "https://api.iterable.com/api/"
USER_AGENT = "pyembedded"
SDK_VERSION = "3.5.2"

# ------------------------------------------------------------------
# Endpoints (relative to the configured base URL)
# ------------------------------------------------------------------

ENDPOINT_EMBEDDED_MESSAGES = "embedded-messaging/messages"
ENDPOINT_EMBEDDED_RECEIVED = "embedded-messaging/events/received"
ENDPOINT_EMBEDDED_SESSION = "embedded-messaging/events/session"

# ------------------------------------------------------------------
# Payload keys
# ------------------------------------------------------------------

KEY_PLACEMENTS = "placements"
KEY_EMBEDDED_MESSAGES = "embeddedMessages"
KEY_CURRENT_MESSAGE_IDS = "currentMessageIds"

# ------------------------------------------------------------------
# Click URL schemes
# ------------------------------------------------------------------

URL_SCHEME_ACTION = "action://"
URL_SCHEME_ITBL = "itbl://"

# ------------------------------------------------------------------
# Fatal failure markers returned by the server (compared case-insensitively)
# ------------------------------------------------------------------

SUBSCRIPTION_INACTIVE_MARKERS: frozenset[str] = frozenset({"subscription_inactive"})
INVALID_API_KEY_MARKERS: frozenset[str] = frozenset({"invalid api key", "invalidapikey"})
