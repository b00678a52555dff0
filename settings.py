from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Verification service
NOCAPTCHA_API_URL = config.get("NOCAPTCHA_API_URL", "http://localhost:8080")
# Transport timeout for each HTTP call; the protocol itself imposes none
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "nocaptcha_debug.log")

# Session storage
SESSION_FILE = config.get("SESSION_FILE", "~/.nocaptcha/session.json")

# WebAuthn origin presented to the authenticator (empty: derived from rp.id)
NOCAPTCHA_ORIGIN = config.get("NOCAPTCHA_ORIGIN", "")

# Protocol constants (hardcoded - not user configurable)
SESSION_KEY = "no-captcha-id"
ANONYMOUS_ID = "Anonymous"
START_PATH = "/v1/nocaptcha/start"
COMPLETE_PATH = "/v1/nocaptcha/complete"
START_SUCCESS_STATUS = 201
COMPLETE_SUCCESS_STATUS = 202
