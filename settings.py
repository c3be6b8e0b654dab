import tempfile
from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

VERSION = "1.0.0"

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "wizard_debug.log")

# Cloudflare OAuth configuration (hardcoded - not user configurable)
# The redirect target is a fixed local listener registered with the OAuth client
CLIENT_ID = "54d11594-84e4-41aa-b438-e81b8fa78ee7"
AUTHORIZE_URL = "https://dash.cloudflare.com/oauth2/auth"
TOKEN_URL = "https://dash.cloudflare.com/oauth2/token"
OAUTH_CALLBACK_HOST = "localhost"
OAUTH_CALLBACK_PORT = 8976
OAUTH_CALLBACK_PATH = "/oauth/callback"
REDIRECT_URI = f"http://{OAUTH_CALLBACK_HOST}:{OAUTH_CALLBACK_PORT}{OAUTH_CALLBACK_PATH}"

# Every scope the provisioning pipeline needs, requested up front
SCOPES = [
    "account:read",
    "user:read",
    "workers:write",
    "workers_kv:write",
    "workers_routes:write",
    "workers_scripts:write",
    "workers_tail:read",
    "d1:write",
    "pages:write",
    "pages:read",
    "zone:read",
    "ssl_certs:write",
    "ai:write",
    "queues:write",
    "pipelines:write",
    "secrets_store:write",
]

# Login handshake timing (seconds)
LOGIN_TIMEOUT = config.get("LOGIN_TIMEOUT", 300.0)
SHUTDOWN_TIMEOUT = config.get("SHUTDOWN_TIMEOUT", 5.0)

# Cloudflare REST API
API_BASE = "https://api.cloudflare.com/client/v4"
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 120.0)

# API-token mode: skips the browser login entirely
CLOUDFLARE_API_TOKEN = config.get_secret("CLOUDFLARE_API_TOKEN")
CLOUDFLARE_ACCOUNT_ID = config.get_secret("CLOUDFLARE_ACCOUNT_ID")

# Worker bundle
WORKER_BUNDLE_URL = config.get(
    "WORKER_BUNDLE_URL",
    "https://raw.githubusercontent.com/yas-python/zizifn/main/_worker.js",
)
MAIN_MODULE = "worker.js"
COMPATIBILITY_FLAGS = ["nodejs_compat"]
PANEL_PATH = "admin"

# Public suffix list cache used to resolve registrable domains
TLD_CACHE_DIR = config.get("TLD_CACHE_DIR", str(Path(tempfile.gettempdir()) / "bpb-wizard-tld"))
