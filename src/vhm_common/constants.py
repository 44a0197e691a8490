"""Shared constants for VHM."""

from pathlib import Path

# Default paths (overridable via VhmConfig / env vars)
STAGING_DIR = Path("/tmp")
NGINX_DIR = Path("/etc/nginx")
NGINX_LOG_DIR = Path("/var/log/nginx")

# Relative to STAGING_DIR / NGINX_DIR
FRAGMENT_SUBDIR = "nginx.d"
SITES_AVAILABLE_SUBDIR = "sites-available"
SITES_ENABLED_SUBDIR = "sites-enabled"
AUTH_SUBDIR = "auth"

# Audit / logging
LOG_DIR = Path("/var/log/vhm")
AUDIT_JSONL_PATH = LOG_DIR / "audit.jsonl"

# Ownership shared by every emitted fragment
FRAGMENT_OWNER = "root"
FRAGMENT_GROUP = "root"
FRAGMENT_MODE = 0o644

# Fragment numbering (concatenation order)
HEADER_PRIORITY = 1
LOCATION_PRIORITY = 500
MAX_EXTRA_LOCATIONS = 99
FOOTER_PRIORITY = 699
SSL_HEADER_PRIORITY = 700
SSL_LOCATION_OFFSET = 300
SSL_FOOTER_PRIORITY = 999

# NGINX defaults
DEFAULT_INDEX_FILES = ["index.html", "index.htm", "index.php"]
DEFAULT_PROXY_READ_TIMEOUT = "90"
DEFAULT_PROXY_SET_HEADER = [
    "Host $host",
    "X-Real-IP $remote_addr",
    "X-Forwarded-For $proxy_add_x_forwarded_for",
    "X-Forwarded-Proto $scheme",
]
DEFAULT_FASTCGI_PARAMS = "/etc/nginx/fastcgi_params"
DEFAULT_SSL_PROTOCOLS = "TLSv1.2 TLSv1.3"
DEFAULT_SSL_CIPHERS = "HIGH:!aNULL:!MD5"
DEFAULT_SSL_SESSION_TIMEOUT = "5m"

# Service notified when rendered config changes
NGINX_SERVICE = "nginx"
