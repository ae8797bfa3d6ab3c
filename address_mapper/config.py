import os

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Storage
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
DATA_FILE = os.getenv("DATA_FILE", os.path.join(DATA_DIR, "addresses.json"))
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(os.getcwd(), "static"))

# Upstream APIs
USER_AGENT = os.getenv("USER_AGENT", "GeneradorMapas/1.0 (local app)")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
MAPBOX_TOKEN = os.getenv("MAPBOX_TOKEN", "")
GEOCODER_ENGINE = os.getenv("GEOCODER_ENGINE", "nominatim")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
