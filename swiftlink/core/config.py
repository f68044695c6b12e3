import os

# HTTP listener
PORT = int(os.getenv("PORT", "5000"))
HOST = os.getenv("SWIFTLINK_HOST", "0.0.0.0")

LOG_LEVEL = os.getenv("SWIFTLINK_LOG_LEVEL", "INFO").upper()

# Permissive by default, same as the mobile backend it serves
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("SWIFTLINK_CORS_ORIGINS", "*").split(",")
    if o.strip()
] or ["*"]

# Auth tokens
SECRET_KEY = os.getenv("SWIFTLINK_SECRET", "dev-secret-change-me")  # override in prod
JWT_EXPIRE_MIN = int(os.getenv("SWIFTLINK_JWT_EXPIRE_MIN", "1440"))  # 1 day
JWT_ALGO = "HS256"

# Client side: where the mobile app points its socket and REST calls
SOCKET_URL = os.getenv("SWIFTLINK_SOCKET_URL", "https://flybridge-1.onrender.com")
API_URL = os.getenv("SWIFTLINK_API_URL", SOCKET_URL)

ROLES = ("user", "agent")
