import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

TODO_API_URL = os.getenv("TODO_API_URL", "http://localhost:8000")
TASKS_CACHE_TTL = float(os.getenv("TASKS_CACHE_TTL", "30"))

# Redis backs the client cache only when REDIS_HOST is set.
REDIS_HOST = os.getenv("REDIS_HOST")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
