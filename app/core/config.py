import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/campus_canteen")

# Application Metadata
PROJECT_NAME = "Campus Canteen Ordering Service"
VERSION = "1.0.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Real-time channel
BROADCAST_QUEUE_SIZE = int(os.getenv("BROADCAST_QUEUE_SIZE", 100)) # Pending events kept per connected client

# Dashboard
STATS_TOP_ITEMS = int(os.getenv("STATS_TOP_ITEMS", 5))
STATS_FALLBACK_HOURS = int(os.getenv("STATS_FALLBACK_HOURS", 24)) # Used when no order was completed today
STATS_TIMEZONE = os.getenv("STATS_TIMEZONE") # IANA zone that defines "today", e.g. Asia/Kolkata; system zone when unset

SEED_DEFAULT_COUNT = int(os.getenv("SEED_DEFAULT_COUNT", 4))

# Stock Reconciler Configuration
POLLING_INTERVAL = int(os.getenv("POLLING_INTERVAL", 5)) # Reconciler checks for unadjusted orders every N seconds
BATCH_SIZE = int(os.getenv("BATCH_SIZE", 50)) # How many orders to reconcile per poll
