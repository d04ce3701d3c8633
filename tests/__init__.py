import os

# Settings are read once per process; pin them before any backoffice import.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["INVENTORY_SEARCH_DEBOUNCE_MS"] = "0"
os.environ["INVENTORY_SEED_DEMO_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
