"""Configuration loader for the Reaport ticketing autopilot."""

import os
from dotenv import load_dotenv

load_dotenv()

# Reaport hosts
TICKETS_BASE_URL = os.getenv("TICKETS_BASE_URL", "https://tickets.reaport.ru")
REGISTER_BASE_URL = os.getenv("REGISTER_BASE_URL", "https://register.reaport.ru")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "5"))

# Purchase
TICKETS_PER_SEATS = int(os.getenv("TICKETS_PER_SEATS", "10"))
SEAT_CLASS = os.getenv("SEAT_CLASS", "economy")
DISCOVERY_MEAL = os.getenv("DISCOVERY_MEAL", "Vegan")
BULK_MEAL = os.getenv("BULK_MEAL", "Vegetarian")
BAGGAGE = os.getenv("BAGGAGE", "да")

# Check-in
CHECKIN_LEAD_SECONDS = float(os.getenv("CHECKIN_LEAD_SECONDS", "3570"))
CHECKIN_BAGGAGE_WEIGHT = float(os.getenv("CHECKIN_BAGGAGE_WEIGHT", "0.1"))
CHECKIN_MEAL = os.getenv("CHECKIN_MEAL", "Vegetarian")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Mock API
MOCK_API = os.getenv("MOCK_API", "false").lower() in ("true", "1", "yes")
MOCK_DELAYS = os.getenv("MOCK_DELAYS", "false").lower() in ("true", "1", "yes")


def validate():
    """Validate configuration values are usable."""
    problems = []
    for name, url in (("TICKETS_BASE_URL", TICKETS_BASE_URL),
                      ("REGISTER_BASE_URL", REGISTER_BASE_URL)):
        if not url.startswith(("http://", "https://")):
            problems.append(f"{name} is not an http(s) URL: {url!r}")
    if REQUEST_TIMEOUT <= 0:
        problems.append(f"REQUEST_TIMEOUT must be positive, got {REQUEST_TIMEOUT}")
    if TICKETS_PER_SEATS <= 0:
        problems.append(f"TICKETS_PER_SEATS must be positive, got {TICKETS_PER_SEATS}")
    if problems:
        print(f"WARNING: Bad config: {'; '.join(problems)}")
        print("Requests may fail. Copy .env.example to .env and fix the values.")
    return problems
