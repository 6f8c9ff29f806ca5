import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dental_clinic.db")

# Clinic business hours used by the availability generator
CLINIC_OPEN_TIME = os.getenv("CLINIC_OPEN_TIME", "09:00")
CLINIC_CLOSE_TIME = os.getenv("CLINIC_CLOSE_TIME", "17:00")
SLOT_GRANULARITY_MINUTES = int(os.getenv("SLOT_GRANULARITY_MINUTES", "30"))
CLINIC_WORKING_DAYS = [
    day.strip().lower()
    for day in os.getenv("CLINIC_WORKING_DAYS", "monday,tuesday,wednesday,thursday,friday").split(
        ","
    )
    if day.strip()
]

# Booking rules
DEFAULT_APPOINTMENT_DURATION = int(os.getenv("DEFAULT_APPOINTMENT_DURATION", "60"))
REQUEST_THROTTLE_HOURS = int(os.getenv("REQUEST_THROTTLE_HOURS", "24"))
MAX_BOOKING_MONTHS_AHEAD = int(os.getenv("MAX_BOOKING_MONTHS_AHEAD", "6"))

# Public intake rate limiting (per IP)
REQUEST_INTAKE_RATE_LIMIT = int(os.getenv("REQUEST_INTAKE_RATE_LIMIT", "5"))
REQUEST_INTAKE_RATE_WINDOW = int(os.getenv("REQUEST_INTAKE_RATE_WINDOW", "60"))

# Frontend base URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
