#!/usr/bin/env python3
"""Helper script to check and create the .env file for the booking assistant."""

from pathlib import Path
import os
import sys

SECRET_VARIABLES = ("BOOKING_SUPABASE_KEY", "BOOKING_GOOGLE_MAPS_API_KEY")

TEMPLATE = """# Supabase Configuration (Required: staff, bookings and absences are read from here)
BOOKING_SUPABASE_URL=https://your-project-id.supabase.co
BOOKING_SUPABASE_KEY=your-service-role-key-here

# Travel time provider (Optional - without a key every drive is estimated at the default)
BOOKING_GOOGLE_MAPS_API_KEY=
# BOOKING_TRAVEL_DEFAULT_MINUTES=30

# Scheduling
BOOKING_FACILITY_TIMEZONE=Europe/Stockholm
# BOOKING_SEARCH_WINDOW_DAYS=7
# BOOKING_NON_BLOCKING_STATUSES=["Stängt - slasklogg"]

# API Configuration
BOOKING_API_PREFIX=/api
"""


def _mask(line: str) -> str:
    name, _, value = line.partition("=")
    value = value.strip()
    if name.strip() in SECRET_VARIABLES and len(value) > 20:
        return f"{name}={value[:12]}...{value[-6:]}"
    return line


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Booking Assistant Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Please edit .env and add your Supabase credentials and travel provider key!")
        return 1

    print(f"✅ Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        print(_mask(line))
    print("-" * 60)
    print()

    for name in ("BOOKING_SUPABASE_URL", "BOOKING_SUPABASE_KEY", "BOOKING_GOOGLE_MAPS_API_KEY"):
        marker = "✅" if os.getenv(name) else "ℹ️ "
        print(f"{marker} {name} {'set' if os.getenv(name) else 'not set'} in process environment")
    print()

    print("Testing config loading...")
    try:
        sys.path.insert(0, str(project_root / "src"))
        from booking_assistant.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    print(f"   Facility timezone: {settings.facility_timezone}")
    print(f"   Search window: {settings.search_window_days} days")
    print(f"   Travel provider key: {'configured' if settings.google_maps_api_key else 'missing (default estimates)'}")
    print()

    if settings.supabase_url and settings.supabase_key:
        print("=" * 60)
        print("✅ SUCCESS: Supabase is configured!")
        print("=" * 60)
        return 0

    print("=" * 60)
    print("❌ ERROR: Supabase is NOT configured")
    print("=" * 60)
    print()
    print("Troubleshooting:")
    print("1. Make sure .env file exists in project root")
    print("2. Make sure variables start with BOOKING_ prefix")
    print("3. Restart backend after editing .env")
    return 1


if __name__ == "__main__":
    sys.exit(main())
