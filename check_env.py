#!/usr/bin/env python3
"""Check the .env file and report which backend services are configured."""

from pathlib import Path
import os
import sys

ENV_TEMPLATE = """# Supabase configuration (clients, appointments, mileage)
# Get these from: https://supabase.com/dashboard -> Your Project -> Settings -> API
CTK_SUPABASE_URL=https://your-project-id.supabase.co
CTK_SUPABASE_KEY=your-service-role-key-here

# API configuration
CTK_API_PREFIX=/api
# CTK_FRONTEND_ALLOWED_ORIGINS accepts a JSON array or a comma-separated list

# Local preferences (route start/end addresses)
CTK_DATA_ROOT=./data

# Geocoding (Nominatim-compatible)
CTK_GEOCODER_BASE_URL=https://nominatim.openstreetmap.org
CTK_GEOCODER_USER_AGENT=contractor-toolkit/0.1 (you@example.com)
CTK_GEOCODE_SPACING_SECONDS=0.8
"""


def _masked(value: str, keep: int = 20) -> str:
    if len(value) <= keep + 10:
        return value
    return value[:keep] + "..." + value[-10:]


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Contractor Toolkit environment checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and add your Supabase credentials, then run this again.")
        return 1

    print(f"Found .env file at: {env_file}")
    for line in env_file.read_text(encoding="utf-8").splitlines():
        name, sep, value = line.partition("=")
        if sep and name.strip() == "CTK_SUPABASE_KEY":
            print(f"{name}={_masked(value.strip())}")
        else:
            print(line)
    print()

    for name in ("CTK_SUPABASE_URL", "CTK_SUPABASE_KEY"):
        value = os.getenv(name)
        print(f"{name} in environment: {'yes' if value else 'no'}")
    print()

    sys.path.insert(0, str(project_root / "src"))
    try:
        from contractor_kit.config import settings
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    print(f"Geocoder: {settings.geocoder_base_url} (spacing {settings.geocode_spacing_seconds}s)")
    print(f"Preferences stored under: {settings.data_root}")
    if settings.supabase_url and settings.supabase_key:
        print("Supabase is configured.")
        return 0

    print("Supabase is NOT configured.")
    print("1. Make sure .env exists in the project root")
    print("2. Make sure variables start with the CTK_ prefix")
    print("3. Restart the backend after editing .env")
    return 1


if __name__ == "__main__":
    sys.exit(main())
