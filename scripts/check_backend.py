"""
Check Employ.me backend connectivity

Calls GET /auth/me on the configured backend with a fresh client. A signed-out
401 means the backend is reachable and answering.

Usage: python scripts/check_backend.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.core.config import settings, validate_settings
from app.core.exceptions import ApiError, ErrorKind
from app.services.api_client import ApiClient


async def check_backend() -> bool:
    print("=" * 60)
    print("  Employ.me Backend Check")
    print("=" * 60 + "\n")

    try:
        validate_settings()
    except ValueError as e:
        print(f"❌ {e}")
        return False

    print(f"Backend: {settings.API_BASE_URL}")
    print(f"Timeout: {settings.API_TIMEOUT_SECONDS or 'httpx default'}\n")

    client = ApiClient()
    try:
        await client.get("/auth/me")
        print("⚠️  /auth/me answered 200 without credentials")
        return True
    except ApiError as e:
        if e.kind is ErrorKind.NETWORK:
            print(f"❌ Backend unreachable ({e.status_code})")
            return False
        if e.kind is ErrorKind.UNAUTHORIZED:
            print(f"✅ Backend reachable, signed-out visitor rejected: {e.message}")
            return True
        print(f"❌ Unexpected {e.status_code} response: {e.message}")
        return False
    finally:
        await client.close()


if __name__ == "__main__":
    ok = asyncio.run(check_backend())
    sys.exit(0 if ok else 1)
