# scripts/debug_auth_state.py
import argparse
import asyncio

from kirkidata.core.config import settings
from kirkidata.db.storage import get_storage
from kirkidata.services.session import build_sessions, clear_all_sessions


def _fmt(present: bool) -> str:
    return "Present" if present else "Missing"


async def main(clear: bool = False):
    storage = get_storage(settings)
    sessions = build_sessions(storage)
    try:
        if clear:
            await clear_all_sessions(sessions.values())
            print("All authentication data cleared.")

        print("=== Authentication Debug Info ===")
        for role, session in sessions.items():
            info = await session.describe()
            label = role.value.capitalize()
            print(f"{label} Access Token: {_fmt(info['access_token'])}")
            print(f"{label} Refresh Token: {_fmt(info['refresh_token'])}")
            print(f"{label} Data: {_fmt(info['profile'])}")
            if info["access_token"]:
                if info["access_token_expires_at"] is None:
                    print(f"{label} Token: Invalid format")
                else:
                    print(f"{label} Token Expiry: {info['access_token_expires_at']}")
                    print(f"{label} Token Expired: {info['access_token_expired']}")
        print("================================")
    finally:
        await storage.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show persisted session state for both roles")
    parser.add_argument("--clear", action="store_true", help="clear both sessions first")
    args = parser.parse_args()
    asyncio.run(main(clear=args.clear))
