"""Generate a Google OAuth refresh token for the calendar account.

Run once, open the printed URL, authorize, and paste the ``code`` query
parameter from the redirect back into the prompt. The printed refresh token
goes into ``GOOGLE_OAUTH_REFRESH_TOKEN``.

    python -m meetbook.oauth_token
"""

from __future__ import annotations

import argparse
import logging
import sys

from google_auth_oauthlib.flow import Flow

from meetbook.calendar_providers.google import SCOPES
from meetbook.config import Settings

log = logging.getLogger("meetbook.oauth_token")

DEFAULT_REDIRECT_URI = "http://localhost:3001/auth/callback"


def build_flow(client_id: str, client_secret: str, redirect_uri: str) -> Flow:
    """OAuth flow for an installed/web client, always asking for offline access."""
    client_config = {
        "web": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": [redirect_uri],
        }
    }
    return Flow.from_client_config(
        client_config, scopes=SCOPES, redirect_uri=redirect_uri
    )


def authorization_url(flow: Flow) -> str:
    # prompt=consent forces Google to issue a new refresh token
    url, _state = flow.authorization_url(access_type="offline", prompt="consent")
    return url


def exchange_code(flow: Flow, code: str) -> dict[str, str | None]:
    flow.fetch_token(code=code.strip())
    creds = flow.credentials
    return {"refresh_token": creds.refresh_token, "access_token": creds.token}


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Generate a Google Calendar OAuth refresh token"
    )
    parser.add_argument("--client-id", default=settings.google_oauth_client_id)
    parser.add_argument("--client-secret", default=settings.google_oauth_client_secret)
    parser.add_argument("--redirect-uri", default=DEFAULT_REDIRECT_URI)
    args = parser.parse_args(argv)

    if not args.client_id or not args.client_secret:
        parser.error(
            "client id and secret are required "
            "(--client-id/--client-secret or GOOGLE_OAUTH_CLIENT_ID/SECRET)"
        )

    flow = build_flow(args.client_id, args.client_secret, args.redirect_uri)
    print("Open this URL to authorize:")
    print(authorization_url(flow))
    print()

    code = input("Authorization code: ")
    try:
        tokens = exchange_code(flow, code)
    except Exception as exc:
        log.error("Could not exchange authorization code: %s", exc)
        return 1

    if not tokens["refresh_token"]:
        log.error("Google returned no refresh token; revoke access and retry")
        return 1

    print()
    print("Add this to your .env:")
    print(f"GOOGLE_OAUTH_REFRESH_TOKEN={tokens['refresh_token']}")
    print()
    print("Restart the server to apply the change.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(main())
