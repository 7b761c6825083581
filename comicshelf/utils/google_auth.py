from typing import Any, Dict, Optional

from fastapi import Request
from google.auth.transport import requests
from google.oauth2 import id_token

from comicshelf.config import GOOGLE_CLIENT_ID


class GoogleTokenVerifier:
    """Checks a Google ID token's signature and audience, returning its claims."""

    def __init__(self, client_id: Optional[str] = GOOGLE_CLIENT_ID):
        self.client_id = client_id
        self._request = requests.Request()

    def verify(self, token: str) -> Dict[str, Any]:
        if not self.client_id:
            raise ValueError("GOOGLE_CLIENT_ID is not configured")
        return id_token.verify_oauth2_token(token, self._request, self.client_id)


# Dependency for FastAPI routes
def get_google_verifier(request: Request) -> GoogleTokenVerifier:
    return request.app.state.google_verifier
