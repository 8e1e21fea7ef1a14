from dataclasses import dataclass
import hmac
import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sitegen.config import settings


bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger("auth.deps")


@dataclass
class EditorContext:
    role: str = "editor"


def require_editor(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> EditorContext:
    expected = settings.EDITOR_TOKEN
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Editing is disabled: EDITOR_TOKEN is not configured.",
        )
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    if not hmac.compare_digest(credentials.credentials.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected editor token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid editor token")

    return EditorContext()
