import hmac
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core import config
from app.core.exceptions import AuthenticationError, ConfigurationError

cron_security = HTTPBearer(
    scheme_name="Cron secret",
    description="Shared secret of the scheduler (CRON_SECRET)",
    auto_error=False,
)


def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(cron_security),
) -> bool:
    """
    Check the scheduler's bearer token

    Raises:
        ConfigurationError: If CRON_SECRET is not configured on the server
        AuthenticationError: If the token is missing or wrong
    """
    if not config.CRON_SECRET:
        raise ConfigurationError("CRON_SECRET", "Cron secret not configured on server")

    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Cron authorization header is required")

    if not hmac.compare_digest(credentials.credentials, config.CRON_SECRET):
        raise AuthenticationError("Invalid cron secret")

    return True
