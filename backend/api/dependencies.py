"""Shared FastAPI dependencies: services, price provider and current user."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from integrations.coincap_client import CoinCapClient
from models import User
from services.exceptions import AuthenticationError
from services.price_service import CoinCapPriceService, PriceService
from services.simulation_service import SimulationService
from services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_price_provider_client() -> CoinCapClient:
    """Process-wide CoinCap client configured from settings."""
    return CoinCapClient(
        api_token=settings.COINCAP_API_TOKEN or None,
        base_url=settings.COINCAP_BASE_URL,
        timeout=settings.COINCAP_TIMEOUT_SECONDS,
    )


@lru_cache
def get_price_service() -> PriceService:
    """Process-wide price service.

    Its symbol cache lives as long as the service, so slug resolutions are
    shared by every request and by the refresh scheduler.
    """
    return CoinCapPriceService(get_price_provider_client())


def get_simulation_service(
    price_service: PriceService = Depends(get_price_service),
) -> SimulationService:
    return SimulationService(price_service)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a User.

    Raises:
        AuthenticationError: If the token is missing or invalid, or the
            user no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing access token")
    user_id = UserService.decode_access_token(credentials.credentials)
    user = UserService.get_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("User not found for access token")
    return user
