from fastapi import Header, HTTPException, status

from app.core.config import settings
from app.core.logger import logger


def require_admin_key(x_api_key: str = Header(...)) -> None:
    if not settings.ADMIN_API_KEY or x_api_key != settings.ADMIN_API_KEY:
        logger.error('Invalid API key')
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Invalid API key',
        )
