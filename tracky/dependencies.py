from fastapi import Header, HTTPException, Request, status
from typing import Optional

from tracky.utils.logger import user_id_context


async def get_current_user_id(
    request: Request,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> str:
    """
    FastAPI dependency identifying the caller.

    Identity is asserted by the upstream gateway through the X-User-ID
    header; nothing is verified here.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )
    user_id = x_user_id.strip()
    request.state.user_id = user_id
    user_id_context.set(user_id)
    return user_id
