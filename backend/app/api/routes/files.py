"""Signed file downloads - GET /files/{path}."""

import mimetypes
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from backend.app.api.deps import ServicesDep
from backend.app.storage.signing import SignatureExpiredError, SignatureInvalidError
from backend.app.storage.store import ObjectNotFoundError, StorageError

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{path:path}")
async def download_file(
    path: str,
    expires: Annotated[int, Query()],
    signature: Annotated[str, Query()],
    services: ServicesDep,
) -> Response:
    """Serve a stored object to holders of a valid signed URL.

    Raises:
        HTTPException: 403 on a bad signature, 410 once expired, 404 if the object is gone
    """
    try:
        services.signer.verify(path, expires, signature)
    except SignatureInvalidError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except SignatureExpiredError as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(e)) from e

    try:
        content = await services.storage.get(path)
    except ObjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    media_type, _ = mimetypes.guess_type(path)
    return Response(content=content, media_type=media_type or "application/octet-stream")
