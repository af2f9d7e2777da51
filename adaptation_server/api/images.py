"""
Image API endpoints.

Uploads go through the blob store after size and type validation. When no
blob store token is configured the upload is still validated but a
placeholder URL is returned instead of storing anything.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response

from ..dependencies import get_blob_store
from ..error_types import ErrorMessages
from ..exceptions import LoggedHTTPException, ResourceNotFoundError, StorageError, StorageTimeoutError
from ..schemas.creature import DeleteResponse
from ..schemas.image import UploadResponse
from ..storage.blob_store import BlobStore
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request

logger = get_logger(__name__)

image_router = APIRouter(prefix="/images", tags=["images"])

IMAGE_CACHE_CONTROL = "public, max-age=31536000"
PLACEHOLDER_NOTE = "Using placeholder due to missing Blob token"


def placeholder_upload_url(base_url: str, file_name: str) -> str:
    return f"{base_url}?height=200&width=200&text={quote(file_name, safe='')}"


@image_router.post("/upload", response_model=UploadResponse, response_model_exclude_unset=True)
async def upload_image(
    request: Request,
    file: UploadFile | None = File(default=None),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Upload an image from the multipart field "file".

    Returns the stored id and the URL it can be fetched from.
    """
    context = create_context_from_request(request)
    context.metadata["operation"] = "upload_image"

    if file is None:
        raise LoggedHTTPException(status_code=400, detail=ErrorMessages.NO_FILE_PROVIDED, context=context)

    file_name = file.filename or "upload"
    content_type = file.content_type or ""
    # At most limit + 1 bytes are buffered
    content = await file.read(blob_store.max_upload_bytes + 1)
    context.metadata.update({"file_name": file_name, "size": len(content)})

    # Raises ValidationError (400) before anything is written
    blob_store.validate(content, content_type)

    if not blob_store.enabled:
        logger.info("Blob store token not configured, returning placeholder image", file_name=file_name)
        return {
            "success": True,
            "fileId": None,
            "url": placeholder_upload_url(blob_store.config.placeholder_url, file_name),
            "note": PLACEHOLDER_NOTE,
        }

    try:
        file_id = await blob_store.store(content, file_name, content_type)
    except StorageTimeoutError as e:
        raise LoggedHTTPException(
            status_code=500,
            detail=ErrorMessages.UPLOAD_TIMEOUT,
            context=context,
            extra={"details": e.message, "suggestion": ErrorMessages.UPLOAD_RETRY_SUGGESTION},
        ) from e
    except StorageError as e:
        raise LoggedHTTPException(
            status_code=500,
            detail=ErrorMessages.UPLOAD_FAILED,
            context=context,
            extra={"details": e.message, "suggestion": ErrorMessages.UPLOAD_RETRY_SUGGESTION},
        ) from e

    logger.info("Upload successful", file_id=file_id, file_name=file_name)
    return {"success": True, "fileId": file_id, "url": f"/images/{file_id}"}


@image_router.get("", include_in_schema=False)
@image_router.delete("", include_in_schema=False)
async def image_without_id(request: Request):
    """Reject image requests that do not name a file."""
    context = create_context_from_request(request)
    raise LoggedHTTPException(status_code=400, detail=ErrorMessages.MISSING_FILE_ID, context=context)


@image_router.get("/{file_id}", response_class=Response)
async def get_image(
    file_id: str,
    request: Request,
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Serve stored image bytes with their original content type."""
    context = create_context_from_request(request)
    context.metadata["file_id"] = file_id

    if not file_id.strip():
        raise LoggedHTTPException(status_code=400, detail=ErrorMessages.MISSING_FILE_ID, context=context)

    try:
        blob = await blob_store.retrieve(file_id)
    except ResourceNotFoundError as e:
        raise LoggedHTTPException(status_code=404, detail=ErrorMessages.IMAGE_NOT_FOUND, context=context) from e
    except StorageTimeoutError as e:
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.RETRIEVE_IMAGE_TIMEOUT, context=context) from e
    except StorageError as e:
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.RETRIEVE_IMAGE_FAILED, context=context) from e

    return Response(
        content=blob.content,
        media_type=blob.content_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )


@image_router.delete("/{file_id}", response_model=DeleteResponse)
async def delete_image(
    file_id: str,
    request: Request,
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete a stored image; any failure, including an unknown id, is a 500."""
    context = create_context_from_request(request)
    context.metadata["file_id"] = file_id

    if not file_id.strip():
        raise LoggedHTTPException(status_code=400, detail=ErrorMessages.MISSING_FILE_ID, context=context)

    if not await blob_store.delete(file_id):
        raise LoggedHTTPException(status_code=500, detail=ErrorMessages.DELETE_IMAGE_FAILED, context=context)

    return {"success": True, "message": "Image deleted successfully"}
