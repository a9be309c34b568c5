# pickeasy/utils/uploads.py
import logging
import mimetypes
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from pickeasy.errors import UploadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

# Stored extension follows the checked content type, never the client filename
IMAGE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
}


@dataclass
class StoredUpload:
    filename: str
    path: Path
    content_type: str
    size: int


def _open_unique(upload_dir: Path, ext: str):
    """Open a new file named ``<time_ns><ext>``; bump the token when the name is taken."""
    token = time.time_ns()
    while True:
        path = upload_dir / f"{token}{ext}"
        try:
            return path, open(path, "xb")
        except FileExistsError:
            token += 1


def remove_upload(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


async def store_upload(
    file: UploadFile,
    upload_dir: Path,
    allowed_types: Iterable[str],
    max_bytes: int,
) -> StoredUpload:
    if file.content_type not in allowed_types:
        logger.info("Rejected upload %r with type %s", file.filename, file.content_type)
        raise UploadError("Only .png and .jpg images are allowed!")

    ext = IMAGE_EXTENSIONS.get(file.content_type) or mimetypes.guess_extension(file.content_type) or ""
    path, out = _open_unique(upload_dir, ext)
    size = 0
    try:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                raise UploadError("File too large", status_code=413)
            await run_in_threadpool(out.write, chunk)
    except BaseException:
        out.close()
        remove_upload(path)
        raise
    finally:
        await file.close()
    out.close()

    logger.info("Stored upload %s (%d bytes)", path.name, size)
    return StoredUpload(filename=path.name, path=path, content_type=file.content_type, size=size)


def single_upload(field_name: str):
    """Build a dependency accepting at most one image under ``field_name``.

    The stored file is removed again if anything later in the request fails.
    """

    async def dependency(request: Request):
        content_type = request.headers.get("content-type", "")
        if not content_type.startswith("multipart/form-data"):
            yield None
            return

        settings = request.app.state.settings
        form = await request.form()
        files = [(key, value) for key, value in form.multi_items() if isinstance(value, UploadFile)]
        for key, _ in files:
            if key != field_name:
                raise UploadError(f"Unexpected field: {key}")
        if len(files) > 1:
            raise UploadError(f"Unexpected field: {field_name}")

        stored: Optional[StoredUpload] = None
        if files:
            stored = await store_upload(
                files[0][1],
                Path(settings.UPLOAD_DIR),
                settings.ALLOWED_IMAGE_TYPES,
                settings.MAX_UPLOAD_BYTES,
            )
        try:
            yield stored
        except Exception:
            if stored is not None:
                remove_upload(stored.path)
            raise

    return dependency
