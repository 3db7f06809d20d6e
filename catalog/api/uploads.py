"""
File upload endpoints.

Files land in UPLOAD_DIR under collision-free names and are served back by
stored name.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from catalog.services.storage_service import LocalFileStorage
from catalog.utils.runtime import upload_dir

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


def get_upload_storage() -> LocalFileStorage:
    return LocalFileStorage(upload_dir())


@router.post("")
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    storage: LocalFileStorage = Depends(get_upload_storage),
):
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")
    stored = await storage.save(file)
    return {"message": "File uploaded successfully", "filename": stored.filename}


@router.post("/multiple")
async def upload_multiple_files(
    request: Request,
    storage: LocalFileStorage = Depends(get_upload_storage),
):
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request is not multipart")

    form = await request.form()
    uploaded = []
    saved = []
    try:
        for fieldname, value in form.multi_items():
            if not isinstance(value, StarletteUploadFile):
                continue
            try:
                stored = await storage.save(value)
            except Exception:
                # The request fails as a whole; drop what was already written
                for earlier in saved:
                    storage.delete(earlier.filename)
                raise
            saved.append(stored)
            uploaded.append({
                "fieldname": fieldname,
                "filename": stored.filename,
                "originalName": stored.original_name,
                "mimetype": stored.content_type,
                "url": f"/images/{stored.filename}",
            })
    finally:
        await form.close()

    if not uploaded:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files provided")
    return {"message": "Files uploaded successfully", "files": uploaded}


@router.get("/{filename}")
def get_file(filename: str, storage: LocalFileStorage = Depends(get_upload_storage)):
    path = storage.resolve(filename)
    if path is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File not found")
    return FileResponse(path)
