"""Serves stored images back to clients."""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from bandstand.services.blob_store import BlobStore, get_blob_store

router = APIRouter()


@router.get("/uploads/{filename}", response_class=FileResponse)
def get_upload(filename: str, blobs: BlobStore = Depends(get_blob_store)):
    return FileResponse(blobs.path_for(filename))
