from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from recircle.core.deps import get_blob_store
from recircle.services.blob_store import BlobStore, make_image_key
from recircle.services.errors import BlobRejected, BlobUnavailable

router = APIRouter(
    prefix="/listing-images",
    tags=["listings-images"],
)


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_listing_image(
    file: UploadFile = File(...),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    Stand-alone upload: stores the image and returns its URL, which a client
    can then send as image_url when creating the listing.
    """
    key = make_image_key(file.filename or "image")
    contents = file.file.read()

    try:
        url = blob_store.upload(contents, key)
    except BlobRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BlobUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {"key": key, "url": url}
