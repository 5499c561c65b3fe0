import io

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError
from sqlalchemy.orm import Session

from app.api.routes.halls import ALL_HALLS_CACHE_KEY, hall_cache_key
from app.core.dependencies import get_db, require_admin
from app.core.logging_config import get_logger
from app.core.redis import delete_cache
from app.models.user import User
from app.schemas.hall import HallEnvelope, HallOut
from app.services.bookings import get_active_hall
from app.utils.cloudinary_utils import upload_image

router = APIRouter(prefix="/halls", tags=["Hall Images"])
logger = get_logger()

ALLOWED_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
}


# =====================================================================
#                  CONVERT ANY IMAGE TO JPEG (AUTO-CONVERT)
# =====================================================================
def convert_to_jpeg(upload_file: UploadFile) -> bytes:
    contents = upload_file.file.read()

    try:
        img = Image.open(io.BytesIO(contents)).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise HTTPException(status_code=400, detail="Invalid image file")

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=90)
    buffer.seek(0)

    return buffer.read()


# =====================================================================
#                       UPLOAD IMAGE(S)
# =====================================================================
@router.post("/{hall_id}/images", response_model=HallEnvelope)
def upload_hall_images(
    hall_id: int,
    files: list[UploadFile] = File(...),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    hall = get_active_hall(db, hall_id)

    urls = []
    for file in files:
        if (file.content_type or "").lower() not in ALLOWED_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported file type {file.content_type}. Allowed: JPEG, JPG, PNG, WEBP"
            )

        result = upload_image(convert_to_jpeg(file), hall.id)
        if not result:
            raise HTTPException(status_code=502, detail="Cloud upload failed")

        urls.append(result["url"])

    # JSON column: assign a new list so the change is tracked
    hall.images = list(hall.images or []) + urls
    db.commit()
    db.refresh(hall)

    delete_cache(ALL_HALLS_CACHE_KEY, hall_cache_key(hall.id))
    logger.bind(log_type="admin").info(
        f"Hall Images Uploaded | Hall={hall.id} | Count={len(urls)} | Admin={admin.id}"
    )

    return {"hall": HallOut.model_validate(hall)}
