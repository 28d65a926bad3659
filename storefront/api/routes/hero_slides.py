"""Homepage hero slide routes"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, UploadFile, File, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin, get_storage_service
from ...api.serializers import iso
from ...application.dtos.content_dtos import HeroSlideCreateDto, HeroSlideUpdateDto, ReorderSlidesDto
from ...core.config import settings
from ...core.errors import ApiError, bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.external_services.storage_service import StorageService, StorageError, public_object_url
from ...infrastructure.orm.content_model import HeroSlideModel

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_slide(slide: HeroSlideModel) -> Dict[str, Any]:
    image_url = slide.image_url
    if not image_url and slide.image_path:
        image_url = public_object_url(settings.HERO_IMAGES_BUCKET, slide.image_path)
    return {
        "id": str(slide.id),
        "title": slide.title,
        "subtitle": slide.subtitle,
        "image_url": image_url,
        "image_path": slide.image_path,
        "cta_label": slide.cta_label,
        "cta_href": slide.cta_href,
        "position": slide.position,
        "is_active": slide.is_active,
        "created_at": iso(slide.created_at),
    }


def _get_slide(db: Session, slide_id: str) -> HeroSlideModel:
    slide_uuid = parse_uuid(slide_id)
    slide = db.get(HeroSlideModel, slide_uuid) if slide_uuid else None
    if not slide:
        raise not_found("Slide not found")
    return slide


@router.get("")
async def list_slides(db: Session = Depends(get_db)):
    """Active slides by position"""
    slides = db.query(HeroSlideModel).filter(
        HeroSlideModel.is_active.is_(True)
    ).order_by(HeroSlideModel.position, HeroSlideModel.created_at).all()
    return ok([serialize_slide(slide) for slide in slides])


@router.get("/admin")
async def admin_list_slides(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    slides = db.query(HeroSlideModel).order_by(HeroSlideModel.position, HeroSlideModel.created_at).all()
    return ok([serialize_slide(slide) for slide in slides])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_slide(
    request: HeroSlideCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    values = request.model_dump()
    if values["position"] is None:
        max_position = db.query(func.max(HeroSlideModel.position)).scalar()
        values["position"] = 0 if max_position is None else max_position + 1

    slide = HeroSlideModel(**values)
    db.add(slide)
    db.commit()
    db.refresh(slide)
    return ok(serialize_slide(slide))


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_slide_image(
    file: UploadFile = File(...),
    admin: Profile = Depends(get_current_admin),
    storage_service: StorageService = Depends(get_storage_service)
):
    """Store a slide image; the returned path is then saved on a slide"""
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise bad_request(f"Unsupported image type: {file.content_type}", code="INVALID_FILE_TYPE")
    data = await file.read()
    if len(data) > settings.MAX_FILE_SIZE:
        raise bad_request("File too large", code="FILE_TOO_LARGE")

    try:
        path = await storage_service.upload_file(
            bucket=settings.HERO_IMAGES_BUCKET,
            data=data,
            filename=file.filename or "slide",
            content_type=file.content_type,
        )
    except StorageError as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "STORAGE_ERROR", str(e))
    return ok({"image_path": path, "image_url": public_object_url(settings.HERO_IMAGES_BUCKET, path)})


@router.post("/reorder")
async def reorder_slides(
    request: ReorderSlidesDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    updated = 0
    for entry in request.order:
        slide = db.get(HeroSlideModel, entry.id)
        if slide:
            slide.position = entry.position
            updated += 1
    db.commit()
    return ok({"updated": updated})


@router.patch("/{slide_id}")
async def update_slide(
    slide_id: str,
    request: HeroSlideUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    slide = _get_slide(db, slide_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    for field, value in updates.items():
        setattr(slide, field, value)
    db.commit()
    db.refresh(slide)
    return ok(serialize_slide(slide))


@router.delete("/{slide_id}")
async def delete_slide(
    slide_id: str,
    admin: Profile = Depends(get_current_admin),
    storage_service: StorageService = Depends(get_storage_service),
    db: Session = Depends(get_db)
):
    """Delete a slide and its stored image"""
    slide = _get_slide(db, slide_id)
    image_path = slide.image_path
    db.delete(slide)
    db.commit()
    if image_path:
        await storage_service.delete_file(settings.HERO_IMAGES_BUCKET, image_path)
    return ok({"deleted": True, "id": slide_id})
