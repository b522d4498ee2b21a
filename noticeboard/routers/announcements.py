from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from noticeboard.domain.announcements import CATEGORIES, AnnouncementValidationError
from noticeboard.domain.users import User
from noticeboard.repositories.json_storage import StorageError
from noticeboard.routers.deps import get_announcement_service, get_image_store, require_admin
from noticeboard.services.announcement_service import AnnouncementService
from noticeboard.services.image_store import ImageRejectedError, LocalImageStore

router = APIRouter(prefix="/api", tags=["announcements"])


class SummarizeRequest(BaseModel):
    text: str = ""


async def _store_image(image: Optional[UploadFile], images: LocalImageStore) -> Optional[str]:
    if image is None or not image.filename:
        return None
    data = await image.read()
    try:
        return await run_in_threadpool(images.save, image.filename, image.content_type, data)
    except ImageRejectedError as exc:
        raise HTTPException(400, exc.message)


async def _persist(images: LocalImageStore, image_url: Optional[str], write, /, *args, **kwargs):
    """Run a blocking service write in the threadpool; drop the new upload if it fails."""
    try:
        return await run_in_threadpool(write, *args, **kwargs)
    except (StorageError, AnnouncementValidationError):
        images.discard(image_url)
        raise


@router.get("/announcements")
def list_announcements(
    category: Optional[str] = None,
    q: Optional[str] = None,
    service: AnnouncementService = Depends(get_announcement_service),
):
    if category and category not in CATEGORIES:
        raise HTTPException(400, f"Category must be one of: {', '.join(CATEGORIES)}")
    return [a.to_document() for a in service.list_announcements(category=category, query=q)]


@router.get("/announcements/{announcement_id}")
def get_announcement(announcement_id: str, service: AnnouncementService = Depends(get_announcement_service)):
    item = service.get_announcement(announcement_id)
    if item is None:
        raise HTTPException(404, "Announcement not found")
    return item.to_document()


@router.post("/announcements", status_code=201)
async def create_announcement(
    user: User = Depends(require_admin),
    service: AnnouncementService = Depends(get_announcement_service),
    images: LocalImageStore = Depends(get_image_store),
    title: str = Form(""),
    content: str = Form(""),
    category: str = Form(""),
    event_start_date: Optional[str] = Form(None, alias="eventStartDate"),
    event_end_date: Optional[str] = Form(None, alias="eventEndDate"),
    image: Optional[UploadFile] = File(None),
):
    fields = {
        "title": title,
        "content": content,
        "category": category,
        "event_start_date": event_start_date,
        "event_end_date": event_end_date,
    }
    try:
        # Reject bad fields before the upload touches disk.
        service.validate_new(user, fields)
        image_url = await _store_image(image, images)
        item = await _persist(images, image_url, service.create_announcement, user, fields, image_url=image_url)
    except AnnouncementValidationError as exc:
        raise HTTPException(400, exc.message)
    return item.to_document()


@router.put("/announcements/{announcement_id}")
async def update_announcement(
    announcement_id: str,
    _user: User = Depends(require_admin),
    service: AnnouncementService = Depends(get_announcement_service),
    images: LocalImageStore = Depends(get_image_store),
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    event_start_date: Optional[str] = Form(None, alias="eventStartDate"),
    event_end_date: Optional[str] = Form(None, alias="eventEndDate"),
    image: Optional[UploadFile] = File(None),
):
    fields = {
        "title": title,
        "content": content,
        "category": category,
        "event_start_date": event_start_date,
        "event_end_date": event_end_date,
    }
    try:
        service.validate_changes(fields)
        if await run_in_threadpool(service.get_announcement, announcement_id) is None:
            raise HTTPException(404, "Announcement not found")
        image_url = await _store_image(image, images)
        item = await _persist(
            images, image_url, service.update_announcement, announcement_id, fields, image_url=image_url
        )
    except AnnouncementValidationError as exc:
        raise HTTPException(400, exc.message)
    if item is None:
        # deleted between the existence check and the write
        images.discard(image_url)
        raise HTTPException(404, "Announcement not found")
    return item.to_document()


@router.delete("/announcements/{announcement_id}")
def delete_announcement(
    announcement_id: str,
    _user: User = Depends(require_admin),
    service: AnnouncementService = Depends(get_announcement_service),
):
    if not service.delete_announcement(announcement_id):
        raise HTTPException(404, "Announcement not found")
    return {"message": "Announcement deleted successfully"}


@router.post("/summarize")
def summarize(
    payload: SummarizeRequest,
    _user: User = Depends(require_admin),
    service: AnnouncementService = Depends(get_announcement_service),
):
    try:
        summary = service.summarize_text(payload.text)
    except AnnouncementValidationError as exc:
        raise HTTPException(400, exc.message)
    if summary is None:
        return {
            "summary": None,
            "message": "AI summarization is not available. Please add your announcement content manually.",
        }
    return {"summary": summary}
