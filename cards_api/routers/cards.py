from fastapi import APIRouter, Depends, File, UploadFile

from cards_api.config import settings
from cards_api.dependencies import get_card_service
from cards_api.exceptions import FileTooLargeError
from cards_api.schemas import (
    CardCreate,
    CardResponse,
    CardUpdate,
    FileUrlResponse,
    MessageResponse,
    UploadedFile,
)
from cards_api.services.card_service import CardService

router = APIRouter(prefix="/api/v1/cards", tags=["cards"])


async def _read_upload(upload: UploadFile | None) -> UploadedFile | None:
    """Read a multipart upload into an UploadedFile, enforcing the size limit."""
    if upload is None:
        return None
    content = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise FileTooLargeError(upload.size or len(content), settings.MAX_UPLOAD_SIZE)
    return UploadedFile(
        content=content,
        filename=upload.filename or "file",
        content_type=upload.content_type or "application/octet-stream",
    )


@router.post("", status_code=201, response_model=CardResponse)
async def create_card(data: CardCreate, service: CardService = Depends(get_card_service)):
    return await service.create(data)

@router.get("", response_model=list[CardResponse])
async def list_cards(service: CardService = Depends(get_card_service)):
    return await service.list()

@router.get("/{card_id}", response_model=CardResponse)
async def get_card(card_id: str, service: CardService = Depends(get_card_service)):
    return await service.get(card_id)

@router.patch("/{card_id}", response_model=CardResponse)
async def update_card(card_id: str, data: CardUpdate, service: CardService = Depends(get_card_service)):
    return await service.update(card_id, data)

@router.delete("/{card_id}", response_model=MessageResponse)
async def delete_card(card_id: str, service: CardService = Depends(get_card_service)):
    await service.remove(card_id)
    return MessageResponse(message="Card deleted successfully")

@router.post("/{card_id}/upload", response_model=CardResponse)
async def upload_card_file(
    card_id: str,
    file: UploadFile | None = File(None),
    service: CardService = Depends(get_card_service),
):
    return await service.upload_file(card_id, await _read_upload(file))

@router.get("/{card_id}/file-url", response_model=FileUrlResponse)
async def get_card_file_url(card_id: str, service: CardService = Depends(get_card_service)):
    return await service.get_file_url(card_id)
