from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Card ---

class CardCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)


class CardUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)


class CardResponse(CamelModel):
    id: str
    title: str
    description: str
    file_key: str | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Files ---

@dataclass(frozen=True)
class UploadedFile:
    """A file received at the HTTP boundary, already read into memory."""
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


class FileUrlResponse(BaseModel):
    url: str


# --- Misc ---

class MessageResponse(BaseModel):
    message: str
