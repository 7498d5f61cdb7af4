"""
Pydantic request bodies for the API.

Bodies use the camelCase names the web client sends; services receive
snake_case dictionaries via ``model_dump(exclude_unset=True)``.
"""
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class VideoBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    url: Optional[str] = None
    video_url: Optional[str] = Field(None, alias="videoUrl")
    duration: Optional[str] = None
    views: Optional[Union[int, str]] = None
    category: Optional[str] = Field(None, max_length=50)
    year: Optional[str] = Field(None, max_length=4)
    rating: Optional[str] = None
    upload_date: Optional[str] = Field(None, alias="uploadDate")


class VideoCreate(VideoBase):
    id: Optional[str] = Field(None, max_length=100)


class VideoUpdate(VideoBase):
    pass


class CommentCreate(BaseModel):
    # Length and emptiness are checked after sanitization by the service.
    text: Optional[str] = None


class PlaylistCreate(BaseModel):
    name: Optional[str] = None


class PlaylistUpdate(BaseModel):
    name: Optional[str] = None
    thumbnail: Optional[str] = None


class PlaylistMembership(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(None, alias="videoId")
