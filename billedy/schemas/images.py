from pydantic import BaseModel, model_validator


class ImageUploadRequest(BaseModel):
    data: str
    folder: str | None = None


class ImageReplaceRequest(BaseModel):
    data: str
    previous_url: str | None = None
    folder: str | None = None


class ImageUploadResponse(BaseModel):
    url: str
    public_id: str


class ImageDeleteRequest(BaseModel):
    url: str | None = None
    public_id: str | None = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "ImageDeleteRequest":
        if (self.url is None) == (self.public_id is None):
            raise ValueError("Provide exactly one of url or public_id")
        return self


class ImageDeleteResponse(BaseModel):
    deleted: bool
    public_id: str | None = None
