from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    size: int
    url: str
    uploaded_at: str = Field(alias="uploadedAt")
    summary: str | None = None
    summary_language: str | None = Field(default=None, alias="summaryLanguage")


class DeleteResponse(BaseModel):
    success: bool
