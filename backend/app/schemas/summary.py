from pydantic import BaseModel, ConfigDict, Field


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_content: str = Field(alias="fileContent")
    file_name: str | None = Field(default=None, alias="fileName")
    language: str | None = "en"
    custom_prompt: str | None = Field(default="", alias="customPrompt")
    file_id: str | None = Field(default=None, alias="fileId")


class SummarizeResponse(BaseModel):
    summary: str
