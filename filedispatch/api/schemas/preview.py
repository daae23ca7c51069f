from typing import List

from pydantic import Field

from filedispatch.api.schemas.base import CamelModel


class PreviewItem(CamelModel):
    file_path: str
    matched: bool
    condition_results: List[bool] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)


class PreviewFileRequest(CamelModel):
    file_path: str
