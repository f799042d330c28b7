"""
Tracking models.

The tracking store is a single JSON document:
  {"plugins": [TrackedPlugin, ...]}
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

SourceType = Literal["git", "local"]
RegistrationType = Literal["single", "marketplace"]


class TrackedPlugin(BaseModel):
    """A translated plugin that pluginx keeps up to date."""

    name: str
    source_type: SourceType = Field(alias="sourceType")
    source_url: Optional[str] = Field(alias="sourceUrl", default=None)
    source_path: str = Field(alias="sourcePath")
    output_path: str = Field(alias="outputPath")
    type: RegistrationType = "single"
    last_translated: str = Field(alias="lastTranslated")  # ISO timestamp
    source_commit: Optional[str] = Field(alias="sourceCommit", default=None)

    model_config = {"populate_by_name": True}


class TrackingState(BaseModel):
    plugins: list[TrackedPlugin] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2) + "\n"
