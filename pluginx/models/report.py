"""
Translation report models.

Serialized to .translation-report.json next to every generated extension,
with camelCase keys.
"""

from typing import Optional

from pydantic import BaseModel, Field

META_FILE = ".pluginx-meta.json"
REPORT_FILE = ".translation-report.json"


class ComponentSummary(BaseModel):
    """A component that was written to the output."""

    type: str
    name: str
    notes: Optional[str] = None


class SkippedComponent(BaseModel):
    """A component intentionally left out of the output."""

    type: str
    name: str
    reason: str


class ParityResult(BaseModel):
    passed: bool
    errors: list[str] = Field(default_factory=list)


class CliValidationResult(BaseModel):
    passed: bool
    error: Optional[str] = None


class ValidationResult(BaseModel):
    valid: bool
    parity: ParityResult
    gemini_cli: Optional[CliValidationResult] = Field(alias="geminiCli", default=None)

    model_config = {"populate_by_name": True}


class TranslationReport(BaseModel):
    source: str
    target: str
    plugin_name: str = Field(alias="pluginName")
    translated: list[ComponentSummary] = Field(default_factory=list)
    skipped: list[SkippedComponent] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    validation: Optional[ValidationResult] = None

    model_config = {"populate_by_name": True}

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2) + "\n"


class TranslationMeta(BaseModel):
    """Contents of the .pluginx-meta.json sidecar."""

    source: str
    target: str
    translated_at: Optional[str] = Field(alias="translatedAt", default=None)
    translator_version: Optional[str] = Field(alias="translatorVersion", default=None)

    model_config = {"populate_by_name": True}


class MarketplaceFailure(BaseModel):
    """A marketplace member that could not be translated."""

    name: str
    error: str


class MarketplaceResult(BaseModel):
    name: str
    reports: list[TranslationReport] = Field(default_factory=list)
    failures: list[MarketplaceFailure] = Field(default_factory=list)
