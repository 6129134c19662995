from __future__ import annotations

from typing import Annotated

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator

NonNegativeInt = Annotated[int, Field(ge=0)]


def _normalize_extension_list(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()

    for item in values:
        ext = (item or "").strip().lstrip(".").casefold()
        if not ext or ext in seen:
            continue
        seen.add(ext)
        out.append(ext)

    return out


def _normalize_term_list(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()

    for item in values:
        term = (item or "").strip()
        if not term:
            continue
        key = term.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(term)

    return out


class SaveSettings(BaseModel):
    """Switches read by the normalizer while building a result."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    save_post_cover: bool = True
    save_text: bool = False
    save_link: bool = True


class FiltersConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed_extensions: list[str] = Field(default_factory=list)  # empty allows all
    blocked_extensions: list[str] = Field(default_factory=list)

    min_fee: NonNegativeInt | None = None
    max_fee: NonNegativeInt | None = None

    date_from: AwareDatetime | None = None
    date_to: AwareDatetime | None = None

    title_include: list[str] = Field(default_factory=list)
    title_exclude: list[str] = Field(default_factory=list)

    exclude_post_ids: list[str] = Field(default_factory=list)

    @field_validator("allowed_extensions", "blocked_extensions")
    @classmethod
    def _normalize_extensions(cls, v: list[str]) -> list[str]:
        return _normalize_extension_list(v)

    @field_validator("title_include", "title_exclude")
    @classmethod
    def _normalize_titles(cls, v: list[str]) -> list[str]:
        return _normalize_term_list(v)

    @field_validator("exclude_post_ids", mode="before")
    @classmethod
    def _coerce_post_ids(cls, v: object) -> object:
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        return v

    @model_validator(mode="after")
    def _ranges_must_be_ordered(self) -> "FiltersConfig":
        if self.min_fee is not None and self.max_fee is not None and self.min_fee > self.max_fee:
            raise ValueError("min_fee must be <= max_fee")
        if self.date_from is not None and self.date_to is not None and self.date_from > self.date_to:
            raise ValueError("date_from must be <= date_to")
        return self


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    results_file: str = "results.jsonl"
    state_file: str = "state.sqlite"
    log_file: str = "run.log"

    @field_validator("results_file", "state_file", "log_file")
    @classmethod
    def _file_name_must_be_set(cls, v: str) -> str:
        name = (v or "").strip()
        if not name:
            raise ValueError("must be a non-empty file name")
        return name


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    save: SaveSettings = Field(default_factory=SaveSettings)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
