"""Pydantic models shared across the commit generation pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Provider(Enum):
    """Supported text-generation backends, keyed by specifier tag."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class ModelSpec(BaseModel):
    """Parsed ``provider:model`` specifier."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider: Provider
    model_name: str = Field(min_length=1)

    def __str__(self) -> str:
        return f"{self.provider.value}:{self.model_name}"


class ClientConfig(BaseModel):
    """Settings owned by a single provider client."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str
    max_output_tokens: int = Field(ge=1)
    temperature: float = 0.2
    credential: str = Field(repr=False)


class UsageInfo(BaseModel):
    """Token counts reported for one generation call.

    ``total_tokens`` defaults to the sum of its parts. A total supplied by the
    vendor is stored as given, even if it differs from that sum.
    """

    model_config = ConfigDict(frozen=True)

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def fill_total(cls, data: Any) -> Any:
        """Compute the total when the caller did not provide one."""
        if isinstance(data, dict) and data.get("total_tokens") is None:
            data = dict(data)
            data["total_tokens"] = int(data.get("input_tokens") or 0) + int(
                data.get("output_tokens") or 0
            )
        return data

    @property
    def is_consistent(self) -> bool:
        return self.total_tokens == self.input_tokens + self.output_tokens

    def __add__(self, other: UsageInfo) -> UsageInfo:
        if not isinstance(other, UsageInfo):
            return NotImplemented
        return UsageInfo(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class GenerateResult(BaseModel):
    """Text and usage returned by one ``generate`` call."""

    model_config = ConfigDict(frozen=True)

    message: str
    usage: UsageInfo


class AppContext(BaseModel):
    """Repository context gathered once per run and fed to prompt assembly."""

    model_config = ConfigDict(frozen=True)

    root_dir: str = ""
    branch_name: str
    scopes_text: str = ""
    is_workspace_repo: bool = False
    diff_text: str
    modified_files: list[str] = Field(default_factory=list)
    recent_commit_subjects: list[str] = Field(default_factory=list)


class GenerationOutcome(BaseModel):
    """Final output of a pipeline run."""

    model_config = ConfigDict(frozen=True)

    message: str
    analysis_summary: str = ""
    analysis_usage: UsageInfo | None = None
    generation_usage: UsageInfo

    @property
    def total_usage(self) -> UsageInfo:
        return aggregate_usage(self.analysis_usage, self.generation_usage)


def aggregate_usage(
    analysis_usage: UsageInfo | None, generation_usage: UsageInfo
) -> UsageInfo:
    """Sum token counts across the optional analysis call and the generation call."""
    if analysis_usage is None:
        return generation_usage
    return analysis_usage + generation_usage
