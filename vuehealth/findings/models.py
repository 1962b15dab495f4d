# Pydantic data models: rule findings, engine messages, canonical diagnostics and scores.

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["error", "warning"]


class Location(BaseModel):
    """Where in the source a finding was reported (file, line, column)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    snippet: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True}


class Finding(BaseModel):
    """A single issue reported by a rule (e.g. reactive() destructured at line 4)."""

    rule_id: str
    message_id: str
    message: str
    location: Location
    severity: Severity = "warning"
    data: dict[str, str] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True}


class LintMessage(BaseModel):
    """One engine message; severity uses the linter convention 1 = warn, 2 = error."""

    rule_id: Optional[str] = None
    severity: int = Field(1, ge=0, le=2)
    message: str
    line: int = 0
    column: int = 0


class LintResult(BaseModel):
    """All engine messages for one scanned file."""

    file_path: str
    messages: list[LintMessage] = Field(default_factory=list)


class Diagnostic(BaseModel):
    """Canonical finding shared by every analyzer after normalization."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_path: str
    plugin: str = Field(..., min_length=1)
    rule: str
    severity: Severity
    message: str
    help: str = ""
    line: int = Field(0, ge=0, description="1-based; 0 means no specific line")
    column: int = Field(0, ge=0)
    category: str = "Other"
    weight: Optional[float] = None

    @property
    def rule_key(self) -> str:
        return f"{self.plugin}/{self.rule}"


class ScoreResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    label: str


class IgnoreConfig(BaseModel):
    """Rules (bare id or plugin/rule) and path substrings to drop from results."""

    rules: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
