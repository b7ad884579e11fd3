"""Pydantic models for the parts of an audit result used by the CSV report."""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field


class ReportModel(BaseModel):
    """Base model tolerating the many fields the reports do not read."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Audit(ReportModel):
    """A single audit outcome."""

    id: str
    title: str
    score: float | None = None
    score_display_mode: str = Field(..., alias="scoreDisplayMode")


class AuditRef(ReportModel):
    """Reference from a category to one of its audits."""

    id: str


class Category(ReportModel):
    """A scored group of audits."""

    title: str
    audit_refs: Sequence[AuditRef] = Field(default_factory=list, alias="auditRefs")


class AuditResult(ReportModel):
    """Audit result: categories in display order plus all audits by id."""

    categories: Mapping[str, Category] = Field(default_factory=dict)
    audits: Mapping[str, Audit] = Field(default_factory=dict)
