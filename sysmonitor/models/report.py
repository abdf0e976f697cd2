from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class Row(BaseModel):
    label: str
    values: list[str] = Field(default_factory=list)
    children: Table | None = None


class Table(BaseModel):
    columns: list[str] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)


class Section(BaseModel):
    title: str
    table: Table = Field(default_factory=Table)


class Report(BaseModel):
    """Display-ready document derived from a Snapshot."""

    title: str = "System Information"
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    notice: str | None = None
    sections: list[Section] = Field(default_factory=list)

    def section(self, title: str) -> Section:
        for section in self.sections:
            if section.title == title:
                return section
        raise KeyError(title)


Row.model_rebuild()
