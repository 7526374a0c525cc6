"""Time entry, project, and holiday records."""

from pydantic import BaseModel


class TimeEntryModel(BaseModel):
    """Hours logged against a project and task description on one day."""

    id: str
    date: str
    project: str
    description: str
    hours: float
    created_at: str | None = None
    updated_at: str | None = None


class ProjectModel(BaseModel):
    """A client or internal project that time is logged against."""

    id: str
    name: str
    description: str = ""
    is_active: bool = True
    color: str = "#3b82f6"
    created_at: str | None = None
    updated_at: str | None = None
