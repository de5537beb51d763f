"""Record models. Importing this package registers every table with SQLModel metadata."""

from techwriter.models.preference import Preference
from techwriter.models.project import Project
from techwriter.models.summary import WeeklySummary
from techwriter.models.team import Team
from techwriter.models.time_block import ActiveTimer, TimeBlock

__all__ = [
    "ActiveTimer",
    "Preference",
    "Project",
    "Team",
    "TimeBlock",
    "WeeklySummary",
]
