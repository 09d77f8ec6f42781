"""Models describing consumer trees and their persisted settings."""

from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class TreeType(str, Enum):
    """Presentation domain of a consumer store.

    The value is the persisted settings namespace owned by that domain.
    """

    DATASET = "Zowe-DS-Persistent"
    USS = "Zowe-USS-Persistent"
    JOB = "Zowe-Jobs-Persistent"

    @property
    def namespace(self) -> str:
        return self.value


class TreeSettings(BaseModel):
    """Persisted sessions and favorites for one tree domain.

    Read and written as a whole object; there is no partial-field update.
    Keys other than sessions and favorites are kept as they are.
    """

    model_config = ConfigDict(extra="allow")

    sessions: list[str] = Field(default_factory=list, description="Profile names shown as sessions")
    favorites: list[str] = Field(default_factory=list, description="Favorite labels, '[profile]: item'")
