"""Profile models for the profile registry.

Contract:
- Inputs: Raw profile data from the profile store or callers
- Outputs: Validated model instances
- Side Effects: None (pure data structures)
"""

from enum import Enum
from enum import IntEnum
from typing import Any

from pydantic import Field
from pydantic import field_validator

from connection_profiles.models.base import CamelCaseModel


class ValidProfile(IntEnum):
    """Registry-wide validation flag, set by the most recent session check."""

    VALID = 0
    INVALID = -1


class ProfileStatus(str, Enum):
    """Live status of a profile as reported by its capability."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Profile(CamelCaseModel):
    """A named, typed bundle of connection fields.

    The name is the global identity key: no two loaded profiles share a
    name, regardless of type. Fields are type specific and are validated
    against the type's schema by the store and the capability, not here.
    """

    name: str = Field(description="Profile name (unique within the loaded set)")
    type: str = Field(description="Profile type (selects store, capability and default slot)")
    fields: dict[str, Any] = Field(default_factory=dict, description="Type-specific connection fields")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Profile name cannot be empty")
        return v.strip()


class ProfileValidation(CamelCaseModel):
    """Result of a single session validation.

    Never persisted. `session` is whatever the capability returned and is
    only set when the status is active.
    """

    status: ProfileStatus = Field(description="Active or inactive")
    name: str = Field(description="Profile that was checked")
    session: Any = Field(default=None, description="Validated session (active only)")


class ProfileUpdate(CamelCaseModel):
    """Field-level change request for an existing profile.

    A field set to None in `profile` deletes that field from the stored
    profile; all other fields overwrite.
    """

    name: str = Field(description="Profile to update")
    type: str | None = Field(default=None, description="Profile type; resolved by name when omitted")
    profile: dict[str, Any] = Field(default_factory=dict, description="Field patch")


class ProfileTypeSchema(CamelCaseModel):
    """JSON-schema-like description of a profile type's fields."""

    type: str = "object"
    title: str | None = None
    description: str | None = None
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ProfileTypeConfiguration(CamelCaseModel):
    """Declared configuration of one profile type, as found in a type's metadata file."""

    type: str = Field(description="Profile type this configuration declares")
    schema_: ProfileTypeSchema = Field(
        default_factory=ProfileTypeSchema, alias="schema", description="Field schema for the type"
    )
