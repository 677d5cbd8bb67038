"""Base classes and type system for equity domain models.

This module provides the shared base model and the annotated scalar types
(slices, cents, percentages, identifiers) used across the equity schemas.
"""

from typing import Annotated, Any
from pydantic import BaseModel, Field, ConfigDict, ValidationError

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all equity domain models.

    Shared configuration:
    - Validation on assignment, so edits made by form collaborators are
      checked the same way as construction
    - Enum/Literal values serialized as plain strings
    - A rejected edit leaves the instance unchanged
    """

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
        populate_by_name=True,
    )

    def __setattr__(self, name: str, value: Any) -> None:
        # Model validators run after the new value is written; roll it back
        # when they reject the edit.
        if name not in type(self).model_fields:
            super().__setattr__(name, value)
            return

        previous = dict(self.__dict__)
        previous_fields_set = set(self.__pydantic_fields_set__)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            object.__setattr__(self, "__dict__", previous)
            object.__setattr__(self, "__pydantic_fields_set__", previous_fields_set)
            raise


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

SliceCount = Annotated[
    int,
    Field(ge=0, description="Number of equity slices (non-negative integer)")
]

Cents = Annotated[
    int,
    Field(description="Currency amount in integer minor units (may be negative)")
]

NonNegativeCents = Annotated[
    int,
    Field(ge=0, description="Currency amount in integer minor units (non-negative)")
]

PercentValue = Annotated[
    float,
    Field(ge=0, le=100, description="Percentage on a 0-100 scale")
]

MonthCount = Annotated[
    int,
    Field(ge=0, description="Whole calendar months")
]


# =============================================================================
# ID Conventions
# =============================================================================

ContributorId = Annotated[
    str,
    Field(
        min_length=1,
        description="Opaque unique contributor identifier (UUID or user-defined)"
    )
]

EntryId = Annotated[
    str,
    Field(
        min_length=1,
        description="Unique valuation history entry identifier"
    )
]
