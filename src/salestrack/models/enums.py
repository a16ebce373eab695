"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class Category(str, enum.Enum):
    """Collection categories tracked in sales history."""

    MHB = "MHB"
    MLP = "MLP"
    MSH = "MSH"
    MUM = "MUM"

