"""Exceptions raised by the ablation pipeline."""


class AblationError(ValueError):
    """Base class for data problems that make an analysis meaningless."""


class NoMatchingColumnsError(AblationError):
    """A feature-family prefix matched no column in the view."""

    def __init__(self, family: str):
        self.family = family
        super().__init__(f"no matching columns for family {family!r}")


class DegeneratePartitionError(AblationError):
    """A view cannot be fit: too few labels or no predictor columns."""


class DatasetValidationError(AblationError):
    """Loaded data violates the dataset invariants."""
