# frontend/errors.py
"""Exceptions raised by the dashboard components and their collaborators."""


class SiteValidationError(Exception):
    """A site draft failed validation. ``field_errors`` maps field -> message."""

    def __init__(self, field_errors):
        self.field_errors = dict(field_errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.field_errors.items()))


class PersistenceError(Exception):
    """The sites backend rejected or could not receive a record."""


class AnalyticsUnavailable(Exception):
    """The analytics snapshot could not be fetched."""
