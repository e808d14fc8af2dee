# frontend/site_form.py
"""
Add-site form: draft state, validation schema and the submit workflow.

The controller knows nothing about Streamlit. It is driven by the page
(``open``/``update``/``submit``/``cancel``) and talks to two injected
collaborators:

- ``add_site(record)``: persists a validated ``SiteRecord``; any exception
  counts as a persistence failure.
- ``notifier``: anything with ``success(message)`` and ``error(message)``.
"""
import logging
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from frontend.errors import SiteValidationError

if TYPE_CHECKING:
    from frontend.notifications import Notifier

logger = logging.getLogger(__name__)

# Messages shown next to the offending input
FIELD_MESSAGES = {
    "name": "Site name is required",
    "latitude": "Latitude must be between -90 and 90",
    "longitude": "Longitude must be between -180 and 180",
    "altitude": "Altitude must be a number",
}

SUCCESS_MESSAGE = "Site added successfully"
FAILURE_MESSAGE = "Failed to add site"


@dataclass
class SiteDraft:
    """Unvalidated values as currently entered in the form."""

    name: str = ""
    description: str = ""
    latitude: Optional[float] = 0.0
    longitude: Optional[float] = 0.0
    altitude: Optional[float] = 0.0
    is_active: bool = True


class SiteRecord(BaseModel):
    """A site that passed validation and may be handed to the backend."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    description: Optional[str] = ""
    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)
    altitude: Optional[float] = Field(default=None, allow_inf_nan=False)
    is_active: bool = True


class ValidationResult(NamedTuple):
    record: Optional[SiteRecord]
    errors: Dict[str, str]

    @property
    def ok(self):
        return self.record is not None


def validate_site(draft) -> ValidationResult:
    """
    Validate a draft (``SiteDraft`` or mapping) without side effects.

    Returns the validated record, or one message per failing field.
    """
    data = asdict(draft) if isinstance(draft, SiteDraft) else dict(draft)
    try:
        return ValidationResult(SiteRecord.model_validate(data), {})
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "__root__"
            # First failure per field wins
            errors.setdefault(field, FIELD_MESSAGES.get(field, err["msg"]))
        return ValidationResult(None, errors)


def require_valid(draft) -> SiteRecord:
    """Like ``validate_site`` but raises ``SiteValidationError``."""
    result = validate_site(draft)
    if not result.ok:
        raise SiteValidationError(result.errors)
    return result.record


class SubmitState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class SiteFormController:
    """State machine behind the "Add New Site" dialog."""

    def __init__(self, add_site: Callable[[SiteRecord], object], notifier: "Notifier"):
        self._add_site = add_site
        self._notifier = notifier
        self.is_open = False
        self.queued = False
        self.state = SubmitState.IDLE
        self.last_outcome: Optional[SubmitState] = None
        self.draft = SiteDraft()
        self.errors: Dict[str, str] = {}

    @property
    def confirm_disabled(self) -> bool:
        return self.queued or self.state is SubmitState.SUBMITTING

    @property
    def confirm_label(self) -> str:
        return "Adding..." if self.confirm_disabled else "Add Site"

    def open(self):
        """Every opening starts from a blank draft."""
        if self.state is SubmitState.SUBMITTING:
            return
        self._reset()
        self.is_open = True

    def update(self, **values):
        """Edit draft fields; clears the stale error of each edited field."""
        unknown = set(values) - {f.name for f in fields(SiteDraft)}
        if unknown:
            raise TypeError(f"Unknown site fields: {sorted(unknown)}")
        self.draft = replace(self.draft, **values)
        for name in values:
            self.errors.pop(name, None)

    def cancel(self):
        """Discard the draft and close without persisting anything."""
        if self.state is SubmitState.SUBMITTING:
            return
        self._reset()
        self.is_open = False

    def queue_submit(self) -> bool:
        """
        First step of a submit from the page: validate and, when the draft is
        valid, queue it. A queued draft keeps the confirm button disabled
        until ``submit()`` has run, so the page can draw the disabled button
        before the blocking call.
        """
        if self.confirm_disabled:
            return False
        result = validate_site(self.draft)
        self.errors = result.errors
        self.queued = result.ok
        return self.queued

    def submit(self) -> bool:
        """
        Validate and persist the draft. Returns True when the site was added.

        Invalid drafts never reach ``add_site``. A failed ``add_site`` keeps
        the dialog open with the entered values so the user can retry.
        """
        if self.state is SubmitState.SUBMITTING:
            logger.warning("Ignoring submit while a site is already being added")
            return False

        self.queued = False
        result = validate_site(self.draft)
        if not result.ok:
            self.errors = result.errors
            return False
        self.errors = {}

        self.state = SubmitState.SUBMITTING
        try:
            self._add_site(result.record)
        except Exception:
            logger.exception("Error adding site %r", result.record.name)
            self.last_outcome = SubmitState.FAILED
            self.state = SubmitState.IDLE
            self._notifier.error(FAILURE_MESSAGE)
            return False

        self.last_outcome = SubmitState.SUCCESS
        self._reset()
        self.state = SubmitState.SUCCESS
        self.is_open = False
        self._notifier.success(SUCCESS_MESSAGE)
        return True

    def _reset(self):
        self.queued = False
        self.draft = SiteDraft()
        self.errors = {}
        self.state = SubmitState.IDLE

