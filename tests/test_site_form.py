import math

import pytest

from frontend.errors import PersistenceError, SiteValidationError
from frontend.site_form import (
    SiteDraft, SiteFormController, SiteRecord, SubmitState, require_valid, validate_site,
)


def valid_draft(**overrides):
    values = dict(name="North Field", description="Survey strip", latitude=47.6,
                  longitude=-122.3, altitude=120.0, is_active=True)
    values.update(overrides)
    return SiteDraft(**values)


# ---------------------------------------------------------------
# validate_site
# ---------------------------------------------------------------

def test_valid_draft_produces_record():
    result = validate_site(valid_draft(name="  North Field  "))
    assert result.ok
    assert result.errors == {}
    assert result.record.name == "North Field"
    assert result.record.latitude == 47.6
    assert result.record.is_active is True


def test_validate_accepts_mapping():
    result = validate_site({"name": "Harbor", "latitude": 1, "longitude": 2})
    assert result.ok
    assert result.record.description == ""
    assert result.record.altitude is None


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_name_is_rejected(name):
    result = validate_site(valid_draft(name=name))
    assert not result.ok
    assert result.errors == {"name": "Site name is required"}


@pytest.mark.parametrize("latitude", [90.0001, -90.5, 180, None, math.nan, math.inf])
def test_latitude_out_of_range(latitude):
    result = validate_site(valid_draft(latitude=latitude))
    assert result.errors == {"latitude": "Latitude must be between -90 and 90"}


@pytest.mark.parametrize("longitude", [180.01, -181, None, math.nan])
def test_longitude_out_of_range(longitude):
    result = validate_site(valid_draft(longitude=longitude))
    assert result.errors == {"longitude": "Longitude must be between -180 and 180"}


@pytest.mark.parametrize("latitude,longitude", [(90, 180), (-90, -180), (0, 0)])
def test_boundaries_are_inclusive(latitude, longitude):
    assert validate_site(valid_draft(latitude=latitude, longitude=longitude)).ok


def test_every_failing_field_is_reported():
    result = validate_site(valid_draft(name="", latitude=100, longitude=-200))
    assert set(result.errors) == {"name", "latitude", "longitude"}


def test_require_valid_raises_with_field_errors():
    with pytest.raises(SiteValidationError) as exc_info:
        require_valid(valid_draft(latitude=-91))
    assert exc_info.value.field_errors == {"latitude": "Latitude must be between -90 and 90"}


# ---------------------------------------------------------------
# SiteFormController
# ---------------------------------------------------------------

class FakeSites:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []
        self.controller = None
        self.disabled_during_call = []

    def add_site(self, record):
        self.calls.append(record)
        if self.controller is not None:
            self.disabled_during_call.append(self.controller.confirm_disabled)
        if self.fail:
            raise PersistenceError("backend down")


def make_controller(notifier, fail=False):
    sites = FakeSites(fail=fail)
    controller = SiteFormController(sites.add_site, notifier)
    sites.controller = controller
    controller.open()
    return controller, sites


def test_open_starts_with_defaults(notifier):
    controller, _ = make_controller(notifier)
    assert controller.is_open
    assert controller.state is SubmitState.IDLE
    assert controller.draft == SiteDraft()
    assert controller.confirm_label == "Add Site"


def test_invalid_submit_never_calls_backend(notifier):
    controller, sites = make_controller(notifier)
    controller.update(name="", latitude=95.0)

    assert controller.submit() is False
    assert sites.calls == []
    assert controller.errors == {
        "name": "Site name is required",
        "latitude": "Latitude must be between -90 and 90",
    }
    assert controller.is_open
    assert notifier.successes == [] and notifier.errors == []


def test_successful_submit(notifier):
    controller, sites = make_controller(notifier)
    controller.update(name="Harbor", latitude=10.5, longitude=20.25, altitude=5.0)

    assert controller.submit() is True
    assert len(sites.calls) == 1
    assert isinstance(sites.calls[0], SiteRecord)
    assert sites.calls[0].name == "Harbor"
    assert sites.disabled_during_call == [True]

    assert controller.draft == SiteDraft()
    assert controller.is_open is False
    assert controller.state is SubmitState.SUCCESS
    assert controller.last_outcome is SubmitState.SUCCESS
    assert notifier.successes == ["Site added successfully"]
    assert notifier.errors == []


def test_failed_submit_keeps_dialog_and_values(notifier):
    controller, sites = make_controller(notifier, fail=True)
    controller.update(name="Harbor", latitude=10.5, longitude=20.25)
    entered = controller.draft

    assert controller.submit() is False
    assert len(sites.calls) == 1
    assert controller.is_open
    assert controller.draft == entered
    assert controller.state is SubmitState.IDLE
    assert controller.last_outcome is SubmitState.FAILED
    assert controller.confirm_disabled is False
    assert notifier.errors == ["Failed to add site"]
    assert notifier.successes == []


def test_resubmit_after_failure(notifier):
    controller, sites = make_controller(notifier, fail=True)
    controller.update(name="Harbor", latitude=1, longitude=1)
    controller.submit()

    sites.fail = False
    assert controller.submit() is True
    assert len(sites.calls) == 2
    assert notifier.errors == ["Failed to add site"]
    assert notifier.successes == ["Site added successfully"]


def test_submit_while_submitting_is_ignored(notifier):
    nested = []

    controller = None

    def add_site(record):
        nested.append(controller.submit())

    controller = SiteFormController(add_site, notifier)
    controller.open()
    controller.update(name="Harbor", latitude=1, longitude=1)

    assert controller.submit() is True
    assert nested == [False]
    assert notifier.successes == ["Site added successfully"]


def test_cancel_discards_without_persisting(notifier):
    controller, sites = make_controller(notifier)
    controller.update(name="Harbor", latitude=1, longitude=1)

    controller.cancel()

    assert sites.calls == []
    assert controller.is_open is False
    assert controller.draft == SiteDraft()
    assert notifier.successes == [] and notifier.errors == []


def test_reopen_after_cancel_is_blank(notifier):
    controller, _ = make_controller(notifier)
    controller.update(name="Harbor")
    controller.cancel()
    controller.open()
    assert controller.draft.name == ""


def test_update_clears_error_for_edited_field(notifier):
    controller, _ = make_controller(notifier)
    controller.update(name="", latitude=100)
    controller.submit()

    controller.update(name="Harbor")

    assert "name" not in controller.errors
    assert "latitude" in controller.errors


def test_update_rejects_unknown_fields(notifier):
    controller, _ = make_controller(notifier)
    with pytest.raises(TypeError):
        controller.update(elevation=3)


def test_queue_submit_disables_confirm_until_submitted(notifier):
    controller, sites = make_controller(notifier)
    controller.update(name="Harbor", latitude=1, longitude=1)

    assert controller.queue_submit() is True
    assert controller.confirm_disabled is True
    assert controller.confirm_label == "Adding..."
    assert sites.calls == []

    # A second click while queued is dropped
    assert controller.queue_submit() is False

    assert controller.submit() is True
    assert len(sites.calls) == 1
    assert controller.queued is False


def test_queue_submit_with_invalid_draft_records_errors(notifier):
    controller, sites = make_controller(notifier)
    controller.update(name="  ")

    assert controller.queue_submit() is False
    assert controller.errors == {"name": "Site name is required"}
    assert controller.confirm_disabled is False
    assert sites.calls == []


def test_failed_submit_clears_queue(notifier):
    controller, sites = make_controller(notifier, fail=True)
    controller.update(name="Harbor", latitude=1, longitude=1)
    controller.queue_submit()

    assert controller.submit() is False
    assert controller.confirm_disabled is False
    assert controller.draft.name == "Harbor"
