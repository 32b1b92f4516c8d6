from __future__ import annotations

import logging
from typing import Any

from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.use_cases.availability_probe import DEFAULT_DEBOUNCE_SECONDS, AvailabilityProbe
from roombook.application.use_cases.master_data import MasterDataLoader
from roombook.application.use_cases.submission import SubmissionController, SubmitOutcome
from roombook.application.use_cases.validate_draft import DraftValidator
from roombook.application.utils.state_reducers import FieldChanged, FormEvent, reduce
from roombook.domain.entities.form_state import FormState
from roombook.domain.entities.master_data import MasterData


class BookingFormSession:
    """
    One booking form being filled in.

    Owns the FormState and is the only place it gets replaced. Field edits are
    validated synchronously and, when they touch a trigger field, re-arm or disarm
    the availability probe. Must be used from a running event loop.
    """

    def __init__(
        self,
        api: BookingApiPort,
        master_data: MasterDataLoader | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        validator: DraftValidator | None = None,
    ) -> None:
        self._state = FormState()
        self._master_data = master_data or MasterDataLoader(api)
        self._validator = validator or DraftValidator()
        self._probe = AvailabilityProbe(api, dispatch=self.dispatch, debounce_seconds=debounce_seconds)
        self._submission = SubmissionController(
            api,
            validator=self._validator,
            get_state=lambda: self._state,
            dispatch=self.dispatch,
        )
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def probe(self) -> AvailabilityProbe:
        return self._probe

    @property
    def master_data(self) -> MasterData | None:
        return self._master_data.loaded

    def dispatch(self, event: FormEvent) -> None:
        self._state = reduce(self._state, event)

    async def load_master_data(self) -> MasterData | None:
        """Load reference lists. Failures are logged and leave the form usable."""
        try:
            return await self._master_data.load()
        except (BookingApiError, BookingTransportError) as e:
            self._logger.warning("Master data unavailable", extra={"error": str(e)})
            return None

    def update_field(self, name: str, value: Any) -> FormState:
        return self.update_fields({name: value})

    def update_fields(self, changes: dict[str, Any]) -> FormState:
        """Apply field changes in order, validate, and re-arm or disarm the probe."""
        previous = self._state.draft
        draft = previous
        for name, value in changes.items():
            draft = draft.with_field(name, value)

        field_errors = tuple(self._validator.validate(draft, self._consumptions()))
        trigger_changed = draft.trigger_values() != previous.trigger_values()
        self.dispatch(FieldChanged(draft=draft, field_errors=field_errors, trigger_changed=trigger_changed))

        if trigger_changed:
            if self._validator.is_probe_armed(draft, field_errors):
                self._probe.schedule(draft)
            else:
                self._probe.cancel()
        return self._state

    async def submit(self) -> SubmitOutcome | None:
        return await self._submission.submit(self._state.draft, self._consumptions())

    async def wait_idle(self) -> None:
        await self._probe.wait_idle()

    def close(self) -> None:
        self._probe.close()

    def _consumptions(self):
        data = self._master_data.loaded
        return data.consumptions if data is not None else None

