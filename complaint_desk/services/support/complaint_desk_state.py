# complaint_desk/services/support/complaint_desk_state.py

import enum
import uuid
from datetime import date
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from complaint_desk.core.db import AsyncSessionLocal
from complaint_desk.core.exceptions import AppException, FormValidationError
from complaint_desk.services.support import complaint_store
from complaint_desk.services.support.complaint_filters import visible_complaints, field_value
from complaint_desk.services.support.complaint_form import ComplaintForm
from complaint_desk.utils.logger import get_logger

logger = get_logger(__name__)


class DeskView(str, enum.Enum):
    DASHBOARD = "dashboard"
    NEW = "new"
    EDIT = "edit"


class DeskState(BaseModel):
    model_config = ConfigDict(frozen=True)

    view: DeskView
    selected_id: Optional[uuid.UUID]
    editing_id: Optional[uuid.UUID]
    search_term: str
    date_filter: str
    status_filter: str
    complaints: tuple[Any, ...]
    loading: bool
    error: Optional[str]
    form_errors: tuple[str, ...]


# =====================================================
# TRANSITIONS
# Each one spells out the whole next state.
# =====================================================
def initial_state() -> DeskState:
    return DeskState(
        view=DeskView.DASHBOARD,
        selected_id=None,
        editing_id=None,
        search_term="",
        date_filter="",
        status_filter="",
        complaints=(),
        loading=True,
        error=None,
        form_errors=(),
    )


def records_loaded(state: DeskState, records: Iterable[Any]) -> DeskState:
    complaints = tuple(records)
    ids = {field_value(c, "id") for c in complaints}
    editing_id = state.editing_id if state.editing_id in ids else None
    # an edit of a record that no longer exists falls back to the dashboard
    view = DeskView.DASHBOARD if state.view == DeskView.EDIT and editing_id is None else state.view
    return DeskState(
        view=view,
        selected_id=state.selected_id if state.selected_id in ids else None,
        editing_id=editing_id,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=complaints,
        loading=False,
        error=None,
        form_errors=state.form_errors,
    )


def load_failed(state: DeskState, message: str) -> DeskState:
    return DeskState(
        view=state.view,
        selected_id=state.selected_id,
        editing_id=state.editing_id,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=False,
        error=message,
        form_errors=state.form_errors,
    )


def navigate_to_dashboard(state: DeskState, error: Optional[str] = None) -> DeskState:
    return DeskState(
        view=DeskView.DASHBOARD,
        selected_id=None,
        editing_id=None,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=error,
        form_errors=(),
    )


def navigate_to_new(state: DeskState) -> DeskState:
    return DeskState(
        view=DeskView.NEW,
        selected_id=None,
        editing_id=None,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=None,
        form_errors=(),
    )


def navigate_to_edit(state: DeskState, complaint_id: uuid.UUID) -> DeskState:
    return DeskState(
        view=DeskView.EDIT,
        selected_id=None,
        editing_id=complaint_id,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=None,
        form_errors=(),
    )


def open_details(state: DeskState, complaint_id: uuid.UUID) -> DeskState:
    return DeskState(
        view=DeskView.DASHBOARD,
        selected_id=complaint_id,
        editing_id=None,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=state.error,
        form_errors=(),
    )


def close_details(state: DeskState) -> DeskState:
    return DeskState(
        view=DeskView.DASHBOARD,
        selected_id=None,
        editing_id=None,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=state.error,
        form_errors=(),
    )


def apply_filters(
    state: DeskState,
    search_term: str = "",
    date_filter: str = "",
    status_filter: str = "",
) -> DeskState:
    return DeskState(
        view=state.view,
        selected_id=state.selected_id,
        editing_id=state.editing_id,
        search_term=search_term,
        date_filter=date_filter,
        status_filter=status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=state.error,
        form_errors=state.form_errors,
    )


def form_rejected(state: DeskState, fields: Iterable[str]) -> DeskState:
    return DeskState(
        view=state.view,
        selected_id=state.selected_id,
        editing_id=state.editing_id,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=None,
        form_errors=tuple(fields),
    )


def operation_failed(state: DeskState, message: str) -> DeskState:
    return DeskState(
        view=state.view,
        selected_id=state.selected_id,
        editing_id=state.editing_id,
        search_term=state.search_term,
        date_filter=state.date_filter,
        status_filter=state.status_filter,
        complaints=state.complaints,
        loading=state.loading,
        error=message,
        form_errors=(),
    )


def visible(state: DeskState) -> list:
    return visible_complaints(
        state.complaints,
        state.search_term,
        state.date_filter,
        state.status_filter,
    )


# =====================================================
# CONTROLLER
# =====================================================
class ComplaintDesk:
    """
    Owns the desk state and the draft form, and runs the store calls behind
    each user action. Every successful mutation is followed by a full reload.
    """

    def __init__(self, session_factory: Callable = AsyncSessionLocal, optimistic: bool = False):
        self.session_factory = session_factory
        self.optimistic = optimistic
        self.state = initial_state()
        self.form: Optional[ComplaintForm] = None

    def visible(self) -> list:
        return visible(self.state)

    def find(self, complaint_id: uuid.UUID):
        for complaint in self.state.complaints:
            if field_value(complaint, "id") == complaint_id:
                return complaint
        return None

    async def refresh(self) -> None:
        try:
            async with self.session_factory() as db:
                records = await complaint_store.list_all_complaints(db)
        except AppException as exc:
            logger.error("Error loading complaints: %s", exc.detail)
            self.state = load_failed(self.state, exc.detail)
            return
        self.state = records_loaded(self.state, records)
        if self.form is not None and self.form.is_edit and self.state.editing_id is None:
            self.form = None

    def filter(self, search_term: str = "", date_filter: str = "", status_filter: str = "") -> list:
        self.state = apply_filters(self.state, search_term, date_filter, status_filter)
        return self.visible()

    def select(self, complaint_id: uuid.UUID) -> None:
        self.state = open_details(self.state, complaint_id)

    def deselect(self) -> None:
        self.state = close_details(self.state)

    def new_complaint(self, today: Optional[date] = None) -> ComplaintForm:
        self.form = ComplaintForm.for_create(today)
        self.state = navigate_to_new(self.state)
        return self.form

    def edit_complaint(self, complaint: Any) -> ComplaintForm:
        self.form = ComplaintForm.for_edit(complaint)
        self.state = navigate_to_edit(self.state, self.form.complaint_id)
        return self.form

    def cancel(self) -> None:
        self.form = None
        self.state = navigate_to_dashboard(self.state)

    async def submit(self) -> bool:
        if self.form is None:
            raise RuntimeError("No complaint form is open")

        expected = self.form.loaded_updated_at if self.optimistic else None
        try:
            async with self.session_factory() as db:
                await self.form.submit(db, expected_updated_at=expected)
        except FormValidationError as exc:
            self.state = form_rejected(self.state, exc.fields)
            return False
        except AppException as exc:
            logger.error("Error saving complaint: %s", exc.detail)
            self.state = operation_failed(self.state, exc.detail)
            return False

        await self.refresh()
        self.form = None
        # the save went through; a failed reload is still reported
        self.state = navigate_to_dashboard(self.state, error=self.state.error)
        return True

    async def delete(self, complaint_id: uuid.UUID, confirmed: bool) -> bool:
        if not confirmed:
            return False

        try:
            async with self.session_factory() as db:
                await complaint_store.delete_complaint(db, complaint_id)
        except AppException as exc:
            logger.error("Error deleting complaint: %s", exc.detail)
            self.state = operation_failed(self.state, exc.detail)
            return False

        if self.state.selected_id == complaint_id:
            self.state = close_details(self.state)
        await self.refresh()
        return True
