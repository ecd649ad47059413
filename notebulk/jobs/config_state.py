"""Job configuration state machine.

The job is configured as an ordered list of parameters instead of a free-form
options object. Adding, updating and removing parameters enforces the
category rules (one action, at most one parameter per id, modifications only
for the modify action), and the menu's available options are derived from
the parameter list every time they are read.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter, ValidationError

from notebulk.config import get_settings
from notebulk.jobs.models import (
    ActionParameter,
    BlockingReason,
    CreatorSearchParameter,
    DateRangeParameter,
    JobParameter,
    MenuOption,
    NoteTypeParameter,
    ParameterCategory,
    ParameterId,
    PopupSettingsParameter,
    TextSearchParameter,
    UserViewableParameter,
)
from notebulk.mutation.models import ModificationOptions, NoteAction
from notebulk.search.search_models import DateRange, SearchCriteria
from notebulk.utils.mixins import LoggerMixin

_PARAMETER_ADAPTER: TypeAdapter[JobParameter] = TypeAdapter(JobParameter)

_MENU: tuple[tuple[str, ParameterCategory, str, str], ...] = (
    (
        NoteAction.MODIFY.value,
        ParameterCategory.ACTION,
        "Modify notes",
        "Change the popup flag, visibility or type of matching notes",
    ),
    (
        NoteAction.DELETE.value,
        ParameterCategory.ACTION,
        "Delete notes",
        "Remove matching notes from each user record",
    ),
    (
        ParameterId.TEXT_SEARCH.value,
        ParameterCategory.SEARCH,
        "Text Search",
        "Match notes by their text",
    ),
    (
        ParameterId.DATE_RANGE.value,
        ParameterCategory.SEARCH,
        "Date Range",
        "Match notes created within a range of days",
    ),
    (
        ParameterId.CREATOR_SEARCH.value,
        ParameterCategory.SEARCH,
        "Creator",
        "Match notes written by selected creators",
    ),
    (
        ParameterId.POPUP_SETTINGS.value,
        ParameterCategory.MODIFICATION,
        "Popup Settings",
        "Turn the popup flag on or off",
    ),
    (
        ParameterId.USER_VIEWABLE.value,
        ParameterCategory.MODIFICATION,
        "User Viewable",
        "Make notes visible or invisible to the patron",
    ),
    (
        ParameterId.NOTE_TYPE.value,
        ParameterCategory.MODIFICATION,
        "Note Type",
        "Change the type of matching notes",
    ),
)

_ACTION_OPTIONS = frozenset(action.value for action in NoteAction)


class JobConfigurationError(ValueError):
    """The job configuration is invalid or cannot be executed."""

    def __init__(self, message: str, reasons: list[BlockingReason] | None = None):
        super().__init__(message)
        self.reasons = list(reasons or [])


@dataclass
class JobPlan:
    """A validated, executable job."""

    criteria: SearchCriteria
    options: ModificationOptions
    configuration: dict[str, Any] = field(default_factory=dict)


class JobConfigState(LoggerMixin):
    """Parameter list with availability rules and executability checks."""

    def __init__(self) -> None:
        self._parameters: list[JobParameter] = []
        self.job_executed = False

    # Selectors

    @property
    def parameters(self) -> list[JobParameter]:
        return list(self._parameters)

    def get_parameter(self, param_id: ParameterId | str) -> JobParameter | None:
        wanted = ParameterId(param_id).value
        for parameter in self._parameters:
            if parameter.id == wanted:
                return parameter
        return None

    @property
    def action(self) -> NoteAction | None:
        parameter = self.get_parameter(ParameterId.ACTION)
        return parameter.value if isinstance(parameter, ActionParameter) else None

    @property
    def available_options(self) -> list[MenuOption]:
        """Menu choices, derived from the current parameter list."""
        action = self.action
        present = {parameter.id for parameter in self._parameters}

        options = []
        for option_id, category, label, description in _MENU:
            if self.job_executed:
                available = False
            elif category == ParameterCategory.ACTION:
                available = action is None or action.value != option_id
            elif category == ParameterCategory.SEARCH:
                available = option_id not in present
            else:
                available = action == NoteAction.MODIFY and option_id not in present
            options.append(
                MenuOption(
                    id=option_id,
                    category=category,
                    label=label,
                    description=description,
                    available=available,
                )
            )
        return options

    # Transitions

    def choose_option(self, option_id: str) -> JobParameter:
        """Add the parameter behind a menu choice."""
        if option_id in _ACTION_OPTIONS:
            return self.add_parameter(ParameterId.ACTION, option_id)
        return self.add_parameter(option_id)

    def add_parameter(
        self, param_id: ParameterId | str, value: Any = None
    ) -> JobParameter:
        """Add a parameter, replacing any existing one with the same id."""
        if self.job_executed:
            raise JobConfigurationError("The job has already been executed")

        parameter = self._build_parameter(ParameterId(param_id), value)

        if parameter.category == ParameterCategory.MODIFICATION.value:
            if self.action != NoteAction.MODIFY:
                raise JobConfigurationError(
                    "Modification options are only available for the modify action"
                )

        if isinstance(parameter, ActionParameter):
            self._set_action(parameter)
        else:
            self._put(parameter)

        self.logger.debug("Job parameter added", parameter_id=parameter.id)
        return parameter

    def update_parameter(self, param_id: ParameterId | str, value: Any) -> JobParameter:
        """Replace the value of an existing, editable parameter."""
        current = self.get_parameter(param_id)
        if current is None:
            raise JobConfigurationError(f"No '{ParameterId(param_id).value}' parameter")
        if not current.editable:
            raise JobConfigurationError(f"Parameter '{current.id}' is locked")
        return self.add_parameter(param_id, value)

    def remove_parameter(self, param_id: ParameterId | str) -> None:
        """Remove a parameter, making its menu choice available again."""
        current = self.get_parameter(param_id)
        if current is None:
            return
        if not current.editable:
            raise JobConfigurationError(f"Parameter '{current.id}' is locked")
        self._parameters = [p for p in self._parameters if p.id != current.id]
        self.logger.debug("Job parameter removed", parameter_id=current.id)

    def reset(self) -> None:
        """Forget every parameter and unlock the configuration."""
        self._parameters = []
        self.job_executed = False

    def mark_executed(self) -> None:
        """Lock the configuration once a run has started."""
        self.job_executed = True
        self._parameters = [
            parameter.model_copy(update={"editable": False})
            for parameter in self._parameters
        ]

    # Validation

    def blocking_reasons(self, record_count: int) -> list[BlockingReason]:
        """Every rule the current configuration violates, in a stable order."""
        reasons: list[BlockingReason] = []

        action = self.action
        if action is None:
            reasons.append(BlockingReason.NO_ACTION)

        if record_count <= 0:
            reasons.append(BlockingReason.NO_RECORDS)

        text_param = self.get_parameter(ParameterId.TEXT_SEARCH)
        has_text = False
        if isinstance(text_param, TextSearchParameter):
            has_text = bool(text_param.value.text.strip())
            if not has_text:
                reasons.append(BlockingReason.EMPTY_TEXT_SEARCH)

        date_param = self.get_parameter(ParameterId.DATE_RANGE)
        has_dates = False
        if isinstance(date_param, DateRangeParameter):
            start, end = date_param.value.start_date, date_param.value.end_date
            if (start is None) != (end is None):
                reasons.append(BlockingReason.INCOMPLETE_DATE_RANGE)
            elif start is not None and end is not None:
                if start > end:
                    reasons.append(BlockingReason.INVERTED_DATE_RANGE)
                else:
                    has_dates = True

        creator_param = self.get_parameter(ParameterId.CREATOR_SEARCH)
        has_creators = False
        if isinstance(creator_param, CreatorSearchParameter):
            has_creators = bool(creator_param.value.selected_creators)
            if not has_creators:
                reasons.append(BlockingReason.EMPTY_CREATOR_SEARCH)

        if not (has_text or has_dates or has_creators):
            reasons.append(BlockingReason.NO_SEARCH_CRITERIA)

        if action == NoteAction.MODIFY and not self._has_concrete_modification():
            reasons.append(BlockingReason.NO_MODIFICATION)

        return reasons

    def can_execute_job(self, record_count: int) -> bool:
        return not self.blocking_reasons(record_count)

    # Builders

    def build_search_criteria(self, locale: str | None = None) -> SearchCriteria:
        criteria = SearchCriteria(locale=locale or get_settings().default_locale)

        text_param = self.get_parameter(ParameterId.TEXT_SEARCH)
        if isinstance(text_param, TextSearchParameter):
            criteria.text = text_param.value.text
            criteria.case_sensitive = text_param.value.case_sensitive
            criteria.match_mode = text_param.value.match_mode
            criteria.ignore_accents = text_param.value.ignore_accents

        # A date filter only applies once both bounds are chosen
        date_param = self.get_parameter(ParameterId.DATE_RANGE)
        if isinstance(date_param, DateRangeParameter):
            start, end = date_param.value.start_date, date_param.value.end_date
            if start is not None and end is not None:
                criteria.date_range = DateRange(start=start, end=end)

        creator_param = self.get_parameter(ParameterId.CREATOR_SEARCH)
        if isinstance(creator_param, CreatorSearchParameter):
            criteria.creators = list(creator_param.value.selected_creators)

        return criteria

    def build_modification_options(self) -> ModificationOptions:
        action = self.action
        if action is None:
            raise JobConfigurationError(
                BlockingReason.NO_ACTION.message, [BlockingReason.NO_ACTION]
            )
        if action == NoteAction.DELETE:
            return ModificationOptions.for_delete()

        popup = self.get_parameter(ParameterId.POPUP_SETTINGS)
        viewable = self.get_parameter(ParameterId.USER_VIEWABLE)
        note_type = self.get_parameter(ParameterId.NOTE_TYPE)

        return ModificationOptions(
            action=NoteAction.MODIFY,
            set_popup=(
                popup.value.make_popup
                if isinstance(popup, PopupSettingsParameter)
                else False
            ),
            clear_popup=(
                popup.value.disable_popup
                if isinstance(popup, PopupSettingsParameter)
                else False
            ),
            note_type=(
                note_type.value.model_copy()
                if isinstance(note_type, NoteTypeParameter) and note_type.value
                else None
            ),
            set_user_viewable=(
                viewable.value.make_user_viewable
                if isinstance(viewable, UserViewableParameter)
                else None
            ),
        )

    def build_job(self, record_count: int, locale: str | None = None) -> JobPlan:
        """Validate the configuration and turn it into an executable job."""
        reasons = self.blocking_reasons(record_count)
        if reasons:
            raise JobConfigurationError(
                " ".join(reason.message for reason in reasons), reasons
            )
        return JobPlan(
            criteria=self.build_search_criteria(locale),
            options=self.build_modification_options(),
            configuration=self.describe(),
        )

    def describe(self) -> dict[str, Any]:
        """Effective configuration, for run reports."""
        action = self.action
        return {
            "action": action.value if action else None,
            "parameters": [
                parameter.model_dump(mode="json", exclude={"editable"})
                for parameter in self._parameters
            ],
        }

    # Internals

    def _build_parameter(self, param_id: ParameterId, value: Any) -> JobParameter:
        data: dict[str, Any] = {"id": param_id.value}
        if value is not None:
            data["value"] = value
        try:
            return _PARAMETER_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise JobConfigurationError(
                f"Invalid value for '{param_id.value}': {e.errors()[0]['msg']}"
            ) from e

    def _set_action(self, parameter: ActionParameter) -> None:
        self._parameters = [
            p for p in self._parameters if p.category != ParameterCategory.ACTION.value
        ]
        if parameter.value == NoteAction.DELETE:
            dropped = [
                p.id
                for p in self._parameters
                if p.category == ParameterCategory.MODIFICATION.value
            ]
            if dropped:
                self.logger.info(
                    "Delete action drops modification options", dropped=dropped
                )
            self._parameters = [
                p
                for p in self._parameters
                if p.category != ParameterCategory.MODIFICATION.value
            ]
        self._parameters.insert(0, parameter)

    def _put(self, parameter: JobParameter) -> None:
        for index, existing in enumerate(self._parameters):
            if existing.id == parameter.id:
                self._parameters[index] = parameter
                return
        self._parameters.append(parameter)

    def _has_concrete_modification(self) -> bool:
        popup = self.get_parameter(ParameterId.POPUP_SETTINGS)
        if isinstance(popup, PopupSettingsParameter) and (
            popup.value.make_popup or popup.value.disable_popup
        ):
            return True

        note_type = self.get_parameter(ParameterId.NOTE_TYPE)
        if isinstance(note_type, NoteTypeParameter) and note_type.value is not None:
            return True

        viewable = self.get_parameter(ParameterId.USER_VIEWABLE)
        return (
            isinstance(viewable, UserViewableParameter)
            and viewable.value.make_user_viewable is not None
        )
