"""Job parameter, menu option and validation models."""

from datetime import date
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from notebulk.mutation.models import NoteAction
from notebulk.notes.models import NoteType
from notebulk.search.search_models import MatchMode


class ParameterCategory(str, Enum):
    """Menu category of a job parameter."""

    ACTION = "action"
    SEARCH = "search"
    MODIFICATION = "modification"


class ParameterId(str, Enum):
    """Identifier of each concrete job parameter."""

    ACTION = "action"
    TEXT_SEARCH = "textSearch"
    DATE_RANGE = "dateRange"
    CREATOR_SEARCH = "creatorSearch"
    POPUP_SETTINGS = "popupSettings"
    USER_VIEWABLE = "userViewable"
    NOTE_TYPE = "noteType"


class TextSearchValue(BaseModel):
    text: str = ""
    case_sensitive: bool = False
    match_mode: MatchMode = MatchMode.SUBSTRING
    ignore_accents: bool = True


class DateRangeValue(BaseModel):
    start_date: date | None = None
    end_date: date | None = None


class CreatorSearchValue(BaseModel):
    selected_creators: list[str] = Field(default_factory=list)


class PopupSettingsValue(BaseModel):
    make_popup: bool = False
    disable_popup: bool = False

    @model_validator(mode="after")
    def validate_exclusive(self) -> "PopupSettingsValue":
        if self.make_popup and self.disable_popup:
            raise ValueError("make_popup and disable_popup are mutually exclusive")
        return self


class UserViewableValue(BaseModel):
    make_user_viewable: bool | None = None


class _JobParameterBase(BaseModel):
    label: str = ""
    editable: bool = True


class ActionParameter(_JobParameterBase):
    id: Literal["action"] = "action"
    category: Literal["action"] = "action"
    label: str = "Action"
    value: NoteAction


class TextSearchParameter(_JobParameterBase):
    id: Literal["textSearch"] = "textSearch"
    category: Literal["search"] = "search"
    label: str = "Text Search"
    value: TextSearchValue = Field(default_factory=TextSearchValue)


class DateRangeParameter(_JobParameterBase):
    id: Literal["dateRange"] = "dateRange"
    category: Literal["search"] = "search"
    label: str = "Date Range"
    value: DateRangeValue = Field(default_factory=DateRangeValue)


class CreatorSearchParameter(_JobParameterBase):
    id: Literal["creatorSearch"] = "creatorSearch"
    category: Literal["search"] = "search"
    label: str = "Creator"
    value: CreatorSearchValue = Field(default_factory=CreatorSearchValue)


class PopupSettingsParameter(_JobParameterBase):
    id: Literal["popupSettings"] = "popupSettings"
    category: Literal["modification"] = "modification"
    label: str = "Popup Settings"
    value: PopupSettingsValue = Field(default_factory=PopupSettingsValue)


class UserViewableParameter(_JobParameterBase):
    id: Literal["userViewable"] = "userViewable"
    category: Literal["modification"] = "modification"
    label: str = "User Viewable"
    value: UserViewableValue = Field(default_factory=UserViewableValue)


class NoteTypeParameter(_JobParameterBase):
    id: Literal["noteType"] = "noteType"
    category: Literal["modification"] = "modification"
    label: str = "Note Type"
    value: NoteType | None = None


JobParameter = Annotated[
    ActionParameter
    | TextSearchParameter
    | DateRangeParameter
    | CreatorSearchParameter
    | PopupSettingsParameter
    | UserViewableParameter
    | NoteTypeParameter,
    Field(discriminator="id"),
]


class MenuOption(BaseModel):
    """A choice offered by the job menu."""

    id: str
    category: ParameterCategory
    label: str
    description: str
    available: bool = True


class BlockingReason(str, Enum):
    """Why a configured job cannot run yet."""

    NO_ACTION = "no_action"
    NO_RECORDS = "no_records"
    EMPTY_TEXT_SEARCH = "empty_text_search"
    INCOMPLETE_DATE_RANGE = "incomplete_date_range"
    INVERTED_DATE_RANGE = "inverted_date_range"
    EMPTY_CREATOR_SEARCH = "empty_creator_search"
    NO_SEARCH_CRITERIA = "no_search_criteria"
    NO_MODIFICATION = "no_modification"

    @property
    def message(self) -> str:
        return _BLOCKING_MESSAGES[self]


_BLOCKING_MESSAGES: dict[BlockingReason, str] = {
    BlockingReason.NO_ACTION: "Choose an action (modify or delete) for the job.",
    BlockingReason.NO_RECORDS: "Load at least one user record before running the job.",
    BlockingReason.EMPTY_TEXT_SEARCH: "Enter search text or remove the text search.",
    BlockingReason.INCOMPLETE_DATE_RANGE: (
        "Select both a start and an end date, or clear the date range."
    ),
    BlockingReason.INVERTED_DATE_RANGE: "The start date must not be after the end date.",
    BlockingReason.EMPTY_CREATOR_SEARCH: (
        "Select at least one creator or remove the creator search."
    ),
    BlockingReason.NO_SEARCH_CRITERIA: (
        "Add search text, a complete date range or a creator selection."
    ),
    BlockingReason.NO_MODIFICATION: (
        "Choose at least one modification (popup, user viewable or note type)."
    ),
}
