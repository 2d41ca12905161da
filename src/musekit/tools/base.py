"""Creative tool base class and the per-tool session dispatcher."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from ..errors import InputValidationError, InvalidFormatError, JobFailedError, MuseError, ServiceError
from ..llm import GenerativeProvider

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=BaseModel)
ResultT = TypeVar("ResultT")

INVALID_FORMAT_SUFFIX = "The model may have returned an invalid format."


class ToolForm(BaseModel):
    """Base for tool input forms."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class CreativeToolBase(ABC, Generic[FormT, ResultT]):
    """Abstract base class for a single creative tool.

    This module hides how a tool turns its form into a service request.
    Subclasses define:
    - ``form_model``: pydantic model holding the tool's inputs
    - ``validate()``: input checks performed before any service call
    - ``execute()``: prompt building and the provider call(s)
    - ``failure_message``: what the user sees when the service fails
    """

    name: ClassVar[str] = ""
    form_model: ClassVar[type[BaseModel]]
    failure_message: ClassVar[str] = "An unknown error occurred."

    def validate(self, form: FormT) -> None:
        """Check the form before any service call.

        Raises:
            InputValidationError: With the tool's own message
        """

    def failure_message_for(self, form: FormT) -> str:
        """Message shown when the service fails for ``form``."""
        return self.failure_message

    @abstractmethod
    async def execute(self, provider: GenerativeProvider, form: FormT) -> ResultT:
        """Run the tool against ``provider``.

        Raises:
            MuseError: Any error of the taxonomy
        """


class ToolStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class ToolState(Generic[ResultT]):
    """Snapshot of one tool's request lifecycle."""

    status: ToolStatus = ToolStatus.IDLE
    result: ResultT | None = None
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is ToolStatus.LOADING


def describe_error(failure_message: str, error: MuseError) -> str:
    """Map an error of the taxonomy to a single user-facing message."""
    if isinstance(error, InputValidationError):
        return str(error)
    if isinstance(error, InvalidFormatError):
        return f"{failure_message} {INVALID_FORMAT_SUFFIX}"
    if isinstance(error, ServiceError):
        return failure_message
    if isinstance(error, JobFailedError):
        return str(error)
    return str(error) or failure_message


class ToolSession(Generic[FormT, ResultT]):
    """Runs one tool instance and owns its state.

    Hidden design decisions:
    - At most one request in flight; a second submit is ignored
    - Validation happens before the loading state is entered
    - Every error of the taxonomy ends as a single human-readable string

    Example:
        session = ToolSession(RecipeGenerator(), provider)
        state = await session.submit(RecipeForm(request="vegan lasagna"))
        if state.status is ToolStatus.DONE:
            print(state.result.recipe_name)
    """

    def __init__(self, tool: CreativeToolBase[FormT, ResultT], provider: GenerativeProvider):
        self._tool = tool
        self._provider = provider
        self._state: ToolState[ResultT] = ToolState()

    @property
    def tool(self) -> CreativeToolBase[FormT, ResultT]:
        return self._tool

    @property
    def state(self) -> ToolState[ResultT]:
        return self._state

    def reset(self) -> ToolState[ResultT]:
        if not self._state.is_loading:
            self._state = ToolState()
        return self._state

    async def submit(self, form: FormT) -> ToolState[ResultT]:
        """Validate ``form``, run the tool and record the outcome.

        Any previous result is cleared when the request starts. Errors of
        the taxonomy never propagate; they are stored in ``state.error``.
        """
        if self._state.is_loading:
            logger.info("%s is busy; ignoring submit", self._tool.name)
            return self._state

        try:
            self._tool.validate(form)
        except InputValidationError as e:
            self._state = ToolState(status=ToolStatus.ERROR, error=str(e))
            return self._state

        self._state = ToolState(status=ToolStatus.LOADING)
        try:
            result = await self._tool.execute(self._provider, form)
        except MuseError as e:
            logger.error("%s failed: %s", self._tool.name, e, exc_info=not isinstance(e, InputValidationError))
            self._state = ToolState(
                status=ToolStatus.ERROR,
                error=describe_error(self._tool.failure_message_for(form), e),
            )
        except BaseException:
            self._state = ToolState()
            raise
        else:
            self._state = ToolState(status=ToolStatus.DONE, result=result)
        return self._state
