"""
Save flow for the level designer.

Saving a level walks through a short sequence of prompts:
- A grid that was loaded or saved before asks whether to save over that
  name or under another one. A new grid goes straight to the name prompt.
- The name prompt only confirms letters-and-digits names. A name that is
  already taken asks before overwriting; "no" returns to the name prompt.
- The level data, thumbnail and metadata are then written. Only the level
  data write decides between SAVED and FAILED.
- Acknowledging a failure starts the flow over.

The controller keeps the current stage as an explicit state and moves
only when the presentation layer reports a user decision. Any prompt
can be cancelled, which ends the flow with nothing written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional, Protocol

import pygame

from editor import config as text
from editor.errors import InvalidDecisionError, LevelWriteError, SaveFlowInProgressError
from editor.events import EditorEvent
from editor.validation import is_valid_level_name

if TYPE_CHECKING:
    from engine.core.events import EventBus
    from editor.level_store import LevelFileStore

logger = logging.getLogger(__name__)


class SaveFlowState(Enum):
    """Stages of the save flow."""
    IDLE = auto()
    CONFIRM_OVERWRITE_OR_RENAME = auto()
    PROMPT_NEW_NAME = auto()
    CONFIRM_NAME_COLLISION = auto()
    EXECUTE_SAVE = auto()

    # Terminal
    SAVED = auto()
    FAILED = auto()
    CANCELLED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (SaveFlowState.SAVED, SaveFlowState.FAILED, SaveFlowState.CANCELLED)


class UserDecision(Enum):
    """Choices a user can make at a prompt."""
    CONFIRM_PRIOR = auto()      # save over the level the grid came from
    SAVE_AS_ANOTHER = auto()    # pick a new name instead
    SUBMIT_NAME = auto()        # confirm the typed name
    OVERWRITE = auto()          # replace the existing level with that name
    KEEP_EXISTING = auto()      # choose a different name
    CANCEL = auto()
    ACKNOWLEDGE = auto()        # dismiss the failure alert and retry


@dataclass(frozen=True)
class SaveTarget:
    """Where the running flow will save."""
    name: str
    is_overwrite: bool


class SaveStatus(Enum):
    SAVED = auto()
    FAILED = auto()
    CANCELLED = auto()


@dataclass(frozen=True)
class SaveOutcome:
    """Result of a finished save flow."""
    status: SaveStatus
    name: Optional[str] = None
    reason: Optional[str] = None
    overwrite: bool = False

    @classmethod
    def success(cls, name: str, overwrite: bool = False) -> SaveOutcome:
        return cls(SaveStatus.SAVED, name, overwrite=overwrite)

    @classmethod
    def failure(cls, name: str, reason: str, overwrite: bool = False) -> SaveOutcome:
        return cls(SaveStatus.FAILED, name, reason, overwrite)

    @classmethod
    def cancelled(cls) -> SaveOutcome:
        return cls(SaveStatus.CANCELLED)

    @property
    def is_success(self) -> bool:
        return self.status is SaveStatus.SAVED

    @property
    def is_failure(self) -> bool:
        return self.status is SaveStatus.FAILED

    @property
    def is_cancelled(self) -> bool:
        return self.status is SaveStatus.CANCELLED


@dataclass(frozen=True)
class PromptChoice:
    label: str
    decision: UserDecision


@dataclass(frozen=True)
class Prompt:
    """What the presentation layer should show for the current state."""
    state: SaveFlowState
    title: str
    message: str
    choices: tuple[PromptChoice, ...] = ()
    placeholder: Optional[str] = None

    @property
    def labels(self) -> list[str]:
        return [choice.label for choice in self.choices]

    def decision_for(self, label: str) -> UserDecision:
        for choice in self.choices:
            if choice.label == label:
                return choice.decision
        raise InvalidDecisionError(f"'{label}' is not an option of '{self.title}'")


class LevelSource(Protocol):
    """The grid being saved, as seen by the flow."""

    def prior_save_name(self) -> Optional[str]:
        ...


class SaveFlowController:
    """
    Drives one level save at a time.

    The grid is only read: after a successful save the caller decides
    whether to remember the new name (see on_complete).

    Usage:
        flow = SaveFlowController(grid, store, render=lambda: renderer.render(grid))
        flow.start()                     # -> PROMPT_NEW_NAME for a new grid
        flow.edit_name("Level1")         # -> True, confirm enabled
        flow.submit_name("Level1")       # -> SAVED
        flow.outcome                     # SaveOutcome.success("Level1")
    """

    _TRANSITIONS: dict[tuple[SaveFlowState, UserDecision], str] = {
        (SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME, UserDecision.CONFIRM_PRIOR): "_save_as_prior",
        (SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME, UserDecision.SAVE_AS_ANOTHER): "_prompt_new_name",
        (SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME, UserDecision.CANCEL): "_cancel",
        (SaveFlowState.PROMPT_NEW_NAME, UserDecision.SUBMIT_NAME): "_submit_name",
        (SaveFlowState.PROMPT_NEW_NAME, UserDecision.CANCEL): "_cancel",
        (SaveFlowState.CONFIRM_NAME_COLLISION, UserDecision.OVERWRITE): "_overwrite_existing",
        (SaveFlowState.CONFIRM_NAME_COLLISION, UserDecision.KEEP_EXISTING): "_prompt_new_name",
        (SaveFlowState.CONFIRM_NAME_COLLISION, UserDecision.CANCEL): "_cancel",
        (SaveFlowState.FAILED, UserDecision.ACKNOWLEDGE): "_begin",
    }

    def __init__(
        self,
        grid: LevelSource,
        store: LevelFileStore,
        render: Optional[Callable[[], Optional[pygame.Surface]]] = None,
        event_bus: Optional[EventBus] = None,
        on_complete: Optional[Callable[[SaveOutcome], None]] = None,
    ):
        self._grid = grid
        self._store = store
        self._render = render
        self._event_bus = event_bus
        self.on_complete = on_complete

        self._state = SaveFlowState.IDLE
        self._history: list[SaveFlowState] = []
        self._prior_name: Optional[str] = None
        self._collision_name: Optional[str] = None
        self._target: Optional[SaveTarget] = None
        self._outcome: Optional[SaveOutcome] = None

        # Name prompt: the typed text and whether its confirm action is enabled
        self._pending_name = ""
        self._confirm_enabled = False

    # Properties

    @property
    def state(self) -> SaveFlowState:
        return self._state

    @property
    def history(self) -> list[SaveFlowState]:
        """States entered since the last start()."""
        return list(self._history)

    @property
    def in_progress(self) -> bool:
        return self._state is not SaveFlowState.IDLE and not self._state.is_terminal

    @property
    def prior_name(self) -> Optional[str]:
        return self._prior_name

    @property
    def collision_name(self) -> Optional[str]:
        return self._collision_name

    @property
    def target(self) -> Optional[SaveTarget]:
        """The resolved destination while a save is executing."""
        return self._target

    @property
    def outcome(self) -> Optional[SaveOutcome]:
        return self._outcome

    @property
    def pending_name(self) -> str:
        return self._pending_name

    @property
    def confirm_enabled(self) -> bool:
        return self._state is SaveFlowState.PROMPT_NEW_NAME and self._confirm_enabled

    # Entry points

    def start(self) -> SaveFlowState:
        """
        Begin a new save.

        Raises:
            SaveFlowInProgressError: if a save is already waiting on the user
        """
        if self.in_progress:
            raise SaveFlowInProgressError(f"Save flow already in progress ({self._state.name})")

        self._history.clear()
        self._outcome = None
        return self._begin()

    def handle(self, decision: UserDecision, name: Optional[str] = None) -> SaveFlowState:
        """
        Apply a user decision to the current state.

        Args:
            decision: What the user chose
            name: Typed level name, for SUBMIT_NAME

        Returns:
            The state after the transition

        Raises:
            InvalidDecisionError: if the current prompt offers no such choice
        """
        method = self._TRANSITIONS.get((self._state, decision))
        if method is None:
            raise InvalidDecisionError(
                f"{decision.name} is not a valid choice in state {self._state.name}"
            )

        if decision is UserDecision.SUBMIT_NAME:
            return self._submit_name(self._pending_name if name is None else name)
        return getattr(self, method)()

    def edit_name(self, name: str) -> bool:
        """
        Report the name prompt's current text.

        Returns:
            Whether the confirm action should be enabled
        """
        self._pending_name = name
        self._confirm_enabled = is_valid_level_name(name)
        return self._confirm_enabled

    # Convenience wrappers for handle()

    def confirm_prior(self) -> SaveFlowState:
        return self.handle(UserDecision.CONFIRM_PRIOR)

    def save_as_another(self) -> SaveFlowState:
        return self.handle(UserDecision.SAVE_AS_ANOTHER)

    def submit_name(self, name: Optional[str] = None) -> SaveFlowState:
        return self.handle(UserDecision.SUBMIT_NAME, name)

    def answer_overwrite(self, overwrite: bool) -> SaveFlowState:
        return self.handle(UserDecision.OVERWRITE if overwrite else UserDecision.KEEP_EXISTING)

    def cancel(self) -> SaveFlowState:
        return self.handle(UserDecision.CANCEL)

    def acknowledge(self) -> SaveFlowState:
        return self.handle(UserDecision.ACKNOWLEDGE)

    def current_prompt(self) -> Optional[Prompt]:
        """Describe the prompt or alert for the current state, if any."""
        state = self._state

        if state is SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME:
            prior = self._prior_name
            return Prompt(
                state,
                text.save_as_prior_title(prior),
                text.save_as_prior_message(prior),
                (
                    PromptChoice(text.save_as_prior_option(prior), UserDecision.CONFIRM_PRIOR),
                    PromptChoice(text.SAVE_AS_ANOTHER_TITLE, UserDecision.SAVE_AS_ANOTHER),
                    PromptChoice(text.CANCEL_TITLE, UserDecision.CANCEL),
                ),
            )
        if state is SaveFlowState.PROMPT_NEW_NAME:
            return Prompt(
                state,
                text.SAVE_ALERT_TITLE,
                text.SAVE_ALERT_MESSAGE,
                (
                    PromptChoice(text.CANCEL_TITLE, UserDecision.CANCEL),
                    PromptChoice(text.SAVE_TITLE, UserDecision.SUBMIT_NAME),
                ),
                placeholder=text.SAVE_ALERT_PLACEHOLDER,
            )
        if state is SaveFlowState.CONFIRM_NAME_COLLISION:
            name = self._collision_name
            return Prompt(
                state,
                text.name_exists_title(name),
                text.name_exists_message(name),
                (
                    PromptChoice(text.YES_TITLE, UserDecision.OVERWRITE),
                    PromptChoice(text.NO_TITLE, UserDecision.KEEP_EXISTING),
                ),
            )
        if state is SaveFlowState.SAVED:
            return Prompt(state, text.save_success_title(self._outcome.name), "")
        if state is SaveFlowState.FAILED:
            return Prompt(
                state,
                text.save_failure_title(self._outcome.name),
                text.TRY_AGAIN_MESSAGE,
                (PromptChoice(text.OK_TITLE, UserDecision.ACKNOWLEDGE),),
            )
        return None

    # Transitions

    def _enter(self, state: SaveFlowState) -> SaveFlowState:
        logger.debug(f"Save flow: {self._state.name} -> {state.name}")
        self._state = state
        self._history.append(state)
        return state

    def _begin(self) -> SaveFlowState:
        self._outcome = None
        self._collision_name = None
        prior_name = self._grid.prior_save_name() or None
        if prior_name is not None and not is_valid_level_name(prior_name):
            logger.warning(f"Prior level name {prior_name!r} is not a valid name, asking for a new one")
            prior_name = None
        self._prior_name = prior_name

        if self._prior_name is None:
            return self._prompt_new_name()
        return self._enter(SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME)

    def _prompt_new_name(self) -> SaveFlowState:
        self._collision_name = None
        self._pending_name = ""
        self._confirm_enabled = False
        return self._enter(SaveFlowState.PROMPT_NEW_NAME)

    def _save_as_prior(self) -> SaveFlowState:
        return self._execute_save(SaveTarget(self._prior_name, is_overwrite=True))

    def _submit_name(self, name: str) -> SaveFlowState:
        self.edit_name(name)
        if not self._confirm_enabled:
            # Confirm is disabled for this text, nothing to act on
            logger.debug(f"Ignoring submit of invalid level name {name!r}")
            return self._state

        if self._store.exists(name):
            self._collision_name = name
            return self._enter(SaveFlowState.CONFIRM_NAME_COLLISION)
        return self._execute_save(SaveTarget(name, is_overwrite=False))

    def _overwrite_existing(self) -> SaveFlowState:
        return self._execute_save(SaveTarget(self._collision_name, is_overwrite=True))

    def _cancel(self) -> SaveFlowState:
        return self._finish(SaveFlowState.CANCELLED, SaveOutcome.cancelled())

    def _execute_save(self, target: SaveTarget) -> SaveFlowState:
        self._target = target
        self._enter(SaveFlowState.EXECUTE_SAVE)
        name = target.name

        failure_reason: Optional[str] = None
        try:
            self._store.write_level(name, self._grid)
        except LevelWriteError as e:
            failure_reason = e.reason
        except ValueError as e:
            failure_reason = str(e)
        if failure_reason is not None:
            logger.error(f"Level '{name}' could not be saved: {failure_reason}")

        # Thumbnail and metadata are written regardless and never decide the outcome
        image = self._capture_thumbnail()
        if image is not None:
            try:
                self._store.save_thumbnail(name, image)
            except (pygame.error, OSError, ValueError) as e:
                logger.warning(f"Thumbnail for '{name}' not saved: {e}")
        try:
            self._store.save_metadata(name)
        except (OSError, ValueError) as e:
            logger.warning(f"Metadata for '{name}' not saved: {e}")

        if failure_reason is None:
            outcome = SaveOutcome.success(name, overwrite=target.is_overwrite)
            return self._finish(SaveFlowState.SAVED, outcome)
        outcome = SaveOutcome.failure(name, failure_reason, overwrite=target.is_overwrite)
        return self._finish(SaveFlowState.FAILED, outcome)

    def _capture_thumbnail(self) -> Optional[pygame.Surface]:
        if self._render is None:
            return None
        try:
            image = self._render()
        except (pygame.error, ValueError, OSError) as e:
            logger.warning(f"Thumbnail unavailable: {e}")
            return None
        if image is None:
            logger.warning("Thumbnail unavailable: renderer returned no image")
        return image

    def _finish(self, state: SaveFlowState, outcome: SaveOutcome) -> SaveFlowState:
        self._target = None
        self._outcome = outcome
        self._enter(state)

        if self._event_bus:
            event_type = {
                SaveStatus.SAVED: EditorEvent.LEVEL_SAVED,
                SaveStatus.FAILED: EditorEvent.LEVEL_SAVE_FAILED,
                SaveStatus.CANCELLED: EditorEvent.LEVEL_SAVE_CANCELLED,
            }[outcome.status]
            self._event_bus.publish(
                event_type,
                name=outcome.name,
                reason=outcome.reason,
                overwrite=outcome.overwrite,
            )

        if self.on_complete:
            self.on_complete(outcome)
        return state
