import os
import sys
import pytest
from unittest.mock import MagicMock, patch

# Ensure engine modules can be imported
sys.path.append(os.getcwd())


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame display and image IO so tests run headless.
    Thumbnail writes go to the pygame.image mock instead of disk.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.event'), \
         patch('pygame.image'):
        yield


class ScriptedPrompter:
    """
    Prompter that answers from a script instead of showing dialogs.

    Each answer is consumed by the next prompt_text / prompt_choice call.
    Text answers are typed one character at a time through on_edit so
    the confirm gating sees every edit; None answers cancel.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
        self.messages = []
        self.confirm_states = []

    def _next(self, kind, title):
        assert self.answers, f"Unexpected {kind} prompt: {title}"
        return self.answers.pop(0)

    def prompt_text(self, title, message, placeholder="", on_edit=None):
        self.prompts.append(("text", title))
        answer = self._next("text", title)
        if answer is not None and on_edit is not None:
            for end in range(1, len(answer) + 1):
                self.confirm_states.append((answer[:end], on_edit(answer[:end])))
        return answer

    def prompt_choice(self, title, message, options):
        self.prompts.append(("choice", title))
        answer = self._next("choice", title)
        assert answer is None or answer in options, f"{answer!r} not in {options}"
        return answer

    def show_message(self, title, message):
        self.messages.append(title)


@pytest.fixture
def make_prompter():
    return ScriptedPrompter


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def editor_config(tmp_path):
    from editor.config import EditorConfig
    return EditorConfig(levels_dir=tmp_path / "levels")


@pytest.fixture
def store(editor_config):
    """Level store writing into a temporary directory."""
    from editor.level_store import LevelFileStore
    return LevelFileStore(editor_config)


@pytest.fixture
def grid():
    """Small grid with a few bubbles."""
    from framework.bubbles import BubbleGridModel, BubbleType

    grid = BubbleGridModel(rows=4, columns=5)
    grid.set(0, 0, BubbleType.RED)
    grid.set(1, 2, BubbleType.BLUE)
    grid.set(3, 3, BubbleType.STAR)
    return grid


@pytest.fixture
def fake_image():
    return MagicMock(name="Surface")
