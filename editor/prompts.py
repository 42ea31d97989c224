"""
Prompt primitives for the save flow.

The save flow never shows anything itself. A Prompter asks the user
for text or a choice and shows result messages; run_save_flow feeds
the answers to a SaveFlowController until the flow ends.

TkPrompter implements the primitives with tkinter dialogs. tkinter is
imported on first use so the rest of the editor works without it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Sequence

from editor.save_flow import SaveFlowController, SaveFlowState, SaveOutcome, UserDecision
from editor.validation import is_valid_level_name

if TYPE_CHECKING:
    import tkinter as tk

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Modal prompts, one at a time."""

    def prompt_text(
        self,
        title: str,
        message: str,
        placeholder: str = "",
        on_edit: Optional[Callable[[str], bool]] = None,
    ) -> Optional[str]:
        """
        Ask for a line of text.

        Args:
            on_edit: Called with the full text after every edit; the
                confirm action is enabled only while it returns True

        Returns:
            The confirmed text, or None if cancelled
        """
        ...

    def prompt_choice(self, title: str, message: str, options: Sequence[str]) -> Optional[str]:
        """Ask the user to pick one option. Returns None if cancelled."""
        ...

    def show_message(self, title: str, message: str) -> None:
        """Show a message and wait for it to be dismissed."""
        ...


def run_save_flow(controller: SaveFlowController, prompter: Prompter) -> SaveOutcome:
    """
    Run a save flow to its end using modal prompts.

    A failed save is shown to the user and, once dismissed, the flow
    starts over so the user can retry or cancel.

    Returns:
        The final outcome (saved or cancelled)
    """
    state = controller.start()

    while True:
        prompt = controller.current_prompt()

        if state is SaveFlowState.PROMPT_NEW_NAME:
            name = prompter.prompt_text(
                prompt.title,
                prompt.message,
                prompt.placeholder or "",
                on_edit=controller.edit_name,
            )
            if name is None:
                state = controller.cancel()
            else:
                state = controller.submit_name(name)

        elif state in (SaveFlowState.CONFIRM_OVERWRITE_OR_RENAME,
                       SaveFlowState.CONFIRM_NAME_COLLISION):
            label = prompter.prompt_choice(prompt.title, prompt.message, prompt.labels)
            if label is None:
                state = controller.cancel()
            else:
                state = controller.handle(prompt.decision_for(label))

        elif state is SaveFlowState.FAILED:
            prompter.show_message(prompt.title, prompt.message)
            state = controller.handle(UserDecision.ACKNOWLEDGE)

        elif state is SaveFlowState.SAVED:
            prompter.show_message(prompt.title, prompt.message)
            break

        else:
            break

    logger.debug(f"Save flow finished: {controller.outcome}")
    return controller.outcome


# -----------------------------------------------------------------------------
# tkinter dialogs
# -----------------------------------------------------------------------------

def _get_tk_root() -> tk.Tk:
    """Create a hidden Tk root window to own a dialog."""
    import tkinter as tk

    root = tk.Tk()
    root.withdraw()
    root.attributes('-topmost', True)
    return root


class TkPrompter:
    """
    Prompter backed by tkinter dialogs.

    Usage:
        outcome = run_save_flow(controller, TkPrompter())
    """

    def __init__(self, padding: int = 12):
        self.padding = padding

    def prompt_text(
        self,
        title: str,
        message: str,
        placeholder: str = "",
        on_edit: Optional[Callable[[str], bool]] = None,
    ) -> Optional[str]:
        import tkinter as tk

        on_edit = on_edit or is_valid_level_name
        result: dict[str, Optional[str]] = {"value": None}

        root = _get_tk_root()
        try:
            dialog = self._make_dialog(root, title, message)
            value = tk.StringVar(master=dialog)
            entry = tk.Entry(dialog, textvariable=value, width=32)
            entry.pack(padx=self.padding, pady=(0, self.padding))
            if placeholder:
                _set_placeholder(entry, placeholder)

            buttons = tk.Frame(dialog)
            buttons.pack(padx=self.padding, pady=(0, self.padding), fill=tk.X)

            def submit(*_) -> None:
                if save_button["state"] == tk.NORMAL:
                    result["value"] = value.get()
                    dialog.destroy()

            tk.Button(buttons, text="Cancel", command=dialog.destroy).pack(side=tk.LEFT)
            save_button = tk.Button(buttons, text="Save", command=submit, state=tk.DISABLED)
            save_button.pack(side=tk.RIGHT)

            def text_changed(*_) -> None:
                enabled = on_edit(value.get())
                save_button.config(state=tk.NORMAL if enabled else tk.DISABLED)

            value.trace_add("write", text_changed)
            entry.bind("<Return>", submit)
            entry.bind("<Escape>", lambda _: dialog.destroy())
            entry.focus_set()

            root.wait_window(dialog)
        finally:
            root.destroy()

        return result["value"]

    def prompt_choice(self, title: str, message: str, options: Sequence[str]) -> Optional[str]:
        import tkinter as tk

        result: dict[str, Optional[str]] = {"value": None}

        root = _get_tk_root()
        try:
            dialog = self._make_dialog(root, title, message)
            for option in options:
                def choose(option: str = option) -> None:
                    result["value"] = option
                    dialog.destroy()

                tk.Button(dialog, text=option, command=choose).pack(
                    padx=self.padding, pady=(0, self.padding // 2), fill=tk.X
                )

            root.wait_window(dialog)
        finally:
            root.destroy()

        return result["value"]

    def show_message(self, title: str, message: str) -> None:
        from tkinter import messagebox

        root = _get_tk_root()
        try:
            messagebox.showinfo(title, message or title)
        finally:
            root.destroy()

    def _make_dialog(self, root: tk.Tk, title: str, message: str) -> tk.Toplevel:
        import tkinter as tk

        dialog = tk.Toplevel(root)
        dialog.title(title)
        dialog.resizable(False, False)
        dialog.protocol("WM_DELETE_WINDOW", dialog.destroy)

        tk.Label(dialog, text=title, font=("TkDefaultFont", 11, "bold")).pack(
            padx=self.padding, pady=(self.padding, 4)
        )
        if message:
            tk.Label(dialog, text=message, wraplength=320, justify=tk.LEFT).pack(
                padx=self.padding, pady=(0, self.padding)
            )

        dialog.grab_set()
        return dialog


def _set_placeholder(entry: tk.Entry, placeholder: str) -> None:
    """Grey hint text shown until the first key press."""
    import tkinter as tk

    normal_color = entry.cget("fg")

    def clear(_) -> None:
        if entry.cget("fg") == "grey":
            entry.delete(0, tk.END)
            entry.config(fg=normal_color)

    # Runs before the edit trace is attached, so the hint never reaches on_edit
    entry.config(fg="grey")
    entry.insert(0, placeholder)
    entry.bind("<Key>", clear, add="+")
