"""Mode controller: installs and removes the overlay dispatch table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modal_motion.runtime import telemetry

from .base_mode import Mode, ModeContext
from .cursor import CursorAppearance, CursorStyle
from .stack import InputStack


class ModeState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class ModeConfig:
    """Knobs for the overlay mode.

    Deactivation always puts back the style recorded at activation.
    ``inactive_cursor`` is what ``refresh_cursor`` paints while inactive
    (focus changes, prompt entry); ``None`` leaves the host's current style.
    """

    active_cursor: CursorStyle = CursorStyle.BOX
    inactive_cursor: Optional[CursorStyle] = None
    overlay_mode: str = "overlay"
    host_mode: str = "global"
    escape_keys: tuple[str, ...] = ("ESC", "<Esc>")

    @classmethod
    def from_env(cls) -> "ModeConfig":
        active = telemetry.env("ACTIVE_CURSOR")
        inactive = telemetry.env("INACTIVE_CURSOR")
        return cls(
            active_cursor=CursorStyle.parse(active) if active else CursorStyle.BOX,
            inactive_cursor=CursorStyle.parse(inactive) if inactive else None,
        )


class ModeController:
    """Inactive/Active state machine around one overlay layer.

    Activation remembers the layer that was on top of the input stack and
    the cursor style in effect; deactivation removes the overlay and puts the
    style back. Both transitions are idempotent.
    """

    def __init__(
        self,
        context: ModeContext,
        stack: InputStack,
        overlay: Mode,
        appearance: CursorAppearance,
        *,
        config: Optional[ModeConfig] = None,
    ) -> None:
        self.context = context
        self.stack = stack
        self.overlay = overlay
        self.appearance = appearance
        self.config = config or ModeConfig()
        self.logger = telemetry.get_logger("modal_motion.modes.controller")
        self._state = ModeState.INACTIVE
        self._previous_layer: Optional[Mode] = None
        self._saved_style: Optional[CursorStyle] = None
        self.context.extras.setdefault("mode_controller", self)

    @property
    def state(self) -> ModeState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is ModeState.ACTIVE

    @property
    def previous_layer(self) -> Optional[Mode]:
        return self._previous_layer

    def activate(self) -> bool:
        """Install the overlay; returns ``False`` when nothing changed."""

        if self.active:
            self.refresh_cursor()
            return False

        if self.overlay in self.stack:
            self.force_clear(reason="stale")

        top = self.stack.top
        if top.constrained:
            telemetry.record_event(
                "mode.activate_refused", level="warning", data={"layer": top.name}
            )
            return False

        with telemetry.span(
            "mode::activate",
            component="modes",
            metadata={"previous_layer": top.name},
        ):
            saved_style = self.appearance.style
            try:
                self.stack.push(self.overlay)
                self.appearance.apply(self.config.active_cursor)
            except Exception:
                if self.overlay in self.stack:
                    self.stack.remove(self.overlay)
                self.appearance.apply(saved_style, notify=False)
                raise

            self._state = ModeState.ACTIVE
            self._previous_layer = top
            self._saved_style = saved_style

        self.context.bus.emit(
            "mode.activate", {"previous_layer": top.name, "cursor": saved_style}
        )
        return True

    def deactivate(self) -> bool:
        """Remove the overlay; returns ``False`` when nothing changed."""

        if not self.active:
            self.refresh_cursor()
            return False

        with telemetry.span("mode::deactivate", component="modes"):
            self._teardown(reason="deactivate")
        return True

    def force_clear(self, reason: str = "force") -> None:
        """Drop the overlay whatever the recorded state says. Never raises."""

        stuck = self.overlay in self.stack
        if not self.active and not stuck:
            self._apply_quietly(self._inactive_style())
            return
        telemetry.record_event(
            "mode.force_clear",
            data={"reason": reason, "recorded_active": self.active, "stuck": stuck},
        )
        self._teardown(reason=reason, strict=False)

    def on_escape(self) -> None:
        self.force_clear(reason="escape")

    def on_constrained_context(self) -> None:
        self.force_clear(reason="constrained_context")

    def refresh_cursor(self) -> None:
        """Apply the style belonging to the current state."""

        if self.active:
            self._apply_quietly(self.config.active_cursor)
        else:
            self._apply_quietly(self._inactive_style())

    def _inactive_style(self) -> CursorStyle:
        return self.config.inactive_cursor or self.appearance.style

    def _teardown(self, *, reason: str, strict: bool = True) -> None:
        previous = self._previous_layer
        restore = self._saved_style or self.appearance.style
        self.stack.remove(self.overlay)
        self.overlay.reset_pending()

        self._state = ModeState.INACTIVE
        self._previous_layer = None
        self._saved_style = None

        if previous is not None and self.stack.top is not previous:
            telemetry.record_event(
                "mode.restore_mismatch",
                level="warning",
                data={"expected": previous.name, "actual": self.stack.top.name},
            )

        payload = {"reason": reason, "restored_layer": self.stack.top.name}
        if strict:
            self.appearance.apply(restore)
            self.context.bus.emit("mode.deactivate", payload)
            return

        self._apply_quietly(restore)
        try:
            self.context.bus.emit("mode.deactivate", payload)
        except Exception as exc:
            telemetry.record_event(
                "mode.deactivate_listener_failed",
                level="error",
                data={"reason": reason, "error": str(exc)},
            )

    def _apply_quietly(self, style: CursorStyle) -> None:
        try:
            self.appearance.apply(style)
        except Exception as exc:
            telemetry.record_event(
                "mode.cursor_refresh_failed",
                level="error",
                data={"style": style.value, "error": str(exc)},
            )


__all__ = ["ModeController", "ModeConfig", "ModeState"]
