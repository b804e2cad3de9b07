"""Keymap registry: command handlers and per-mode dispatch tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Mapping, Optional

from modal_motion.runtime.telemetry import span

from .commands import Command
from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding reuses a chord already bound in its mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns command handlers and the bindings of every keymap mode."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[Command, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[str, str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, command: Command | str) -> ActionRef:
        key = Command.parse(command)
        try:
            return self._actions[key]
        except KeyError as exc:
            raise KeyError(f"No action registered for '{key.value}'") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with span(
            "keymaps::register_action",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"command": action.id},
        ):
            if not replace and action.command in self._actions:
                raise ValueError(f"Action '{action.id}' already registered")
            self._actions[action.command] = action
            return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.command not in self._actions:
                handle.add_metadata("missing_action", binding.command.value)
                raise KeyError(
                    f"Binding '{binding.id}' references unregistered command "
                    f"'{binding.command.value}'"
                )

            conflicts = self.detect_conflicts(binding)
            if conflicts and not replace:
                raise KeymapConflictError(binding, conflicts)
            if not replace and binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            for stale in conflicts:
                self._drop(stale)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                self._drop(existing)

            self._bindings[binding.id] = binding
            self._mode_index.setdefault(binding.mode, {})[
                binding.key_signature
            ] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._drop(binding)
        self._revision += 1
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for binding_id in self._mode_index.get(mode, {}).values():
            yield self._bindings[binding_id]

    def table(self, mode: str) -> Mapping[str, Command]:
        """Plain chord -> command lookup for one keymap mode."""

        return {
            signature: self._bindings[binding_id].command
            for signature, binding_id in self._mode_index.get(mode, {}).items()
        }

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._mode_index)),
        )

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        match_id = self._mode_index.get(binding.mode, {}).get(binding.key_signature)
        if match_id is None or match_id == binding.id:
            return []
        return [self._bindings[match_id]]

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._mode_index.get(binding.mode)
        if not bucket:
            return
        if bucket.get(binding.key_signature) == binding.id:
            del bucket[binding.key_signature]
        if not bucket:
            self._mode_index.pop(binding.mode, None)


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
