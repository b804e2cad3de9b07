"""Ordered stack of input layers, highest priority last."""

from __future__ import annotations

from typing import Iterator, List

from modal_motion.runtime import telemetry

from .base_mode import MISS, KeyInput, Mode, ModeResult


class InputStack:
    """Offers each key to the top layer first.

    A layer that reports a miss lets the key fall through, so an upper layer
    shadows the chords it binds without destroying the bindings beneath it.
    """

    def __init__(self, base: Mode) -> None:
        self._layers: List[Mode] = [base]

    @property
    def base(self) -> Mode:
        return self._layers[0]

    @property
    def top(self) -> Mode:
        return self._layers[-1]

    def __iter__(self) -> Iterator[Mode]:
        return iter(tuple(self._layers))

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, layer: object) -> bool:
        return any(existing is layer for existing in self._layers)

    def names(self) -> tuple[str, ...]:
        return tuple(layer.name for layer in self._layers)

    def push(self, layer: Mode) -> None:
        if layer in self:
            raise ValueError(f"Layer '{layer.name}' already installed")
        previous = self.top
        self._layers.append(layer)
        try:
            layer.on_enter(previous.name)
        except Exception:
            self._layers.pop()
            raise

    def remove(self, layer: Mode) -> bool:
        """Remove ``layer`` wherever it sits; the base layer stays put."""

        for index, existing in enumerate(self._layers):
            if existing is layer:
                if index == 0:
                    raise ValueError("The base layer cannot be removed")
                del self._layers[index]
                layer.on_exit()
                return True
        return False

    def dispatch(self, key: KeyInput) -> ModeResult:
        layers = tuple(reversed(self._layers))
        for depth, layer in enumerate(layers):
            with telemetry.span(
                name=f"layer::{layer.name}",
                component=True,
                metadata={"key": key.key, "layer": layer.name},
            ):
                result = layer.handle_key(key)
            if result.status != MISS:
                for lower in layers[depth + 1 :]:
                    lower.reset_pending()
                return result
        return ModeResult(consumed=False, status="unhandled")


__all__ = ["InputStack"]
