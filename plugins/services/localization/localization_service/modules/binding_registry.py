"""
Registry of text bindings - external targets re-filled on language change
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

TextTarget = Callable[[str, str], Any]


def _target_key(target: TextTarget):
    """Identity of a target; bound methods are identified by owner and function"""
    if hasattr(target, '__self__') and hasattr(target, '__func__'):
        return id(target.__self__), target.__func__
    return id(target)


def _make_ref(target: TextTarget) -> Callable[[], Optional[TextTarget]]:
    # Bound methods are held weakly so the owner's lifetime is not extended
    if hasattr(target, '__self__') and hasattr(target, '__func__'):
        try:
            return weakref.WeakMethod(target)
        except TypeError:
            pass
    return lambda: target


@dataclass
class StaticTextBinding:
    """Target + row + last pushed text"""
    ref: Callable[[], Optional[TextTarget]] = field(repr=False)
    key: Any = field(repr=False)
    row: int
    last_text: str = ""

    @property
    def target(self) -> Optional[TextTarget]:
        return self.ref()

    def is_alive(self) -> bool:
        return self.ref() is not None


@dataclass
class DynamicTextBinding(StaticTextBinding):
    """Static binding plus the ordered arguments replayed on every refresh"""
    args: Tuple[Any, ...] = ()
    last_formatted: str = ""


TextBinding = Union[StaticTextBinding, DynamicTextBinding]


class BindingRegistry:
    """
    Observer list of text targets:
    - One binding per target, re-binding updates in place
    - A target lives in the static or the dynamic list, never both
    - Bindings of collected owners are pruned
    """

    def __init__(self, logger):
        self.logger = logger
        self._static: List[StaticTextBinding] = []
        self._dynamic: List[DynamicTextBinding] = []

    def _find(self, bindings: List[TextBinding], key) -> Optional[TextBinding]:
        for binding in bindings:
            if binding.key == key and binding.is_alive():
                return binding
        return None

    def bind_static(self, target: TextTarget, row: int) -> StaticTextBinding:
        self.prune()
        key = _target_key(target)
        self._remove_key(self._dynamic, key)

        binding = self._find(self._static, key)
        if binding is None:
            binding = StaticTextBinding(ref=_make_ref(target), key=key, row=row)
            self._static.append(binding)
        else:
            binding.row = row
        return binding

    def bind_dynamic(self, target: TextTarget, row: int, args: Tuple[Any, ...]) -> DynamicTextBinding:
        self.prune()
        key = _target_key(target)
        self._remove_key(self._static, key)

        binding = self._find(self._dynamic, key)
        if binding is None:
            binding = DynamicTextBinding(ref=_make_ref(target), key=key, row=row, args=tuple(args))
            self._dynamic.append(binding)
        else:
            binding.row = row
            binding.args = tuple(args)
        return binding

    def unbind(self, target: TextTarget) -> bool:
        key = _target_key(target)
        removed = self._remove_key(self._static, key) + self._remove_key(self._dynamic, key)
        return removed > 0

    @staticmethod
    def _remove_key(bindings: List[TextBinding], key) -> int:
        before = len(bindings)
        bindings[:] = [binding for binding in bindings if binding.key != key]
        return before - len(bindings)

    def prune(self) -> int:
        """Drop bindings whose target is gone"""
        before = len(self._static) + len(self._dynamic)
        self._static[:] = [binding for binding in self._static if binding.is_alive()]
        self._dynamic[:] = [binding for binding in self._dynamic if binding.is_alive()]
        removed = before - len(self._static) - len(self._dynamic)
        if removed:
            self.logger.debug(f"[Localization] Removed {removed} bindings with collected targets")
        return removed

    def push(self, binding: TextBinding, text: str, font_selector: str) -> bool:
        """Deliver text to the target; empty text is not pushed"""
        target = binding.target
        if target is None or not text:
            return False

        try:
            target(text, font_selector)
        except Exception as e:
            self.logger.error(f"[Localization] Text target failed for row {binding.row}: {e}")
            return False

        if isinstance(binding, DynamicTextBinding):
            binding.last_formatted = text
        else:
            binding.last_text = text
        return True

    def static_bindings(self) -> Iterator[StaticTextBinding]:
        return iter(list(self._static))

    def dynamic_bindings(self) -> Iterator[DynamicTextBinding]:
        return iter(list(self._dynamic))

    def __len__(self) -> int:
        return len(self._static) + len(self._dynamic)
