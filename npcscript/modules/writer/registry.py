from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ModuleRegistry:
    """Remembers which Lua modules were already required during one writer pass."""

    _seen: set[str] = field(default_factory=set)
    _order: list[str] = field(default_factory=list)

    def require_once(self, module_id: str | None) -> bool:
        if not module_id:
            return False
        if module_id in self._seen:
            return False
        self._seen.add(module_id)
        self._order.append(module_id)
        return True

    @property
    def modules(self) -> tuple[str, ...]:
        return tuple(self._order)
