# 🔑 storefront/domain/prefetch/fingerprint.py
"""
🔑 Канонічний ключ (fingerprint) для параметрів префетчу.

🔹 `PrefetchParams` - нормалізована трійка (category, menu, submenu).
🔹 `fingerprint()` не залежить від регістру, пробілів і порядку значень у списках через кому.
🔹 `from_mapping()` приймає і camelCase, і snake_case, і легасі-ключі API.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass                                   # 🧱 Value-object параметрів
from typing import Any, Mapping, Optional, Sequence                 # 🧰 Типи

# ================================
# ⚙️ КОНСТАНТИ
# ================================
FINGERPRINT_PREFIX = "prefetch:"

_CATEGORY_KEYS = ("categoryCode", "category_code", "categoria", "category")
_MENU_KEYS = ("menuId", "menu_id", "menuUuid")
_SUBMENU_KEYS = ("submenuId", "submenu_id", "submenuUuid")


def _normalize_component(value: Optional[Any]) -> str:
    """'AV, it,AV' → 'av,it': trim, lower, dedupe, sort."""
    if value is None:
        return ""
    parts = {part.strip().lower() for part in str(value).split(",")}
    parts.discard("")
    return ",".join(sorted(parts))


def _pick(mapping: Mapping[str, Any], keys: Sequence[str]) -> Optional[Any]:
    for key in keys:
        if mapping.get(key) not in (None, ""):
            return mapping[key]
    return None


# ================================
# 🧱 ПАРАМЕТРИ ПРЕФЕТЧУ
# ================================
@dataclass(frozen=True, slots=True)
class PrefetchParams:
    """Трійка навігаційного елемента, на який навели курсор."""

    category_code: str
    menu_id: Optional[str] = None
    submenu_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "PrefetchParams":
        """Будує параметри з довільного dict-подібного payload."""
        category = _pick(mapping, _CATEGORY_KEYS)
        menu = _pick(mapping, _MENU_KEYS)
        submenu = _pick(mapping, _SUBMENU_KEYS)
        return cls(
            category_code=str(category) if category is not None else "",
            menu_id=str(menu) if menu is not None else None,
            submenu_id=str(submenu) if submenu is not None else None,
        )

    @property
    def key(self) -> str:
        return fingerprint(self)


def fingerprint(params: PrefetchParams) -> str:
    """
    🔑 Канонічний рядок для дедуплікації.

    Два логічно однакові набори параметрів завжди дають той самий ключ.
    """
    return (
        f"{FINGERPRINT_PREFIX}"
        f"category={_normalize_component(params.category_code)}"
        f"|menu={_normalize_component(params.menu_id)}"
        f"|submenu={_normalize_component(params.submenu_id)}"
    )


__all__ = ["PrefetchParams", "fingerprint", "FINGERPRINT_PREFIX"]
