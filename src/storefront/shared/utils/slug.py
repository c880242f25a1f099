# 🔤 storefront/shared/utils/slug.py
"""
🔤 slug.py - детермінована нормалізація тексту в URL-safe slug.

🔹 `to_slug` прибирає діакритику, регістр та пунктуацію: "Dispositivos móviles" → "dispositivos-moviles".
🔹 Ідемпотентна: `to_slug(to_slug(x)) == to_slug(x)`, ніколи не піднімає винятків.
🔹 `slug_to_title` дає людський fallback-лейбл для невідомих ключів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re                                                   # 🧪 Заміна небажаних символів
import unicodedata                                          # 🔡 NFKD-розклад для діакритики
from typing import Optional                                 # 🧰 Типізація

__all__ = ["to_slug", "slug_to_title"]

# ================================
# ⚙️ КОНСТАНТИ МОДУЛЯ
# ================================
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")                  # 🧼 Будь-яка серія не-алфанумеричних символів
_SEPARATOR = "-"


# ================================
# 🧹 ПУБЛІЧНІ ФУНКЦІЇ
# ================================
def to_slug(text: Optional[str]) -> str:
    """
    🔤 Перетворює довільний текст у slug.

    Args:
        text (str | None): Людська назва (наприклад, `displayName` вузла каталогу).

    Returns:
        str: Рядок лише з [a-z0-9] та одинарних дефісів; "" для порожнього входу.
    """
    if not isinstance(text, str) or not text.strip():
        return ""

    lowered = text.lower()                                  # 🔡 Регістр до NFKD ("İ" дає i + крапку)
    decomposed = unicodedata.normalize("NFKD", lowered)     # 🧩 "ó" → "o" + комбінуючий знак
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RUN.sub(_SEPARATOR, stripped).strip(_SEPARATOR)


def slug_to_title(slug: Optional[str]) -> str:
    """🪄 "smart-tv" → "Smart Tv": розбиває по дефісу та робить першу літеру великою."""
    if not isinstance(slug, str) or not slug:
        return ""
    words = [word for word in slug.split(_SEPARATOR) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)
