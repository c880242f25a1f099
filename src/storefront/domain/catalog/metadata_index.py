# 🗂️ storefront/domain/catalog/metadata_index.py
"""
🗂️ MetadataIndex - незмінний багатоключовий індекс дерева каталогу.

🔹 Один прохід по дереву (O(n)) реєструє кожен вузол за id (глобально) та за code / slug
   в окремих мапах свого рівня: категорії, меню, підменю.
🔹 Пошук за code / slug іде від категорій до підменю, тож меню чи підменю з тим самим
   кодом або назвою ніколи не затіняє категорію.
🔹 Кожен вузол має ще й повний шлях `"<category>/<menu>/<submenu>"`: так однакові назви
   на різних рівнях чи в різних категоріях лишаються адресованими.
🔹 Усі читання тотальні: промах дає відформатований fallback, а не виняток.
🔹 Знімок не мутується: новий каталог → новий `MetadataIndex` через `build()`.

Колізії slug серед сусідів: у мапі рівня перемагає останній оброблений вузол,
кожна колізія логується та потрапляє у `collisions`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи побудови індексу
from dataclasses import dataclass                                   # 🧱 Опис колізії
from types import MappingProxyType                                  # 🧊 Незмінні мапи
from typing import Dict, Iterable, List, Mapping, Optional, Tuple   # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME                 # 🏷️ Префікс логерів
from storefront.shared.utils.slug import slug_to_title, to_slug     # 🔤 Slug та fallback-заголовок
from .entities import CatalogNode, NodeLevel                        # 🌳 Вузли каталогу

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.domain.catalog.index")

_LEVELS: Tuple[NodeLevel, ...] = (NodeLevel.CATEGORY, NodeLevel.MENU, NodeLevel.SUBMENU)
_PATH_SEPARATOR = "/"

LevelMaps = Mapping[NodeLevel, Mapping[str, CatalogNode]]


# ================================
# ⚠️ КОЛІЗІЯ SLUG
# ================================
@dataclass(frozen=True, slots=True)
class SlugCollision:
    """Два сусідні вузли нормалізувались в один slug; `winner_id` лишився у мапі."""

    slug: str
    loser_id: str
    winner_id: str


def _freeze_levels(maps: Mapping[NodeLevel, Mapping[str, CatalogNode]]) -> LevelMaps:
    return MappingProxyType({level: MappingProxyType(dict(maps.get(level, {}))) for level in _LEVELS})


# ================================
# 🗂️ ІНДЕКС
# ================================
class MetadataIndex:
    """🗂️ Незмінний знімок lookup-мап каталогу."""

    __slots__ = ("_roots", "_by_id", "_by_code", "_by_slug", "_by_path", "_path_of", "_collisions")

    def __init__(
        self,
        roots: Tuple[CatalogNode, ...],
        by_id: Mapping[str, CatalogNode],
        by_code: Mapping[NodeLevel, Mapping[str, CatalogNode]],
        by_slug: Mapping[NodeLevel, Mapping[str, CatalogNode]],
        by_path: Mapping[str, CatalogNode],
        path_of: Mapping[str, str],
        collisions: Tuple[SlugCollision, ...] = (),
    ) -> None:
        self._roots = tuple(roots)
        self._by_id = MappingProxyType(dict(by_id))
        self._by_code = _freeze_levels(by_code)
        self._by_slug = _freeze_levels(by_slug)
        self._by_path = MappingProxyType(dict(by_path))
        self._path_of = MappingProxyType(dict(path_of))
        self._collisions = tuple(collisions)

    # ================================
    # 🏗️ ПОБУДОВА
    # ================================
    @classmethod
    def empty(cls) -> "MetadataIndex":
        """Порожній індекс: усі читання дають fallback."""
        return cls((), {}, {}, {}, {}, {})

    @classmethod
    def build(cls, tree: Iterable[CatalogNode]) -> "MetadataIndex":
        """
        🏗️ Будує індекс за один прохід по дереву.

        Args:
            tree: Кореневі вузли (категорії) з вкладеними `children`.

        Returns:
            MetadataIndex: Новий незмінний знімок.
        """
        roots = tuple(tree)
        by_id: Dict[str, CatalogNode] = {}
        by_code: Dict[NodeLevel, Dict[str, CatalogNode]] = {level: {} for level in _LEVELS}
        by_slug: Dict[NodeLevel, Dict[str, CatalogNode]] = {level: {} for level in _LEVELS}
        by_path: Dict[str, CatalogNode] = {}
        path_of: Dict[str, str] = {}
        collisions: List[SlugCollision] = []

        # Явний стек замість рекурсії; порядок обходу = порядок payload
        stack: List[Tuple[CatalogNode, str]] = [(root, "") for root in reversed(roots)]
        while stack:
            node, parent_path = stack.pop()
            slug = node.slug
            codes = by_code[node.level]
            slugs = by_slug[node.level]

            by_id[node.id] = node
            codes[node.code.upper()] = node
            codes[node.code.lower()] = node

            path = parent_path
            if slug:
                previous = slugs.get(slug)
                if previous is not None and previous.parent_id == node.parent_id and previous.id != node.id:
                    collisions.append(SlugCollision(slug=slug, loser_id=previous.id, winner_id=node.id))
                    logger.warning(
                        "⚠️ catalog.slug_collision",
                        extra={"slug": slug, "loser_id": previous.id, "winner_id": node.id},
                    )
                slugs[slug] = node                                  # ♻️ Last processed wins
                path = f"{parent_path}{_PATH_SEPARATOR}{slug}" if parent_path else slug
                by_path[path] = node
                path_of[node.id] = path

            for child in reversed(node.children):
                stack.append((child, path))

        logger.info(
            "🗂️ catalog.index_built",
            extra={"nodes": len(by_id), "roots": len(roots), "collisions": len(collisions)},
        )
        return cls(roots, by_id, by_code, by_slug, by_path, path_of, tuple(collisions))

    # ================================
    # 🔍 ВНУТРІШНІЙ ПОШУК
    # ================================
    def _code_lookup(self, level: NodeLevel, code: str) -> Optional[CatalogNode]:
        codes = self._by_code[level]
        return codes.get(code.upper()) or codes.get(code.lower())

    def _resolve(self, key: str) -> Optional[CatalogNode]:
        """id → (code → slug) для категорій, потім меню, потім підменю → повний шлях."""
        node = self._by_id.get(key)
        if node is not None:
            return node
        lowered = key.lower()
        for level in _LEVELS:
            node = self._code_lookup(level, key) or self._by_slug[level].get(lowered)
            if node is not None:
                return node
        return self._by_path.get(lowered)

    def _address_of(self, node: CatalogNode) -> str:
        """Slug, за яким `get_node_by_slug` поверне саме цей вузол."""
        slug = node.slug
        owner = self.get_node_by_slug(slug)
        if owner is not None and owner.id == node.id:
            return slug
        return self._path_of.get(node.id, slug)

    # ================================
    # 📖 ПУБЛІЧНІ ЧИТАННЯ
    # ================================
    def get_display_name(self, key: Optional[str]) -> str:
        """🪪 Людська назва за id/code/slug; промах → "Title Cased" з ключа."""
        if not key:
            return ""
        node = self._resolve(key)
        if node is not None:
            return node.display_name
        logger.debug("🔍 catalog.lookup_miss", extra={"key": key, "op": "display_name"})
        return slug_to_title(key)

    def get_slug(self, key: Optional[str]) -> str:
        """
        🔤 Slug вузла за id/code/slug; промах → `to_slug(key)`.

        Якщо «голий» slug вузла зайнятий вузлом вищого рівня, повертається повний шлях,
        тож `get_node_by_slug(get_slug(id))` завжди веде назад до того ж вузла.
        """
        if not key:
            return ""
        node = self._resolve(key)
        if node is not None:
            return self._address_of(node)
        logger.debug("🔍 catalog.lookup_miss", extra={"key": key, "op": "slug"})
        return to_slug(key)

    def get_node_by_slug(self, slug: Optional[str]) -> Optional[CatalogNode]:
        """Спершу slug категорії, далі меню та підменю, далі повний шлях."""
        if not slug:
            return None
        lowered = slug.lower()
        for level in _LEVELS:
            node = self._by_slug[level].get(lowered)
            if node is not None:
                return node
        return self._by_path.get(lowered)

    def get_node_by_id(self, node_id: Optional[str]) -> Optional[CatalogNode]:
        if not node_id:
            return None
        return self._by_id.get(node_id)

    def get_node_by_code(self, code: Optional[str], level: Optional[NodeLevel] = None) -> Optional[CatalogNode]:
        """Пошук за code у мапі рівня `level`, або від категорій донизу, якщо рівень не задано."""
        if not code:
            return None
        for candidate_level in (level,) if level is not None else _LEVELS:
            node = self._code_lookup(candidate_level, code)
            if node is not None:
                return node
        return None

    def get_category(self, key: Optional[str]) -> Optional[CatalogNode]:
        """📁 Лише категорії: за id, code або slug."""
        if not key:
            return None
        node = self._by_id.get(key)
        if node is not None:
            return node if node.level is NodeLevel.CATEGORY else None
        return self._code_lookup(NodeLevel.CATEGORY, key) or self._by_slug[NodeLevel.CATEGORY].get(key.lower())

    def find_child_by_code(self, parent_id: Optional[str], code: Optional[str]) -> Optional[CatalogNode]:
        """👪 Регістронезалежний пошук серед прямих нащадків `parent_id`."""
        parent = self.get_node_by_id(parent_id)
        if parent is None or not code:
            return None
        folded = code.casefold()
        for child in parent.children:
            if child.code.casefold() == folded:
                return child
        return None

    def path_of(self, node_id: Optional[str]) -> str:
        """🧭 Повний шлях slug-ів вузла ("" для невідомого id)."""
        if not node_id:
            return ""
        return self._path_of.get(node_id, "")

    # ================================
    # 📊 МЕТАДАНІ ЗНІМКА
    # ================================
    @property
    def roots(self) -> Tuple[CatalogNode, ...]:
        return self._roots

    @property
    def collisions(self) -> Tuple[SlugCollision, ...]:
        return self._collisions

    def nodes(self) -> Iterable[CatalogNode]:
        return self._by_id.values()

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __repr__(self) -> str:
        return f"MetadataIndex(nodes={len(self._by_id)}, roots={len(self._roots)})"


__all__ = ["MetadataIndex", "SlugCollision"]
