# 🔮 storefront/infrastructure/prefetch/coordinator.py
"""
🔮 PrefetchCoordinator - дедуп-кеш і автомат станів спекулятивних запитів.

🔹 Ключ запису = fingerprint трійки (category, menu, submenu).
🔹 Debounce: на кожен ключ живе не більше одного `TimerHandle`, новий виклик скасовує старий.
🔹 `batch()` фільтрує та позначає INFLIGHT без жодного `await` між перевіркою і мутацією,
   тому два швидкі batch-виклики не запитують той самий ключ двічі.
🔹 Помилки дій логуються та ковтаються: префетч best-effort і ніколи не ламає UI.
🔹 `cancel()` знімає лише ще не спрацьований таймер; INFLIGHT-запит доживає до кінця.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # ⏱️ Таймери та задачі
import inspect                                                      # 🔍 Розпізнавання awaitable
import logging                                                      # 🧾 Логи автомата
import time                                                         # ⏱️ Монотонний годинник
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

# 🧩 Внутрішні модулі проєкту
from storefront.domain.prefetch import (
    PrefetchCacheEntry,
    PrefetchParams,
    PrefetchState,
    fingerprint,
)
from storefront.errors.custom_errors import AppError
from storefront.shared.utils.logger import LOG_NAME
from .metrics import (
    PREFETCH_BATCH_SIZE,
    PREFETCH_CANCELLED,
    PREFETCH_COMPLETED,
    PREFETCH_DEDUPLICATED,
    PREFETCH_SCHEDULED,
)

# ================================
# 🧾 ЛОГЕР ТА ТИПИ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.prefetch.coordinator")

Clock = Callable[[], float]
PrefetchAction = Callable[[], Union[Awaitable[Any], Any]]
BatchAction = Callable[[List[PrefetchParams]], Union[Awaitable[Any], Any]]

DEFAULT_TTL_SEC = 300.0


# ================================
# 🔮 КООРДИНАТОР
# ================================
class PrefetchCoordinator:
    """🔮 Власник дедуп-кешу; живе весь процес, мутується лише з event loop."""

    def __init__(
        self,
        ttl_sec: float = DEFAULT_TTL_SEC,
        *,
        clock: Clock = time.monotonic,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._ttl = max(0.0, float(ttl_sec))                        # ⏳ Свіжість DONE-запису
        self._clock = clock                                         # ⏱️ Годинник для TTL (підміняється в тестах)
        self._loop = loop                                           # 🔁 None → поточний running loop
        self._entries: Dict[str, PrefetchCacheEntry] = {}           # 🗂️ fingerprint → запис
        self._tasks: Set["asyncio.Task[None]"] = set()              # 🚀 Живі задачі запитів
        self._generation = 0                                        # 🔢 Монотонний лічильник стартів, не скидається clear()
        logger.debug("⚙️ PrefetchCoordinator init", extra={"ttl_sec": self._ttl})

    # ================================
    # 🔍 ДОПУСК
    # ================================
    def should_prefetch(self, params: PrefetchParams) -> bool:
        """
        ✅ True, якщо запису немає, він IDLE / FAILED, або DONE з вичерпаним TTL.
        False для SCHEDULED, INFLIGHT та свіжого DONE.
        """
        return self._is_eligible(self._entries.get(fingerprint(params)))

    def _is_eligible(self, entry: Optional[PrefetchCacheEntry]) -> bool:
        if entry is None:
            return True
        if entry.state.is_busy:
            return False
        return not entry.is_fresh(self._clock())

    # ================================
    # ⏳ DEBOUNCE
    # ================================
    def schedule_prefetch(self, params: PrefetchParams, delay_ms: float, action: PrefetchAction) -> bool:
        """
        ⏳ Запускає (або перезапускає) debounce-таймер для ключа.

        Існуючий таймер того ж ключа скасовується до встановлення нового, тож
        виживає лише останній виклик. INFLIGHT і свіжий DONE не плануються.

        Returns:
            bool: True, якщо таймер встановлено.
        """
        key = fingerprint(params)
        entry = self._entries.get(key)
        if entry is not None and entry.state is not PrefetchState.SCHEDULED and not self._is_eligible(entry):
            PREFETCH_DEDUPLICATED.inc()
            logger.debug("🧊 prefetch.schedule_skipped", extra={"key": key, "state": str(entry.state)})
            return False

        if entry is None:
            entry = self._entries[key] = PrefetchCacheEntry(key=key)

        self._transition(entry, PrefetchState.SCHEDULED)
        replaced = entry.clear_timer()                              # 🔁 Cancel-existing-before-set
        delay_sec = max(0.0, float(delay_ms) / 1000.0)
        entry.timer_handle = self._get_loop().call_later(delay_sec, self._fire, key, action)
        PREFETCH_SCHEDULED.inc()
        logger.debug("⏳ prefetch.scheduled", extra={"key": key, "delay_ms": delay_ms, "replaced": replaced})
        return True

    def cancel(self, params: PrefetchParams) -> bool:
        """
        🛑 Знімає ще не спрацьований таймер (SCHEDULED → IDLE).

        Для INFLIGHT та інших станів нічого не робить: розпочаті запити не перериваються.
        """
        key = fingerprint(params)
        entry = self._entries.get(key)
        if entry is None or entry.state is not PrefetchState.SCHEDULED:
            return False
        entry.clear_timer()
        self._transition(entry, PrefetchState.IDLE)
        PREFETCH_CANCELLED.inc()
        logger.debug("🛑 prefetch.cancelled", extra={"key": key})
        return True

    def _fire(self, key: str, action: PrefetchAction) -> None:
        """Колбек таймера: SCHEDULED → INFLIGHT і старт задачі."""
        entry = self._entries.get(key)
        if entry is None or entry.state is not PrefetchState.SCHEDULED:
            return                                                  # 🧹 Запис очищено або скасовано
        entry.timer_handle = None
        generation = self._mark_inflight(entry)
        self._spawn(self._run_single(key, generation, action), name=f"prefetch:{key}")

    # ================================
    # 📦 ГРУПОВИЙ ПРЕФЕТЧ
    # ================================
    def batch(self, params_list: Iterable[PrefetchParams], action: BatchAction) -> Optional["asyncio.Task[None]"]:
        """
        📦 Один груповий виклик `action(survivors)` для всіх допущених ключів.

        Фільтр `should_prefetch` і позначка INFLIGHT виконуються синхронно, без
        передачі керування event loop. Повтори в межах списку зливаються.

        Returns:
            Task | None: Задача групового запиту або None, якщо допущених ключів немає.
        """
        survivors: List[PrefetchParams] = []
        seen: Set[str] = set()
        for params in params_list:
            key = fingerprint(params)
            if key in seen:
                continue
            seen.add(key)
            if self._is_eligible(self._entries.get(key)):
                survivors.append(params)
            else:
                PREFETCH_DEDUPLICATED.inc()

        if not survivors:
            logger.debug("🧊 prefetch.batch_empty", extra={"requested": len(seen)})
            return None

        tickets: List[Tuple[str, int]] = []
        for params in survivors:
            key = fingerprint(params)
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = PrefetchCacheEntry(key=key)
            tickets.append((key, self._mark_inflight(entry)))

        PREFETCH_BATCH_SIZE.observe(len(survivors))
        logger.debug("📦 prefetch.batch_started", extra={"admitted": len(survivors), "requested": len(seen)})
        return self._spawn(self._run_group(tickets, survivors, action), name=f"prefetch-batch:{len(survivors)}")

    # ================================
    # 🚀 ВИКОНАННЯ
    # ================================
    def _transition(self, entry: PrefetchCacheEntry, target: PrefetchState) -> None:
        """Єдина точка зміни стану; недозволений перехід - помилка в логіці координатора."""
        if not entry.state.can_transition_to(target):
            raise RuntimeError(f"Invalid prefetch transition {entry.state} -> {target} for {entry.key}")
        entry.state = target

    def _mark_inflight(self, entry: PrefetchCacheEntry) -> int:
        self._transition(entry, PrefetchState.INFLIGHT)
        entry.clear_timer()
        entry.expires_at = None
        entry.attempts += 1
        self._generation += 1
        entry.generation = self._generation
        return entry.generation

    def _spawn(self, coro: Awaitable[None], *, name: str) -> "asyncio.Task[None]":
        task = self._get_loop().create_task(coro, name=name)       # type: ignore[arg-type]
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_single(self, key: str, generation: int, action: PrefetchAction) -> None:
        await self._execute([(key, generation)], action)

    async def _run_group(
        self,
        tickets: Sequence[Tuple[str, int]],
        survivors: List[PrefetchParams],
        action: BatchAction,
    ) -> None:
        await self._execute(tickets, lambda: action(list(survivors)))

    async def _execute(self, tickets: Sequence[Tuple[str, int]], call: PrefetchAction) -> None:
        """Виконує дію та фіналізує всі ключі групи; винятки не виходять назовні."""
        try:
            result = call()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            self._finish(tickets, ok=False, error="cancelled")
            raise
        except AppError as exc:
            logger.debug("🌫️ prefetch.failed", extra={"keys": len(tickets), **exc.to_log_extra()})
            self._finish(tickets, ok=False, error=exc.message)
        except Exception as exc:                                    # noqa: BLE001
            logger.warning("⚠️ prefetch.failed_unexpected: %r", exc, extra={"keys": len(tickets)})
            self._finish(tickets, ok=False, error=repr(exc))
        else:
            self._finish(tickets, ok=True)

    def _finish(self, tickets: Sequence[Tuple[str, int]], *, ok: bool, error: Optional[str] = None) -> None:
        now = self._clock()
        for key, generation in tickets:
            entry = self._entries.get(key)
            if entry is None or entry.generation != generation or entry.state is not PrefetchState.INFLIGHT:
                continue                                            # 🧹 Запис очищено поки йшов запит
            if ok:
                self._transition(entry, PrefetchState.DONE)
                entry.expires_at = now + self._ttl
                entry.last_error = None
            else:
                self._transition(entry, PrefetchState.FAILED)
                entry.expires_at = None
                entry.last_error = error
        PREFETCH_COMPLETED.labels(outcome="done" if ok else "failed").inc(len(tickets))

    # ================================
    # 🧹 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    def state_of(self, params: PrefetchParams) -> PrefetchState:
        entry = self._entries.get(fingerprint(params))
        return entry.state if entry is not None else PrefetchState.IDLE

    def entry(self, params: PrefetchParams) -> Optional[PrefetchCacheEntry]:
        return self._entries.get(fingerprint(params))

    def prune_expired(self) -> int:
        """🔪 Прибирає протерміновані DONE та IDLE записи; повертає кількість."""
        now = self._clock()
        doomed = [
            key
            for key, entry in self._entries.items()
            if entry.state is PrefetchState.IDLE
            or (entry.state is PrefetchState.DONE and entry.expires_at is not None and now > entry.expires_at)
        ]
        for key in doomed:
            del self._entries[key]
        logger.debug("✂️ prefetch.pruned", extra={"removed": len(doomed)})
        return len(doomed)

    def stats(self) -> Dict[str, int]:
        """📊 Кількість записів у кожному стані + живі задачі."""
        counts = {state.value: 0 for state in PrefetchState}
        for entry in self._entries.values():
            counts[entry.state.value] += 1
        counts["entries"] = len(self._entries)
        counts["tasks"] = len(self._tasks)
        return counts

    async def drain(self) -> None:
        """⏳ Чекає завершення всіх запущених запитів (таймери не чекаються)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def clear(self) -> None:
        """🧼 Скасовує таймери й забуває записи; живі запити завершуються без сліду."""
        for entry in self._entries.values():
            entry.clear_timer()
        self._entries.clear()
        logger.info("🧼 prefetch.cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()


__all__ = ["PrefetchCoordinator", "PrefetchAction", "BatchAction", "DEFAULT_TTL_SEC"]
