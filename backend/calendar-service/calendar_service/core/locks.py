import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Iterable, List


class KeyedLockRegistry:
    """
    (username, holiday_type_id, accounting_year) 같은 키별로 asyncio.Lock을 보관.
    같은 키에 대한 사용량 조회 → 판단 → 저장 구간을 직렬화한다.
    """

    def __init__(self) -> None:
        # key: 사용량 키, value: [lock, 대기/보유 중인 작업 수]
        self._locks: Dict[Hashable, List] = {}

    def _acquire_entry(self, key: Hashable) -> asyncio.Lock:
        entry = self._locks.setdefault(key, [asyncio.Lock(), 0])
        entry[1] += 1
        return entry[0]

    def _release_entry(self, key: Hashable) -> None:
        entry = self._locks.get(key)
        if entry is None:
            return
        entry[1] -= 1
        if entry[1] == 0:
            # 아무도 안 쓰는 키는 제거
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, keys: Iterable[Hashable]) -> AsyncIterator[None]:
        """
        여러 키를 정렬된 순서로 잡아서 교착 상태를 피한다.
        중복 키는 한 번만 잡는다.
        """
        ordered = sorted(set(keys), key=repr)
        locks = [self._acquire_entry(key) for key in ordered]
        acquired: List[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._release_entry(key)

    def __len__(self) -> int:
        return len(self._locks)
