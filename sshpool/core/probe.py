"""外部程序可用性探测"""

import asyncio
import shutil
from abc import ABC, abstractmethod


class BinaryProber(ABC):
    """探测接口，便于测试替换"""

    @abstractmethod
    async def is_resolvable(self, name: str) -> bool:
        pass


class WhichProber(BinaryProber):
    """在 PATH 中查找，不缓存结果"""

    async def is_resolvable(self, name: str) -> bool:
        loop = asyncio.get_running_loop()
        path = await loop.run_in_executor(None, shutil.which, name)
        return path is not None
