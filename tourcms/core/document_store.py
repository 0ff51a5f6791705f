"""
JSON文档存储
所有内容都以扁平JSON文件保存，每次保存整体覆盖
"""

import os
import re
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Union

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """基于目录的JSON文档存储"""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        """文档名到文件路径"""
        if not name.endswith(".json"):
            name = f"{name}.json"
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def load(self, name: str) -> Optional[Any]:
        """读取文档，文件不存在时返回 None"""
        path = self.path_for(name)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, name: str, data: Any) -> Path:
        """
        原子写入文档

        先写入同目录下的临时文件，再替换目标文件，
        写入中途失败不会留下半个文件。

        Args:
            name: 文档名（可省略 .json 后缀）
            data: 可JSON序列化的数据

        Returns:
            写入的文件路径
        """
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"💾 已保存 {path}")
        return path

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_days(self, kind: str) -> List[int]:
        """列出 day-N-<kind>.json 文件对应的天数，升序"""
        if not self.root.exists():
            return []
        pattern = re.compile(rf"^day-(\d+)-{re.escape(kind)}\.json$")
        days = []
        for entry in self.root.iterdir():
            match = pattern.match(entry.name)
            if match:
                days.append(int(match.group(1)))
        return sorted(days)

    def day_name(self, kind: str, day: int) -> str:
        return f"day-{day}-{kind}.json"

    def load_day(self, kind: str, day: int) -> Optional[Any]:
        return self.load(self.day_name(kind, day))

    def save_day(self, kind: str, day: int, data: Any) -> Path:
        return self.save(self.day_name(kind, day), data)
