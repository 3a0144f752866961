import json
import os

from bisect import bisect_right
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .errors import StoreError


class SSTable:
    """Sorted jsonl file of key/value records with a sparse offset index."""

    def __init__(self, data_path: Path):
        self.data_path = data_path
        self.index_path = data_path.with_suffix(data_path.suffix + ".idx")
        self.index: Dict[str, int] = {}
        if self.index_path.exists():
            with open(self.index_path, 'r', encoding="utf-8") as f:
                self.index = json.load(f)
        self._index_keys = sorted(self.index)

    @staticmethod
    def write(data_path: Path, items: Iterable[Tuple[str, str]], index_sample: int = 16,
              fsync: bool = True) -> "SSTable":
        items = sorted(items, key=lambda kv: kv[0])
        index: Dict[str, int] = {}
        with open(data_path, 'w', encoding='utf-8') as f:
            for i, (k, v) in enumerate(items):
                pos = f.tell()
                rec = {"key": k, "value": v}
                f.write(json.dumps(rec) + "\n")
                if i % index_sample == 0:
                    index[k] = pos
            f.flush()
            if fsync:
                os.fsync(f.fileno())
        with open(data_path.with_suffix(data_path.suffix + ".idx"), "w", encoding="utf-8") as idxf:
            json.dump(index, idxf)
        return SSTable(data_path)

    def _scan_from(self, start_offset: int) -> Iterator[Tuple[str, str]]:
        with open(self.data_path, 'r', encoding='utf-8') as f:
            f.seek(start_offset)
            for line in iter(f.readline, ""):
                if not line.strip():
                    continue
                try:
                    rec = json.loads(line)
                except ValueError as e:
                    raise StoreError(f"Corrupt SSTable record in {self.data_path}") from e
                yield rec["key"], rec["value"]

    def items(self) -> Iterator[Tuple[str, str]]:
        return self._scan_from(0)

    def get(self, key: str) -> Optional[str]:
        pos = bisect_right(self._index_keys, key)
        start_offset = self.index[self._index_keys[pos - 1]] if pos else 0
        for k, v in self._scan_from(start_offset):
            if k == key:
                return v
            if k > key:
                return None
        return None

    def remove(self):
        for path in (self.data_path, self.index_path):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
