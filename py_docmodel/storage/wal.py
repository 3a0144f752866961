import os
import json

from pathlib import Path
from typing import Dict

from .errors import StoreError


class WAL:
    def __init__(self, path: Path, fsync: bool = True):
        self.path = path
        self.fsync = fsync
        self.f = open(self.path, 'a+', encoding="utf-8")

    def append_put(self, key: str, value: str):
        rec = {"op": "put", "key": key, "value": value}
        self.f.write(json.dumps(rec) + "\n")
        self.f.flush()
        if self.fsync:
            os.fsync(self.f.fileno())

    def replay(self) -> Dict[str, str]:
        self.f.seek(0)
        mem: Dict[str, str] = {}
        for lineno, line in enumerate(self.f, start=1):
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except ValueError as e:
                raise StoreError(f"Corrupt WAL record at {self.path}:{lineno}") from e
            if rec.get("op") == "put":
                mem[rec["key"]] = rec["value"]
        self.f.seek(0, os.SEEK_END)
        return mem

    def reset(self):
        """Empty the log once its contents are durable in an SSTable."""
        self.f.seek(0)
        self.f.truncate()
        self.f.flush()
        if self.fsync:
            os.fsync(self.f.fileno())

    def close(self):
        self.f.close()
