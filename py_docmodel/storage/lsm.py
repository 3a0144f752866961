import logging
import threading
import time

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..config import StoreConfig
from .errors import StoreError
from .sstable import SSTable
from .wal import WAL

_LOGGER = logging.getLogger(__name__)


class LSMEngine:
    def __init__(self, config: StoreConfig):
        self.config = config
        self.dir = Path(config.data_dir)
        self.dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self.wal = WAL(self.dir / 'wal.log', fsync=config.fsync)
        # recover memtable from WAL
        self.memtable: Dict[str, str] = self.wal.replay()
        self.memtable_limit = config.memtable_limit
        self.sstables: List[SSTable] = []
        for fp in sorted(self.dir.glob('sst_*.jsonl')):
            self.sstables.append(SSTable(fp))
        self.closed = False
        _LOGGER.debug(
            "Opened LSM engine at %s (%d memtable keys, %d sstables)",
            self.dir, len(self.memtable), len(self.sstables),
        )

    def _check_open(self):
        if self.closed:
            raise StoreError(f"Store at {self.dir} is closed")

    def put(self, key: str, value: str):
        with self._lock:
            self._check_open()
            self.wal.append_put(key, value)
            self.memtable[key] = value
            if len(self.memtable) >= self.memtable_limit:
                self.flush()

    def put_if_absent(self, key: str, value: str) -> bool:
        """Write key only if it holds no value yet; False when it already exists."""
        with self._lock:
            if self.get(key) is not None:
                return False
            self.put(key, value)
            return True

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            self._check_open()
            if key in self.memtable:
                return self.memtable[key]
            # search newest to oldest SSTable
            for sst in reversed(self.sstables):
                v = sst.get(key)
                if v is not None:
                    return v
            return None

    def scan(self, prefix: str) -> List[Tuple[str, str]]:
        """Newest value of every key starting with prefix, memtable first."""
        with self._lock:
            self._check_open()
            seen = set()
            found = []
            for k, v in self.memtable.items():
                if k.startswith(prefix):
                    seen.add(k)
                    found.append((k, v))
            for sst in reversed(self.sstables):
                for k, v in sst.items():
                    if k.startswith(prefix) and k not in seen:
                        seen.add(k)
                        found.append((k, v))
            return found

    def _table_path(self, suffix: str = "") -> Path:
        # file names sort in write order; one timestamp per table
        ts = int(time.time() * 1000)
        while any(self.dir.glob(f'sst_{ts}*.jsonl')):
            ts += 1
        return self.dir / f'sst_{ts}{suffix}.jsonl'

    def flush(self):
        with self._lock:
            if not self.memtable:
                return
            path = self._table_path()
            sst = SSTable.write(path, self.memtable.items(), self.config.index_sample, self.config.fsync)
            self.sstables.append(sst)
            _LOGGER.debug("Flushed %d keys to %s", len(self.memtable), path.name)
            # the table is durable, so the log can be emptied
            self.wal.reset()
            self.memtable.clear()

    def compact(self):
        """Merge all SSTables into one, newest value per key wins."""
        with self._lock:
            self._check_open()
            if len(self.sstables) < 2:
                return
            merged: Dict[str, str] = {}
            for sst in reversed(self.sstables):
                for k, v in sst.items():
                    if k not in merged:
                        merged[k] = v
            new_sst = SSTable.write(self._table_path("_compacted"), merged.items(), self.config.index_sample, self.config.fsync)
            for sst in self.sstables:
                sst.remove()
            _LOGGER.info("Compacted %d sstables into %s", len(self.sstables), new_sst.data_path.name)
            self.sstables = [new_sst]

    def close(self):
        with self._lock:
            if self.closed:
                return
            self.flush()
            self.wal.close()
            self.closed = True
