import os

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

ENV_PREFIX = "PY_DOCMODEL_"

_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path
    memtable_limit: int = 2000
    index_sample: int = 16
    fsync: bool = True

    def __post_init__(self):
        object.__setattr__(self, "data_dir", Path(self.data_dir))
        if self.memtable_limit < 1:
            raise ValueError(f"memtable_limit must be >= 1, got {self.memtable_limit}")
        if self.index_sample < 1:
            raise ValueError(f"index_sample must be >= 1, got {self.index_sample}")

    @classmethod
    def coerce(cls, value: Union["StoreConfig", str, Path]) -> "StoreConfig":
        if isinstance(value, cls):
            return value
        return cls(Path(value))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 default_data_dir: Union[str, Path, None] = None) -> "StoreConfig":
        """
        Build a config from PY_DOCMODEL_DATA_DIR, PY_DOCMODEL_MEMTABLE_LIMIT,
        PY_DOCMODEL_INDEX_SAMPLE and PY_DOCMODEL_FSYNC.

        :param default_data_dir: used when PY_DOCMODEL_DATA_DIR is unset
        """
        env = os.environ if environ is None else environ
        data_dir = env.get(ENV_PREFIX + "DATA_DIR") or default_data_dir
        if not data_dir:
            raise ValueError(f"{ENV_PREFIX}DATA_DIR is not set and no default was given")
        kwargs = {}
        if env.get(ENV_PREFIX + "MEMTABLE_LIMIT"):
            kwargs["memtable_limit"] = int(env[ENV_PREFIX + "MEMTABLE_LIMIT"])
        if env.get(ENV_PREFIX + "INDEX_SAMPLE"):
            kwargs["index_sample"] = int(env[ENV_PREFIX + "INDEX_SAMPLE"])
        if env.get(ENV_PREFIX + "FSYNC"):
            kwargs["fsync"] = env[ENV_PREFIX + "FSYNC"].strip().lower() not in _FALSE
        return cls(Path(data_dir), **kwargs)
