# tdp_finder/plugin.py
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping
import logging

from .core.annotate import annotate
from .core.dataset import load_dataset
from .core.errors import InvalidArgument
from .core.model import ReferenceDataset

_LOG = logging.getLogger(__name__)


class ModelPlugin(ABC):
    """Lifecycle a host drives: authenticate, configure, then execute per batch."""

    @abstractmethod
    def authenticate(self, auth_params: Mapping[str, Any] | None) -> None: ...

    @abstractmethod
    def configure(self, options: Mapping[str, Any] | None = None) -> "ModelPlugin": ...

    @abstractmethod
    def execute(self, records) -> list: ...


class TdpFinderModel(ModelPlugin):
    """
    Annotates workload records with ``thermal-design-power``.

    Options understood by ``configure``:
      sources  list of table paths (files, .zip archives or folders), primary first;
               omitted or empty -> bundled tables
      recurse  walk folders recursively (default False)
      atomic   all-or-nothing batches (default True)
    """

    def __init__(self, dataset: ReferenceDataset | None = None):
        self.auth_params: Mapping[str, Any] | None = None
        self.options: Mapping[str, Any] | None = None
        self.dataset = dataset
        self.atomic = True

    def authenticate(self, auth_params):
        # stored for the host, never used here
        self.auth_params = auth_params

    def configure(self, options=None):
        self.options = options
        opts = dict(options or {})
        sources = opts.get("sources") or None
        if isinstance(sources, (str, Path)):
            sources = [sources]
        self.dataset = load_dataset(sources, recurse=bool(opts.get("recurse", False)))
        self.atomic = bool(opts.get("atomic", True))
        _LOG.info("configured with %d processor(s), atomic=%s", len(self.dataset), self.atomic)
        return self

    def configure_from_config(self, cfg: dict, base_dir: Path | None = None) -> "TdpFinderModel":
        """Map the ``dataset``/``annotate`` sections of config.yaml onto configure()."""
        ds = (cfg or {}).get("dataset", {}) or {}
        sources = ds.get("sources") or []
        if isinstance(sources, (str, Path)):
            sources = [sources]
        if base_dir is not None:
            sources = [Path(s) if Path(s).is_absolute() else base_dir / s for s in sources]
        return self.configure({
            "sources": sources,
            "recurse": bool(ds.get("recurse", False)),
            "atomic": bool(((cfg or {}).get("annotate", {}) or {}).get("atomic", True)),
        })

    def execute(self, records):
        if self.dataset is None:
            raise InvalidArgument("model is not configured; call configure() first")
        return annotate(self.dataset, records, atomic=self.atomic)
