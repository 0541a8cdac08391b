# tdp_finder/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping
import pandas as pd

from .errors import UnknownProcessor

PROCESSOR_FIELD = "physical-processor"
TDP_FIELD = "thermal-design-power"


@dataclass(frozen=True)
class ReferenceDataset:
    """
    Read-only mapping normalized processor name -> TDP in watts.

    Built once by ``build_dataset`` and shared with the annotator; the
    underlying dict is wrapped in a MappingProxyType so it cannot be
    changed after construction.
    """
    entries: Mapping[str, float] = field(default_factory=dict)
    n_sources: int = 0        # tables merged into this dataset

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __hash__(self) -> int:
        return hash((tuple(sorted(self.entries.items())), self.n_sources))

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> float:
        return self.entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str, default: float | None = None) -> float | None:
        return self.entries.get(name, default)

    def lookup(self, name: str) -> float:
        try:
            return self.entries[name]
        except KeyError:
            raise UnknownProcessor(name) from None

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame({"name": list(self.entries.keys()),
                           "tdp_W": [float(v) for v in self.entries.values()]})
        return df.sort_values("name").reset_index(drop=True)
