"""
CSV output of building positions
"""

import csv
from typing import Optional, TextIO

from .config import ExtractionConfig, get_config


class PositionWriter:
    """Writes `object_type,id,version,longitude,latitude` rows to a text stream"""

    def __init__(
        self,
        stream: TextIO,
        flush_every: Optional[int] = None,
        config: Optional[ExtractionConfig] = None
    ):
        self.config = config or get_config()
        self.stream = stream
        self.flush_every = flush_every or self.config.flush_every
        self.precision = self.config.coordinate_precision
        self.rows = 0
        self._writer = csv.writer(stream, lineterminator="\n")

    def write_header(self):
        self._writer.writerow(self.config.csv_header)

    def write(self, kind: str, id: int, version: int, lon: float, lat: float):
        self._writer.writerow([
            kind,
            id,
            version,
            f"{lon:.{self.precision}f}",
            f"{lat:.{self.precision}f}",
        ])
        self.rows += 1
        if self.rows % self.flush_every == 0:
            self.stream.flush()
