from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Type

from .errors import RECORD_ERRORS, RecordError


@dataclass(frozen=True)
class RecordIssue:
    kind: str
    row: Optional[Hashable]
    field: str
    value: Any
    message: str


@dataclass
class ValidationReport:
    issues: List[RecordIssue] = field(default_factory=list)

    def add(self, error: RecordError, row: Optional[Hashable] = None) -> None:
        if hasattr(row, "item"):
            row = row.item()
        self.issues.append(
            RecordIssue(
                kind=type(error).__name__,
                row=row,
                field=error.field,
                value=error.value,
                message=str(error),
            )
        )

    @property
    def total(self) -> int:
        return len(self.issues)

    def count(self, kind: Type[RecordError]) -> int:
        return sum(1 for issue in self.issues if issue.kind == kind.__name__)

    def counts(self) -> Dict[str, int]:
        tally = Counter(issue.kind for issue in self.issues)
        counts = {kind.__name__: 0 for kind in RECORD_ERRORS}
        counts.update(tally)
        return counts

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        return ValidationReport(issues=[*self.issues, *other.issues])

    def as_dict(self, sample_size: int = 5) -> Dict[str, object]:
        samples: Dict[str, List[Dict[str, Any]]] = {}
        for issue in self.issues:
            bucket = samples.setdefault(issue.kind, [])
            if len(bucket) < sample_size:
                bucket.append(asdict(issue))
        return {"total": self.total, "counts": self.counts(), "samples": samples}

    def log_summary(self, logger: logging.Logger) -> None:
        if not self.issues:
            logger.info("All records passed validation")
            return
        for kind, count in self.counts().items():
            if count:
                logger.warning("Dropped %d record(s) with %s", count, kind)
