"""Strategy-tagged values collected while parsing one statement."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models.reports import METRIC_FIELDS, ExtractedData


@dataclass(slots=True)
class Extraction:
    value: float
    strategy: str
    confidence: str

    @property
    def tag(self) -> str:
        return f"{self.strategy}:{self.confidence}"


@dataclass(slots=True)
class Findings:
    """Accumulates top-level fields and custom metrics.

    The first value recorded for a name is kept unless ``overwrite`` is set.
    """

    fields: dict[str, Extraction] = field(default_factory=dict)
    metrics: dict[str, Extraction] = field(default_factory=dict)

    def set_field(self, name: str, extraction: Extraction, *, overwrite: bool = False) -> None:
        if name not in METRIC_FIELDS:
            raise KeyError(f"Unknown metric field: {name}")
        if overwrite or name not in self.fields:
            self.fields[name] = extraction

    def set_metric(self, name: str, extraction: Extraction, *, overwrite: bool = False) -> None:
        if overwrite or name not in self.metrics:
            self.metrics[name] = extraction

    def add_to_metric(self, name: str, extraction: Extraction) -> None:
        current = self.metrics.get(name)
        if current is None:
            self.metrics[name] = extraction
            return
        self.metrics[name] = Extraction(
            value=current.value + extraction.value,
            strategy=current.strategy,
            confidence=current.confidence,
        )

    def value(self, name: str) -> float | None:
        extraction = self.fields.get(name)
        return extraction.value if extraction is not None else None

    def to_extracted_data(self, *, raw_text: str, column_label: str | None) -> ExtractedData:
        provenance = {name: extraction.tag for name, extraction in self.fields.items()}
        provenance.update({name: extraction.tag for name, extraction in self.metrics.items()})

        return ExtractedData(
            **{name: extraction.value for name, extraction in self.fields.items()},
            custom_metrics={name: extraction.value for name, extraction in self.metrics.items()},
            raw_text=raw_text,
            column_label=column_label,
            provenance=provenance,
        )
