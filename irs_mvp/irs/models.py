from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Tuple


class Confidence(IntEnum):
    """Evidence tier. Higher value = weaker evidence, so max() picks the worst."""

    HIGH = 0
    MODERATE = 1
    LOW = 2
    INSUFFICIENT = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def note(self) -> str:
        return CONFIDENCE_NOTES[self]

    @staticmethod
    def parse(value: str) -> "Confidence":
        try:
            return Confidence[value.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown confidence tier: {value!r}") from None


CONFIDENCE_NOTES = {
    Confidence.HIGH: "Based on peer-reviewed inhalation or strong mechanistic studies.",
    Confidence.MODERATE: "Mechanistic or limited inhalation data available.",
    Confidence.LOW: "Reliance on regulatory classifications or indirect evidence; uncertainty is elevated.",
    Confidence.INSUFFICIENT: "No long-term inhalation studies found; interpret signals with caution.",
}


class Severity(IntEnum):
    LOW = 0
    MODERATE = 1
    HIGH = 2

    @property
    def chip(self) -> str:
        return self.name.capitalize()

    @property
    def label(self) -> str:
        return SEVERITY_LABELS[self]


SEVERITY_LABELS = {
    Severity.LOW: "🟢 Low inhalation concern",
    Severity.MODERATE: "🟡 Moderate inhalation concern",
    Severity.HIGH: "🔴 High inhalation concern",
}


@dataclass(frozen=True)
class Pattern:
    id: str
    name: str
    weight: int
    rationale: str


@dataclass(frozen=True)
class Source:
    title: str
    url: Optional[str] = None


@dataclass(frozen=True)
class IngredientRecord:
    key: str
    display: str
    patterns: Tuple[str, ...]
    notes: str
    confidence: Confidence = Confidence.MODERATE
    sources: Tuple[Source, ...] = ()


@dataclass(frozen=True)
class Modifiers:
    spray: int = 0
    indoor: int = 0
    frequency: int = 0
    ventilation: int = 0

    @staticmethod
    def from_form(product_form: str, use_setting: str, frequency: str, ventilated: bool) -> "Modifiers":
        return Modifiers(
            spray=1 if product_form == "spray" else 0,
            indoor=1 if use_setting == "indoor" else 0,
            frequency=1 if frequency == "daily" else 0,
            ventilation=1 if ventilated else 0,
        )


@dataclass(frozen=True)
class EvaluationResult:
    ingredients: Tuple[str, ...]
    pattern_ids: Tuple[str, ...]
    has_insufficient_flag: bool
    hits: Tuple[IngredientRecord, ...]
    unknowns: Tuple[str, ...]
    base: int
    exposure_bonus: int
    total: int
    severity: Severity
    confidence: Confidence
    confidence_note: str
    reasons: Tuple[str, ...] = field(default_factory=tuple)
    what_we_know: Tuple[str, ...] = field(default_factory=tuple)
    what_we_dont_know: Tuple[str, ...] = field(default_factory=tuple)
    why_it_matters: str = ""

    @property
    def sources(self) -> Tuple[Source, ...]:
        return tuple(s for hit in self.hits for s in hit.sources)
