# backend/vocabulary.py

import json
from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple


def _normalise_terms(terms: Iterable[str], kind: str) -> Tuple[str, ...]:
    if isinstance(terms, str):
        raise ValueError(f"{kind} must be a list of terms, not a string")
    out = []
    for term in terms:
        t = str(term).strip().lower()
        if not t:
            raise ValueError(f"blank term in {kind}")
        if t not in out:
            out.append(t)
    return tuple(out)


@dataclass(frozen=True)
class MedicalVocabulary:
    """Condition and risk-factor terms checked by substring presence.

    Terms are kept lowercase and in the order given; that order is the order
    matches are reported in.
    """
    conditions: Tuple[str, ...]
    risk_factors: Tuple[str, ...]

    def __post_init__(self):
        conditions = _normalise_terms(self.conditions, "conditions")
        risk_factors = _normalise_terms(self.risk_factors, "risk_factors")
        if not conditions and not risk_factors:
            raise ValueError("vocabulary has no terms")
        # frozen dataclass: assign through object.__setattr__
        object.__setattr__(self, "conditions", conditions)
        object.__setattr__(self, "risk_factors", risk_factors)

    @classmethod
    def from_dict(cls, data: Mapping) -> "MedicalVocabulary":
        return cls(
            conditions=tuple(data.get("conditions") or ()),
            risk_factors=tuple(data.get("risk_factors") or data.get("riskFactors") or ()),
        )

    @classmethod
    def from_json_file(cls, path: str) -> "MedicalVocabulary":
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"vocabulary file {path} must hold a JSON object")
        return cls.from_dict(data)

    def to_dict(self):
        return {"conditions": list(self.conditions), "risk_factors": list(self.risk_factors)}


DEFAULT_VOCABULARY = MedicalVocabulary(
    conditions=(
        "diabetes", "hypertension", "cancer", "heart disease",
        "arthritis", "asthma", "depression", "alzheimer's",
    ),
    risk_factors=(
        "obesity", "smoking", "alcohol", "sedentary lifestyle",
        "high cholesterol", "family history",
    ),
)
