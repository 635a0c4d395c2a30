from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class KeyInformation:
    """A labelled demographic field pulled out of the report"""
    label: str
    value: str

    def to_dict(self):
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class PotentialCondition:
    """Matched condition with its keyword-count confidence (0-100)"""
    name: str
    confidence: int

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"confidence out of range: {self.confidence}")

    def to_dict(self):
        return {"name": self.name, "confidence": self.confidence}


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analysing one uploaded report"""
    file_type: str
    file_size: str
    key_informations: Tuple[KeyInformation, ...] = field(default_factory=tuple)
    medical_terms: Tuple[str, ...] = field(default_factory=tuple)
    potential_conditions: Tuple[PotentialCondition, ...] = field(default_factory=tuple)
    risk_factors: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_findings(self) -> bool:
        return bool(self.medical_terms)

    def key_information(self, label: str) -> str:
        for info in self.key_informations:
            if info.label == label:
                return info.value
        raise KeyError(label)

    def to_dict(self):
        # camelCase keys are the JSON API shape
        return {
            "fileType": self.file_type,
            "fileSize": self.file_size,
            "keyInformations": [k.to_dict() for k in self.key_informations],
            "medicalTerms": list(self.medical_terms),
            "potentialConditions": [c.to_dict() for c in self.potential_conditions],
            "riskFactors": list(self.risk_factors),
            "recommendations": list(self.recommendations),
        }
