import re
from typing import List, Optional, Pattern, Tuple

from .models import AnalysisResult, KeyInformation, PotentialCondition
from .recommendation import build_recommendations
from .vocabulary import DEFAULT_VOCABULARY, MedicalVocabulary

NOT_FOUND = "Not Found"

# (label, pattern); applied to the original-case content, first group wins
KEY_PATTERNS: Tuple[Tuple[str, Pattern], ...] = (
    ("Patient Name", re.compile(r"patient\s*name[:\s]*([^\n]+)", re.IGNORECASE)),
    ("Age", re.compile(r"age[:\s]*(\d+)", re.IGNORECASE)),
    ("Gender", re.compile(r"gender[:\s]*([^\n]+)", re.IGNORECASE)),
    ("Date", re.compile(r"date[:\s]*(\d{1,2}[-/]\d{1,2}[-/]\d{2,4})", re.IGNORECASE)),
)

CONFIDENCE_PER_OCCURRENCE = 20
MAX_CONFIDENCE = 100


def calculate_confidence(lower_content: str, term: str) -> int:
    """Occurrences x 20, capped at 100. A heuristic, not a probability."""
    count = len(re.findall(re.escape(term.lower()), lower_content))
    return min(count * CONFIDENCE_PER_OCCURRENCE, MAX_CONFIDENCE)


def extract_key_informations(content: str) -> List[KeyInformation]:
    out = []
    for label, pattern in KEY_PATTERNS:
        m = pattern.search(content)
        out.append(KeyInformation(label=label, value=m.group(1).strip() if m else NOT_FOUND))
    return out


class KeywordAnalyzer:
    """Vocabulary lookups over report text.

    Matching is plain case-insensitive substring presence; there is no
    tokenisation, so "cancer" also matches inside "precancerous".
    """

    def __init__(self, vocabulary: Optional[MedicalVocabulary] = None) -> None:
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY

    def _find_terms(self, lower_content: str, terms: Tuple[str, ...]) -> List[str]:
        return [t for t in terms if t in lower_content]

    def analyze(self, content: str, file_type: str, file_size: str) -> AnalysisResult:
        lower_content = content.lower()

        key_informations = extract_key_informations(content)
        medical_terms = self._find_terms(lower_content, self.vocabulary.conditions)
        potential_conditions = [
            PotentialCondition(name=term, confidence=calculate_confidence(lower_content, term))
            for term in medical_terms
        ]
        risk_factors = self._find_terms(lower_content, self.vocabulary.risk_factors)

        return AnalysisResult(
            file_type=file_type,
            file_size=file_size,
            key_informations=tuple(key_informations),
            medical_terms=tuple(medical_terms),
            potential_conditions=tuple(potential_conditions),
            risk_factors=tuple(risk_factors),
            recommendations=tuple(build_recommendations(medical_terms, risk_factors)),
        )


def analyze_content(content: str, file_type: str, file_size: str,
                    vocabulary: Optional[MedicalVocabulary] = None) -> AnalysisResult:
    return KeywordAnalyzer(vocabulary).analyze(content, file_type, file_size)
