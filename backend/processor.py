# backend/processor.py
import logging
import mimetypes
from typing import IO, Dict, Optional, Union

from .anonymizer import fingerprint_content, hash_patient_id
from .file_ingestor import FileIngestor, IngestionError, format_file_size
from .keyword_analyzer import NOT_FOUND, KeywordAnalyzer
from .logger import AuditLogger
from .models import AnalysisResult
from .vocabulary import MedicalVocabulary

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_file_type(filename: str, content_type: Optional[str]) -> str:
    """Declared upload type, else a guess from the name"""
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or DEFAULT_CONTENT_TYPE


class MedicalReportProcessor:
    """
    Uploaded report (bytes/IO) -> plain text -> keyword analysis -> result
    envelope for the frontend. Ingestion errors stop here; no analysis runs
    on a file that failed to parse.
    """

    def __init__(self, vocabulary: Optional[MedicalVocabulary] = None,
                 audit_logger: Optional[AuditLogger] = None, user_id: str = "SYSTEM"):
        self.ingestor = FileIngestor()
        self.analyzer = KeywordAnalyzer(vocabulary)
        self.audit = audit_logger or AuditLogger()
        self.user_id = user_id

    def process_report(self, file_obj: Union[IO[bytes], bytes], filename: str,
                       content_type: Optional[str] = None,
                       size: Optional[int] = None) -> Dict[str, Union[bool, str, AnalysisResult]]:
        data = bytes(file_obj) if isinstance(file_obj, (bytes, bytearray)) else (file_obj.read() or b"")
        upload_hash = hash_patient_id(filename or "")

        self.audit.log_access(
            action="REPORT_UPLOAD",
            subject_hash=upload_hash,
            user_id=self.user_id,
            details=f"bytes={len(data)}"
        )

        # 1) Ingest; a failure here is final for this upload
        try:
            content = self.ingestor.extract_text(filename, data)
        except IngestionError as exc:
            logger.warning("ingestion failed for %s: %s", filename, exc)
            self.audit.log_error("FileIngestor", upload_hash, str(exc))
            return {
                "success": False,
                "error": f"Error parsing file: {exc}",
            }

        # 2) Analyse; pure and total
        result = self.analyzer.analyze(
            content,
            file_type=resolve_file_type(filename, content_type),
            file_size=format_file_size(len(data) if size is None else size),
        )

        patient_name = result.key_information("Patient Name")
        self.audit.log_analysis(
            subject_hash=hash_patient_id(patient_name) if patient_name != NOT_FOUND else upload_hash,
            content_fingerprint=fingerprint_content(content),
            summary={
                "medical_terms": list(result.medical_terms),
                "risk_factors": list(result.risk_factors),
            },
        )
        logger.info("analysed %s: %d condition(s), %d risk factor(s)",
                    filename, len(result.medical_terms), len(result.risk_factors))

        return {
            "success": True,
            "result": result,
        }
