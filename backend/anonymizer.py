# backend/anonymizer.py

import hashlib


def hash_patient_id(patient_id: str) -> str:
    """
    Create SHA-256 hash of a patient identifier for audit logging

    Args:
        patient_id: Patient identifier, e.g. the extracted patient name

    Returns:
        SHA-256 hash as hex string
    """
    return hashlib.sha256(patient_id.strip().lower().encode("utf-8")).hexdigest()


def fingerprint_content(text: str) -> str:
    """SHA-256 of the extracted report text, so repeat uploads can be matched"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
