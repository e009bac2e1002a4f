"""
Conversation and message records.

Stored as JSON objects with camelCase keys; ``to_dict``/``from_dict`` convert
between the stored layout and the dataclasses.
"""

import time
from dataclasses import dataclass
from typing import Optional

DOCTOR = "doctor"
PATIENT = "patient"
ROLES = (DOCTOR, PATIENT)

AUDIO_PLACEHOLDER = "[Audio Message]"

DEFAULT_DOCTOR_NAME = "Dr. Smith"
DEFAULT_PATIENT_NAME = "Patient"


def now_ms() -> int:
    return int(time.time() * 1000)


def languages_for(role: str) -> tuple:
    """Return ``(source_lang, target_lang)`` for a speaker role."""
    if role == DOCTOR:
        return "en", "es"
    if role == PATIENT:
        return "es", "en"
    raise ValueError(f"Unknown role: {role!r}")


@dataclass
class Conversation:
    """One doctor/patient visit plus its cached display fields."""
    id: str
    created_at: int
    doctor_name: str = DEFAULT_DOCTOR_NAME
    patient_name: str = DEFAULT_PATIENT_NAME
    last_message: Optional[str] = None
    summary: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "doctorName": self.doctor_name,
            "patientName": self.patient_name,
            "createdAt": self.created_at,
        }
        if self.last_message is not None:
            data["lastMessage"] = self.last_message
        if self.summary is not None:
            data["summary"] = self.summary
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Conversation":
        return cls(
            id=data["id"],
            created_at=data["createdAt"],
            doctor_name=data.get("doctorName", DEFAULT_DOCTOR_NAME),
            patient_name=data.get("patientName", DEFAULT_PATIENT_NAME),
            last_message=data.get("lastMessage"),
            summary=data.get("summary"),
        )


@dataclass
class Message:
    """One turn: the speaker's original text and its translation."""
    id: str
    conversation_id: str
    role: str  # "doctor" or "patient", the speaker
    original_text: str
    translated_text: str
    original_lang: str
    target_lang: str
    created_at: int
    audio_data: Optional[str] = None  # base64 data URL

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "conversationId": self.conversation_id,
            "role": self.role,
            "originalText": self.original_text,
            "translatedText": self.translated_text,
            "originalLang": self.original_lang,
            "targetLang": self.target_lang,
            "createdAt": self.created_at,
        }
        if self.audio_data is not None:
            data["audioData"] = self.audio_data
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        return cls(
            id=data["id"],
            conversation_id=data["conversationId"],
            role=data["role"],
            original_text=data["originalText"],
            translated_text=data["translatedText"],
            original_lang=data["originalLang"],
            target_lang=data["targetLang"],
            created_at=data["createdAt"],
            audio_data=data.get("audioData"),
        )
