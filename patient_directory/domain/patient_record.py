"""Patient Record Schema Definitions.

This module defines the canonical data models for patient directory entries.
Field names follow the dataset's own keys so a record serializes back to the
same shape it was loaded from.

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Models are frozen: a loaded snapshot cannot be mutated by a request
    - Validation happens once, when the Record Source parses the dataset
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ContactInfo(BaseModel):
    """Contact details for a patient.

    Every field is optional. A record with no contact entry at all is modelled
    by an empty ``contact`` list on the record, not by an empty ContactInfo.

    Parameters:
        address: Postal address
        number: Phone number, kept exactly as supplied
        email: Email address
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    address: Optional[str] = Field(None, description="Postal address")
    number: Optional[str] = Field(None, description="Phone number")
    email: Optional[str] = Field(None, description="Email address")


class PatientRecord(BaseModel):
    """A single patient directory entry.

    Parameters:
        patient_id: Positive identifier, unique within the collection
        patient_name: Patient display name
        age: Age in years, or None when the dataset omits it
        photo_url: Optional photo URI
        contact: Ordered contact entries; the first one is the primary contact
        medical_issue: Category label for the patient's presenting issue
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    patient_id: int = Field(..., gt=0, description="Unique patient identifier")
    patient_name: str = Field(..., min_length=1, description="Patient name")
    age: Optional[int] = Field(None, ge=0, description="Age in years, absent when unknown")
    photo_url: Optional[str] = Field(None, description="Photo URI")
    contact: tuple[ContactInfo, ...] = Field(
        default_factory=tuple,
        description="Contact entries, primary first"
    )
    medical_issue: str = Field(..., min_length=1, description="Medical issue category label")

    @property
    def primary_contact(self) -> Optional[ContactInfo]:
        """Return the first contact entry, or None when there is none."""
        return self.contact[0] if self.contact else None
