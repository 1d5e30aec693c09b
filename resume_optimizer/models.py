"""
Job model for the Resume Optimizer API

A Job is one application a client is pursuing: the posting, the base resume
to tailor, and the optimizer's output once it exists. Documents are stored
in MongoDB with camelCase field names.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from bson import ObjectId


class JobStatus(str, Enum):
    PENDING_OPTIMIZATION = "Pending Optimization"
    OPTIMIZED = "Optimized"


REQUIRED_FIELDS = ("clientName", "companyName", "position", "jobDescription", "baseResume")

# Fields a client may change through PUT /api/jobs/<id>
UPDATABLE_FIELDS = (
    "clientName",
    "companyName",
    "position",
    "jobDescription",
    "jobApplicationLink",
    "status",
)


class JobValidationError(ValueError):
    """Raised when a job payload is missing required fields or has bad values."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


def _as_text(value: Any) -> Optional[str]:
    """Cast a stored scalar to str; None stays None."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _text_fields(payload: Dict[str, Any], names) -> Dict[str, str]:
    """
    Pick the named fields that carry a truthy value, as strings.

    Numbers are cast to str; any other non-string value is rejected.

    Raises:
        JobValidationError: If a field holds a list, object or boolean
    """
    fields = {}
    invalid = []
    for name in names:
        value = payload.get(name)
        if not value:
            continue
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            invalid.append(name)
        else:
            fields[name] = value if isinstance(value, str) else str(value)

    if invalid:
        raise JobValidationError(f"Fields must be text: {', '.join(invalid)}", fields=invalid)
    return fields


@dataclass
class Job:
    client_name: str
    company_name: str
    position: str
    job_description: str
    base_resume: str
    job_application_link: Optional[str] = None
    status: JobStatus = JobStatus.PENDING_OPTIMIZATION
    optimized_on: Optional[datetime] = None
    optimized_resume: Optional[str] = None
    changes_summary: Optional[str] = None
    id: Optional[ObjectId] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Job":
        """
        Build a new job from a request body.

        Raises:
            JobValidationError: If a required field is missing or empty, or
                a field is not text
        """
        missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
        if missing:
            raise JobValidationError(
                f"Missing required fields: {', '.join(missing)}", fields=missing
            )

        fields = _text_fields(payload, REQUIRED_FIELDS + ("jobApplicationLink",))
        return cls(
            client_name=fields["clientName"],
            company_name=fields["companyName"],
            position=fields["position"],
            job_description=fields["jobDescription"],
            base_resume=fields["baseResume"],
            job_application_link=fields.get("jobApplicationLink"),
        )

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Job":
        return cls(
            id=doc.get("_id"),
            client_name=_as_text(doc.get("clientName")),
            company_name=_as_text(doc.get("companyName")),
            position=_as_text(doc.get("position")),
            job_description=_as_text(doc.get("jobDescription")),
            base_resume=_as_text(doc.get("baseResume")),
            job_application_link=_as_text(doc.get("jobApplicationLink")),
            status=JobStatus(doc.get("status") or JobStatus.PENDING_OPTIMIZATION.value),
            optimized_on=doc.get("optimizedOn"),
            optimized_resume=doc.get("optimizedResume"),
            changes_summary=doc.get("changesSummary"),
        )

    def to_document(self) -> Dict[str, Any]:
        """MongoDB document (without _id)."""
        return {
            "clientName": self.client_name,
            "companyName": self.company_name,
            "position": self.position,
            "jobDescription": self.job_description,
            "jobApplicationLink": self.job_application_link,
            "status": self.status.value,
            "optimizedOn": self.optimized_on,
            "baseResume": self.base_resume,
            "optimizedResume": self.optimized_resume,
            "changesSummary": self.changes_summary,
        }

    def to_json(self) -> Dict[str, Any]:
        """JSON-safe representation for API responses."""
        data = self.to_document()
        data["_id"] = str(self.id) if self.id is not None else None
        data["optimizedOn"] = self.optimized_on.isoformat() if self.optimized_on else None
        return data


def clean_update_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick the updatable fields that carry a truthy value.

    Raises:
        JobValidationError: If a field is not text or status is not a
            known JobStatus value
    """
    fields = _text_fields(payload, UPDATABLE_FIELDS)
    if "status" in fields:
        allowed = [s.value for s in JobStatus]
        if fields["status"] not in allowed:
            raise JobValidationError(
                f"Invalid status '{fields['status']}'. Allowed: {', '.join(allowed)}",
                fields=["status"],
            )
    return fields
