"""
Job repository - CRUD over the MongoDB 'jobs' collection

Every call goes through the connection supervisor, so a request made while
the database is down raises DatabaseNotConnectedError instead of hanging on
a dead client.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from resume_optimizer.ai.validation import OptimizationResult
from resume_optimizer.database import ConnectionSupervisor
from resume_optimizer.logging_config import get_logger
from resume_optimizer.models import Job, JobStatus

logger = get_logger(__name__)

JOBS_COLLECTION = "jobs"


def parse_object_id(job_id: str) -> Optional[ObjectId]:
    """Return the ObjectId for job_id, or None if it is not a valid id."""
    try:
        return ObjectId(job_id)
    except (InvalidId, TypeError):
        return None


class JobRepository:
    """Job persistence backed by the supervisor's live database."""

    def __init__(self, supervisor: ConnectionSupervisor):
        self._supervisor = supervisor

    @property
    def collection(self) -> Collection:
        return self._supervisor.db[JOBS_COLLECTION]

    def list_jobs(self) -> List[Job]:
        """All jobs, most recently optimized first."""
        cursor = self.collection.find().sort("optimizedOn", DESCENDING)
        jobs = [Job.from_document(doc) for doc in cursor]
        logger.debug(f"Query complete. Found {len(jobs)} jobs")
        return jobs

    def get(self, job_id: str) -> Optional[Job]:
        oid = parse_object_id(job_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return Job.from_document(doc) if doc else None

    def create(self, job: Job) -> Job:
        result = self.collection.insert_one(job.to_document())
        job.id = result.inserted_id
        logger.info(f"Created job {job.id} ({job.position} at {job.company_name})")
        return job

    def update(self, job_id: str, fields: Dict[str, Any]) -> Optional[Job]:
        """
        Apply a partial update.

        Returns:
            The updated job, or None if no job has that id
        """
        oid = parse_object_id(job_id)
        if oid is None:
            return None
        if not fields:
            return self.get(job_id)
        doc = self.collection.find_one_and_update(
            {"_id": oid}, {"$set": fields}, return_document=ReturnDocument.AFTER
        )
        return Job.from_document(doc) if doc else None

    def delete(self, job_id: str) -> bool:
        """Delete a job; False if no job has that id."""
        oid = parse_object_id(job_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count > 0

    def save_optimization(self, job: Job, result: OptimizationResult) -> Job:
        """
        Persist a successful optimization and mark the job Optimized.

        Raises:
            ValueError: If result is a failure (failures are never persisted)
        """
        if not result.ok:
            raise ValueError(f"Refusing to save failed optimization: {result.error_kind.value}")

        job.optimized_resume = result.optimized_resume
        job.changes_summary = result.changes_summary
        job.status = JobStatus.OPTIMIZED
        job.optimized_on = datetime.now(timezone.utc)

        self.collection.update_one(
            {"_id": job.id},
            {
                "$set": {
                    "optimizedResume": job.optimized_resume,
                    "changesSummary": job.changes_summary,
                    "status": job.status.value,
                    "optimizedOn": job.optimized_on,
                }
            },
        )
        logger.info(f"Saved optimization for job {job.id}")
        return job
