"""
Jobs Blueprint - Job CRUD and resume optimization

Routes:
- GET    /api/jobs               List jobs (waits up to 5s for the database)
- POST   /api/jobs               Create a job
- PUT    /api/jobs/<id>          Update a job
- DELETE /api/jobs/<id>          Delete a job
- POST   /api/jobs/<id>/optimize Optimize the job's resume with AI
"""


from flask import Blueprint, current_app, jsonify, request

from resume_optimizer.ai import ErrorKind, optimize_resume
from resume_optimizer.logging_config import get_logger
from resume_optimizer.models import Job, JobValidationError, clean_update_fields

logger = get_logger(__name__)

jobs_bp = Blueprint("jobs", __name__)

DB_WAIT_SECONDS = 5

# HTTP status for each optimization failure category
CATEGORY_STATUS = {
    "invalid_input": 400,
    "configuration": 503,
    "invalid_ai_response": 502,
    "service_error": 502,
}


def _json_body():
    """Request body as a dict; anything else counts as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _repository():
    return current_app.config["JOB_REPOSITORY"]


def _not_found():
    return (
        jsonify({"error": "Job not found", "message": "The requested job could not be found."}),
        404,
    )


@jobs_bp.route("", methods=["GET"])
def list_jobs():
    """Get all jobs, most recently optimized first."""
    supervisor = current_app.config["CONNECTION_SUPERVISOR"]

    if not supervisor.is_connected:
        logger.info("MongoDB not connected. Waiting for connection...")
        if not supervisor.wait_until_connected(timeout=DB_WAIT_SECONDS):
            db_status = supervisor.status()
            logger.warning(f"Connection timeout. Current state: {db_status}")
            body = {
                "success": False,
                "error": "Database unavailable",
                "message": "Database connection is not ready. Please refresh the page.",
                "jobs": [],
            }
            if current_app.config["OPTIMIZER_CONFIG"].is_development:
                body["details"] = db_status
            return jsonify(body), 503

    jobs = _repository().list_jobs()
    return jsonify({"success": True, "jobs": [job.to_json() for job in jobs]})


@jobs_bp.route("", methods=["POST"])
def create_job():
    """Create a job from the request body."""
    payload = _json_body()

    try:
        job = Job.from_payload(payload)
    except JobValidationError as e:
        return jsonify({"error": "Validation Error", "message": str(e), "fields": e.fields}), 400

    job = _repository().create(job)
    return jsonify(job.to_json())


@jobs_bp.route("/<job_id>", methods=["PUT"])
def update_job(job_id):
    """Update the provided (non-empty) fields of a job."""
    payload = _json_body()

    try:
        fields = clean_update_fields(payload)
    except JobValidationError as e:
        return jsonify({"error": "Validation Error", "message": str(e), "fields": e.fields}), 400

    job = _repository().update(job_id, fields)
    if job is None:
        return _not_found()
    return jsonify(job.to_json())


@jobs_bp.route("/<job_id>", methods=["DELETE"])
def delete_job(job_id):
    if not _repository().delete(job_id):
        return _not_found()
    return jsonify({"msg": "Job removed"})


@jobs_bp.route("/<job_id>/optimize", methods=["POST"])
def optimize_job(job_id):
    """
    Optimize a job's base resume against its job description.

    The job is only written back when the AI response passes validation;
    every failure is reported with its error kind and category so clients
    can tell a bad request from a flaky model.
    """
    repository = _repository()
    job = repository.get(job_id)
    if job is None:
        return _not_found()

    if not job.base_resume or not job.job_description:
        return (
            jsonify(
                {
                    "error": ErrorKind.MISSING_REQUIRED_DATA.label,
                    "errorKind": ErrorKind.MISSING_REQUIRED_DATA.value,
                    "category": ErrorKind.MISSING_REQUIRED_DATA.category,
                    "message": "Resume and job description are required for optimization.",
                    "details": {
                        "hasBaseResume": bool(job.base_resume),
                        "hasJobDescription": bool(job.job_description),
                    },
                }
            ),
            400,
        )

    logger.info(
        f"Starting optimization for job {job.id} "
        f"(position={job.position!r}, resume={len(job.base_resume)} chars, "
        f"description={len(job.job_description)} chars)"
    )

    config = current_app.config["OPTIMIZER_CONFIG"]
    result = optimize_resume(
        job.base_resume,
        job.job_description,
        provider=current_app.config.get("AI_PROVIDER"),
        config=config.to_dict(),
    )

    if not result.ok:
        logger.warning(f"Optimization failed for job {job.id}: {result.error_kind.value}")
        return jsonify(result.to_dict()), CATEGORY_STATUS[result.error_kind.category]

    job = repository.save_optimization(job, result)
    return jsonify(job.to_json())
