from flask import current_app, jsonify, request

from jobscheduler.ai import OptimizerError
from jobscheduler.brain import brain_bp
from jobscheduler.brain.scheduling.service import SchedulerService
from jobscheduler.logging_config import get_logger

logger = get_logger(__name__)


def _service() -> SchedulerService:
    return current_app.extensions["scheduler_service"]


@brain_bp.route("/schedule")
def get_schedule():
    """Return the visible calendar: days with assignments and capacity, jobs, settings, warnings"""
    return jsonify(_service().snapshot()), 200


@brain_bp.route("/jobs")
def list_jobs():
    """Return all jobs with their scheduled segments"""
    jobs = _service().jobs
    return jsonify({
        "jobs": [job.to_dict() for job in jobs],
        "total_count": len(jobs)
    }), 200


@brain_bp.route("/jobs", methods=["POST"])
def create_job():
    """Add a job and reallocate"""
    try:
        job, notices = _service().add_job(request.get_json(silent=True))
        return jsonify({
            "success": True,
            "job": job.to_dict(),
            "messages": notices
        }), 201
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:
        logger.error("Error creating job", error=str(exc), exc_info=True)
        return jsonify({
            "error": "Failed to create job",
            "details": str(exc)
        }), 500


@brain_bp.route("/jobs/<job_id>", methods=["PUT"])
def update_job(job_id):
    """Edit a job's fields and reallocate"""
    try:
        job, notices = _service().update_job(job_id, request.get_json(silent=True) or {})
        return jsonify({
            "success": True,
            "job": job.to_dict(),
            "messages": notices
        }), 200
    except KeyError:
        return jsonify({"error": "Job not found"}), 404
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:
        logger.error("Error updating job", job_id=job_id, error=str(exc), exc_info=True)
        return jsonify({
            "error": "Failed to update job",
            "details": str(exc)
        }), 500


@brain_bp.route("/jobs/<job_id>", methods=["DELETE"])
def delete_job(job_id):
    """Remove a job and reallocate"""
    try:
        _service().delete_job(job_id)
        return jsonify({"success": True, "job_id": job_id}), 200
    except KeyError:
        return jsonify({"error": "Job not found"}), 404


@brain_bp.route("/jobs/<job_id>/move", methods=["PUT"])
def move_job(job_id):
    """Drag-and-drop: set the job's preferred start date to the drop target"""
    data = request.get_json(silent=True) or {}
    try:
        job, notice = _service().move_job(job_id, data.get("date"))
        return jsonify({
            "success": True,
            "job": job.to_dict(),
            "messages": [notice] if notice else []
        }), 200
    except KeyError:
        return jsonify({"error": "Job not found"}), 404
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400


@brain_bp.route("/settings")
def get_settings():
    """Return the capacity settings"""
    return jsonify(_service().settings.to_dict()), 200


@brain_bp.route("/settings", methods=["PUT"])
def update_settings():
    """Replace weekday capacities and capacity overrides"""
    try:
        settings = _service().update_settings(request.get_json(silent=True))
        return jsonify({"success": True, "settings": settings.to_dict()}), 200
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400


@brain_bp.route("/planning-date", methods=["PUT"])
def update_planning_date():
    """Set the planning start date ({"date": ...}) or shift it ({"shiftDays": n})"""
    data = request.get_json(silent=True) or {}
    service = _service()
    if "shiftDays" in data:
        try:
            shift_days = int(data["shiftDays"])
        except (TypeError, ValueError):
            return jsonify({"error": "shiftDays must be an integer"}), 400
        planning_date = service.shift_planning_date(shift_days)
    elif "date" in data:
        planning_date = service.set_planning_date(data["date"])
    else:
        return jsonify({"error": "date or shiftDays is required"}), 400
    
    return jsonify({
        "success": True,
        "planningDate": planning_date,
        "dates": service.visible_dates()
    }), 200


@brain_bp.route("/optimizer/payload")
def optimizer_payload():
    """Return the data that would be sent to the optimizer"""
    return jsonify(_service().optimizer_payload()), 200


@brain_bp.route("/optimize", methods=["POST"])
def optimize():
    """Run the external optimizer with free-text constraints and reallocate"""
    data = request.get_json(silent=True) or {}
    try:
        response = _service().optimize(data.get("constraints", ""))
        return jsonify({
            "success": True,
            "explanation": response.explanation,
            "schedule": _service().snapshot()
        }), 200
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except RuntimeError as exc:
        return jsonify({"error": str(exc)}), 409
    except OptimizerError as exc:
        logger.error("Optimizer failed", error=str(exc))
        return jsonify({
            "error": "Failed to optimize schedule",
            "details": str(exc)
        }), 502
