from flask import Flask, jsonify
from flask_cors import CORS

from jobscheduler.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(config_class=None):
    # Import config after dotenv is loaded
    from jobscheduler.config import get_config
    from jobscheduler.brain import brain_bp
    from jobscheduler.brain.scheduling.service import SchedulerService
    from jobscheduler.seed import demo_jobs
    
    # Get the appropriate config class based on environment
    config_class = config_class or get_config()
    
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    configure_logging(log_level=app.config.get("LOG_LEVEL", "INFO"), log_file=app.config.get("LOG_FILE"))
    logger.info(f"Starting application in {config_class.ENV} environment")

    # Get allowed origins from environment variable
    allowed_origins = app.config.get("CORS_ORIGINS", "*")
    if allowed_origins != "*":
        # Parse comma-separated list if provided
        allowed_origins = [origin.strip() for origin in allowed_origins.split(",")]
    
    CORS(app, 
         resources={r"/*": {"origins": allowed_origins}},
         supports_credentials=True,
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"])

    # Session state lives in memory for the lifetime of the process
    jobs = demo_jobs() if app.config.get("SEED_DEMO_JOBS") else []
    app.extensions["scheduler_service"] = SchedulerService.from_config(app.config, jobs=jobs)

    @app.route("/health")
    def health():
        service = app.extensions["scheduler_service"]
        return jsonify({
            "status": "ok",
            "environment": config_class.ENV,
            "jobs": len(service.jobs),
            "planningDate": service.planning_date,
        }), 200

    # Register blueprints
    app.register_blueprint(brain_bp, url_prefix="/brain")

    # Global error handler so API clients always get JSON
    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle all exceptions and return a JSON error body"""
        if hasattr(e, 'code') and isinstance(e.code, int):
            status_code = e.code
        else:
            status_code = 500
        
        if status_code >= 500:
            logger.error("Unhandled exception", error=str(e), exc_info=True)
        
        response = jsonify({
            "error": str(e),
            "message": "An error occurred processing your request"
        })
        response.status_code = status_code
        return response

    return app
