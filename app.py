from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from datetime import datetime, timezone
import atexit
import logging
import time
import weakref

import config
from cleanup_temp import cleanup_temp
from utils.log_utils import setup_logging
from utils.path_utils import ensure_directory
from utils.scheduler import SkipIfRunning, schedule_recurring

logger = logging.getLogger(__name__)

# cleanup timers still owned by a live app; stopped once at interpreter exit
_cleanup_tasks = weakref.WeakSet()

@atexit.register
def _cancel_cleanup_tasks():
    for task in list(_cleanup_tasks):
        task.cancel()

DEFAULTS = {
    "APP_ENV": config.APP_ENV,
    "UPLOADS_DIR": config.UPLOADS_DIR,
    "TEMP_UPLOAD_DIR": config.TEMP_UPLOAD_DIR,
    "CLEANUP_MAX_AGE_SEC": config.CLEANUP_MAX_AGE_SEC,
    "CLEANUP_INTERVAL_SEC": config.CLEANUP_INTERVAL_SEC,
    "CLEANUP_ENABLED": config.CLEANUP_ENABLED,
}

def create_app(overrides=None):
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)

    flask_app = Flask(__name__)
    flask_app.config.update(DEFAULTS)
    if overrides:
        flask_app.config.update(overrides)

    # === upload folders ===
    ensure_directory(flask_app.config["UPLOADS_DIR"])
    ensure_directory(flask_app.config["TEMP_UPLOAD_DIR"])

    # === temp cleanup ===
    def cleanup_job():
        return cleanup_temp(
            flask_app.config["TEMP_UPLOAD_DIR"],
            flask_app.config["CLEANUP_MAX_AGE_SEC"],
        )

    if flask_app.config["CLEANUP_ENABLED"]:
        task = schedule_recurring(flask_app.config["CLEANUP_INTERVAL_SEC"], cleanup_job, name="temp_cleanup")
        _cleanup_tasks.add(task)
        flask_app.extensions["temp_cleanup"] = task
        run_cleanup = task.run_now
    else:
        run_cleanup = SkipIfRunning(cleanup_job, name="temp_cleanup")

    # === request logging ===
    @flask_app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @flask_app.after_request
    def log_response(response):
        started = g.get("request_started")
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started is not None else None
        logger.info(
            f"{request.method} {request.path} {response.status_code} {duration_ms}ms",
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    # === routes ===
    @flask_app.route("/cleanup", methods=["POST"])
    def trigger_cleanup():
        ran, deleted = run_cleanup()
        if not ran:
            return jsonify({"success": False, "skipped": True}), 409
        return jsonify({"success": True, "deleted": deleted}), 200

    @flask_app.route("/api/system/health", methods=["GET"])
    def health():
        task = flask_app.extensions.get("temp_cleanup")
        next_run = task.next_run_time if task else None
        return jsonify({
            "status": "ok",
            "cleanup": {
                "running": bool(task and task.running),
                "next_run": next_run.isoformat() if next_run else None,
            },
        }), 200

    # === final error handler ===
    @flask_app.errorhandler(Exception)
    def handle_error(e):
        if isinstance(e, HTTPException):
            status = e.code or 500
            message = e.description
        else:
            logger.exception(f"Unhandled exception: {e}")
            status = 500
            message = str(e)
        if status >= 500 and flask_app.config["APP_ENV"] == "production":
            message = "Internal Server Error"
        return jsonify({
            "success": False,
            "error": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), status

    return flask_app

if __name__ == "__main__":
    flask_app = create_app()
    logger.info(f"NutriHelp API running on port {config.PORT}")
    # reloader would start a second cleanup timer
    flask_app.run(port=config.PORT, use_reloader=False)
