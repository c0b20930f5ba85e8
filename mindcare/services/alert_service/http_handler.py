"""Alert Service HTTP handler - emergency alert tracking endpoints.

Endpoints:
- POST /api/chatbot/tracking - Create an alert (canonical or legacy payload)
- GET /api/chatbot/tracking - List newest alerts for reviewers
- PATCH /api/chatbot/tracking - Update an alert's triage status
- GET /health, GET /ready - Probes

Access control for the reviewer endpoints is enforced upstream.
"""
import logging
import os

from flask import Flask, request, jsonify

from mindcare.shared.database import database_enabled, get_connection_manager
from mindcare.shared.errors import NotFoundError, StoreUnavailableError, ValidationError
from mindcare.shared.utils import configure_pii_salt
from .alert_repository import AlertRepository
from .config import AlertServiceConfig
from .handler import AlertTriageService

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configure PII salt
pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = AlertServiceConfig.from_env()
alert_repository = AlertRepository(
    connection_manager=get_connection_manager() if database_enabled() else None
)
alert_service = AlertTriageService(repository=alert_repository, config=config)

if config.schema_init_on_startup:
    try:
        alert_repository.ensure_schema()
    except StoreUnavailableError as e:
        # The gate stays closed and the first request retries
        logger.warning("ALERT_SCHEMA_STARTUP_SKIPPED", extra={"error": str(e)})


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "alert-service",
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the alert store is usable."""
    if alert_repository.uses_memory:
        return jsonify({"status": "ready", "backend": "memory"}), 200

    db_health = alert_repository.connection_manager.health_check()
    if not db_health["healthy"]:
        return jsonify({"status": "not_ready", "reason": db_health["status"]}), 503
    return jsonify({"status": "ready", "backend": "postgresql"}), 200


@app.route("/api/chatbot/tracking", methods=["POST"])
def create_alert():
    """Create an emergency alert.

    Request Body (canonical):
        {
            "userId": "u1",
            "riskLevel": "high",
            "isHeavy": true,
            "excerpt": "...",
            "fullText": "..."
        }

    Request Body (legacy):
        {
            "userId": "u1",
            "userMessage": "...",
            "moodLevel": 3,
            "hasGrowth": false
        }

    Response (201):
        {"ok": true, "id": 42}
    """
    try:
        alert = alert_service.create_alert(_json_body())
        return jsonify({"ok": True, "id": alert.id}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    except StoreUnavailableError:
        return jsonify({"error": "DB not ready"}), 503

    except Exception as e:
        logger.error("ALERT_CREATE_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to create alert"}), 500


@app.route("/api/chatbot/tracking", methods=["GET"])
def list_alerts():
    """List newest alerts across all users.

    Query Params:
        limit: Maximum alerts (optional, default 200)
    """
    try:
        alerts = alert_service.list_alerts(request.args.get("limit"))
        return jsonify({"alerts": [a.to_dict() for a in alerts]}), 200

    except StoreUnavailableError:
        return jsonify({"error": "DB not ready"}), 503

    except Exception as e:
        logger.error("ALERT_LIST_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to list alerts"}), 500


@app.route("/api/chatbot/tracking", methods=["PATCH"])
def update_alert_status():
    """Update an alert's triage status.

    Request Body:
        {"id": 42, "status": "resolved"}
    """
    try:
        data = _json_body()
        alert_service.update_status(data.get("id"), data.get("status"))
        return jsonify({"ok": True}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404

    except StoreUnavailableError:
        return jsonify({"error": "DB not ready"}), 503

    except Exception as e:
        logger.error("ALERT_STATUS_UPDATE_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to update alert"}), 500


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False, threaded=True)
