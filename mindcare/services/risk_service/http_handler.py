"""Risk Service HTTP handler - risk entry endpoints.

Endpoints:
- POST /api/risk - Record a risk entry
- GET /api/risk?userId=&limit= - List a user's recent risk entries
- GET /health, GET /ready - Probes
"""
import logging
import os

from flask import Flask, request, jsonify

from mindcare.shared.database import database_enabled, get_connection_manager
from mindcare.shared.errors import StoreUnavailableError, ValidationError
from mindcare.shared.utils import configure_pii_salt
from .config import RiskServiceConfig
from .handler import RiskIntakeService
from .risk_repository import RiskRepository

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configure PII salt
pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = RiskServiceConfig.from_env()
risk_repository = RiskRepository(
    connection_manager=get_connection_manager() if database_enabled() else None
)
risk_service = RiskIntakeService(repository=risk_repository, config=config)

if config.schema_init_on_startup:
    try:
        risk_repository.ensure_schema()
    except StoreUnavailableError as e:
        # The gate stays closed and the first request retries
        logger.warning("RISK_SCHEMA_STARTUP_SKIPPED", extra={"error": str(e)})


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "risk-service",
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the risk store is usable."""
    if risk_repository.uses_memory:
        return jsonify({"status": "ready", "backend": "memory"}), 200

    db_health = risk_repository.connection_manager.health_check()
    if not db_health["healthy"]:
        return jsonify({"status": "not_ready", "reason": db_health["status"]}), 503
    return jsonify({"status": "ready", "backend": "postgresql"}), 200


@app.route("/api/risk", methods=["POST"])
def create_risk():
    """Record a risk entry.

    Request Body:
        {
            "userId": 5,
            "riskLevel": "moderate",
            "riskType": "self-harm-language",
            "riskScore": 4,              (optional, defaults to 1)
            "indicator": "...",          (optional)
            "actionTaken": "..."         (optional)
        }

    Response (201):
        The stored record
    """
    try:
        record = risk_service.record_risk(_json_body())
        return jsonify(record.to_dict()), 201

    except ValidationError as e:
        logger.info("RISK_CREATE_REJECTED", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400

    except StoreUnavailableError:
        return jsonify({"error": "Database not available"}), 500

    except Exception as e:
        logger.error("RISK_CREATE_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to create risk entry"}), 500


@app.route("/api/risk", methods=["GET"])
def list_risks():
    """List recent risk entries for one user.

    Query Params:
        userId: User identifier (required)
        limit: Maximum entries (default 10)
    """
    try:
        records = risk_service.list_risks(
            request.args.get("userId"),
            request.args.get("limit"),
        )
        return jsonify([r.to_dict() for r in records]), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    except StoreUnavailableError:
        return jsonify({"error": "Database not available"}), 500

    except Exception as e:
        logger.error("RISK_LIST_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to fetch risk data"}), 500


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False, threaded=True)
