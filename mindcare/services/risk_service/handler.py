"""Risk intake service - validates and stores risk-detection events.

Risk signals arrive from conversation analysis or manual entry. Each
accepted signal becomes exactly one immutable RiskRecord.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from mindcare.shared.errors import ValidationError
from mindcare.shared.models import RiskRecord, coerce_risk_score, parse_positive_int
from mindcare.shared.utils import hash_pii
from .config import RiskServiceConfig
from .risk_repository import RiskRepository

logger = logging.getLogger(__name__)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class RiskIntakeService:
    """Records and lists risk entries for users."""

    def __init__(
        self,
        repository: Optional[RiskRepository] = None,
        config: Optional[RiskServiceConfig] = None,
    ):
        """Initialize service with dependencies.

        Args:
            repository: Risk store; defaults to an in-memory store
            config: Listing limits
        """
        self.repository = repository or RiskRepository()
        self.config = config or RiskServiceConfig()

        logger.info("RISK_INTAKE_SERVICE_INITIALIZED")

    def record_risk(self, payload: Mapping[str, Any]) -> RiskRecord:
        """Validate a risk signal and persist it.

        Args:
            payload: Request body with userId, riskLevel, riskType and
                optional riskScore, indicator, actionTaken

        Returns:
            Stored RiskRecord including its assigned id

        Raises:
            ValidationError: If a required field is missing or userId
                is not a positive integer
        """
        raw_user_id = payload.get("userId")
        risk_level = payload.get("riskLevel")
        risk_type = payload.get("riskType")

        if not raw_user_id or not risk_level or not risk_type:
            raise ValidationError("Missing required fields")

        user_id = parse_positive_int(raw_user_id)
        if user_id is None:
            raise ValidationError("userId must be a positive integer")

        # detectedAt is always server time
        record = RiskRecord(
            user_id=user_id,
            risk_level=str(risk_level),
            risk_score=coerce_risk_score(payload.get("riskScore")),
            risk_type=str(risk_type),
            indicator=_optional_text(payload.get("indicator")),
            action_taken=_optional_text(payload.get("actionTaken")),
            detected_at=datetime.now(timezone.utc),
        )

        # Raises before the write when the salt is not configured
        user_id_hash = hash_pii(user_id)

        self.repository.ensure_schema()
        stored = self.repository.insert(record)

        logger.info(
            "RISK_RECORDED",
            extra={
                "risk_id": stored.id,
                "user_id_hash": user_id_hash,
                "risk_level": stored.risk_level,
                "risk_type": stored.risk_type,
                "risk_score": stored.risk_score,
            }
        )

        return stored

    def list_risks(self, user_id: Any, limit: Any = None) -> List[RiskRecord]:
        """List a user's most recent risk records.

        Args:
            user_id: User identifier (int or numeric string)
            limit: Maximum records; invalid values fall back to the default

        Returns:
            Records ordered by detected_at descending

        Raises:
            ValidationError: If user_id is absent or not a positive integer
        """
        parsed_user_id = parse_positive_int(user_id)
        if parsed_user_id is None:
            raise ValidationError("User ID is required")

        resolved_limit = parse_positive_int(limit) or self.config.default_list_limit
        resolved_limit = min(resolved_limit, self.config.max_list_limit)

        self.repository.ensure_schema()
        records = self.repository.find_by_user(parsed_user_id, resolved_limit)

        logger.debug(
            "RISKS_LISTED",
            extra={
                "user_id_hash": hash_pii(parsed_user_id),
                "limit": resolved_limit,
                "count": len(records),
            }
        )

        return records
