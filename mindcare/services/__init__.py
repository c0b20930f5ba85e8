"""MindCare services.

- crisis_resources: regional emergency guidance, no persistence
- risk_service: risk entry intake and history
- alert_service: emergency alert intake and triage
- escalation: chat message analysis feeding the two stores above
"""
