"""MindCare risk escalation backend."""
