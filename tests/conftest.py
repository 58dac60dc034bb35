"""Shared fixtures for the triage engine tests."""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Make the backend package importable without installing it
BACKEND_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend")
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from incommand.services.priority import (  # noqa: E402
    PriorityClassifier, PriorityTier, SignalLexicon, LexiconSet
)


NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def classifier():
    return PriorityClassifier()


@pytest.fixture
def tie_lexicons():
    """Every tier listens for the same word with the same weight."""
    return LexiconSet([
        SignalLexicon(tier=tier, keywords=("alpha",), phrases=(), incident_types=(), weight=0.5)
        for tier in PriorityTier
    ])


@pytest.fixture
def incidents(now):
    return [
        {
            "id": 1,
            "event_id": "evt-1",
            "occurrence": "Crowd surge at the north gate. Several people pushed against barrier.",
            "action_taken": "Stewards opened overflow lane.",
            "incident_type": "Crowd Management",
            "priority": "high",
            "callsign_from": "S1",
            "callsign_to": "Control",
            "logged_by_callsign": "Control",
            "timestamp": (now - timedelta(hours=1)).isoformat(),
            "is_closed": False,
        },
        {
            "id": 2,
            "event_id": "evt-1",
            "occurrence": "Lost child found near the food court.",
            "action_taken": "Reunited with parent at welfare tent.",
            "incident_type": "Lost Property",
            "priority": "low",
            "callsign_from": "W2",
            "timestamp": (now - timedelta(days=10)).isoformat(),
            "is_closed": True,
        },
        {
            "id": 3,
            "event_id": "evt-2",
            "occurrence": "Medical patient collapsed near stage, ambulance requested.",
            "action_taken": "First aid team attended.",
            "incident_type": "Medical",
            "priority": "urgent",
            "callsign_from": "M1",
            "timestamp": (now - timedelta(days=40)).isoformat(),
            "is_closed": False,
        },
    ]
