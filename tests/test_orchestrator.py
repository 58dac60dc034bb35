"""Tests for the radio message pipeline."""

from datetime import timedelta

from incommand.services.orchestrator import (
    ALREADY_LINKED_REASON, DUPLICATE_REASON, process_radio_message
)
from incommand.services.priority import PriorityClassifier, PriorityTier
from incommand.services.radio import RadioMessage


class TestProcessRadioMessage:
    def test_emergency_creates_draft(self, now):
        message = RadioMessage(id=11, message="Medical emergency at Gate 2, patient unconscious")
        result = process_radio_message(message, now=now)

        assert result.analyzed
        assert result.category == "emergency"
        assert result.priority == "critical"
        assert result.incident_created
        assert result.reason is None

        draft = result.draft
        assert draft.incident_type == "Medical"
        assert draft.location == "Gate 2"
        assert draft.radio_priority == "critical"
        assert draft.radio_message_id == 11
        assert draft.priority.priority == PriorityTier.HIGH
        assert draft.priority.confidence > 0.4

    def test_routine_message_is_only_analyzed(self, now):
        result = process_radio_message(RadioMessage(message="Radio check, copy received"), now=now)
        assert result.analyzed
        assert result.category == "routine"
        assert result.priority == "low"
        assert not result.incident_created
        assert result.draft is None
        assert result.reason is None

    def test_auto_create_disabled(self, now):
        message = RadioMessage(message="Fire in the merch tent")
        result = process_radio_message(message, auto_create=False, now=now)
        assert result.category == "emergency"
        assert not result.incident_created
        assert result.draft is None

    def test_already_linked_message(self, now):
        message = RadioMessage(message="Fight at the bar", incident_id=99)
        result = process_radio_message(message, now=now)
        assert not result.incident_created
        assert result.reason == ALREADY_LINKED_REASON
        assert result.incident_id == 99

    def test_duplicate_links_to_existing_incident(self, now):
        recent = [{
            "id": 8,
            "occurrence": "Surge reported by north stand",
            "created_at": (now - timedelta(minutes=2)).isoformat(),
        }]
        result = process_radio_message(
            RadioMessage(message="Crowd surge at north barrier"), recent_incidents=recent, now=now)
        assert result.category == "incident"
        assert not result.incident_created
        assert result.reason == DUPLICATE_REASON
        assert result.incident_id == 8

    def test_pre_analyzed_message_keeps_its_category(self, now):
        message = RadioMessage(message="fence down at gate 4", category="routine", priority="low")
        result = process_radio_message(message, now=now)
        assert result.category == "routine"
        assert result.priority == "low"
        assert result.incident_created
        assert result.draft.incident_type == "Other"
        assert result.draft.location == "gate 4"
        assert result.draft.radio_priority == "medium"

    def test_pre_analyzed_routine_is_skipped(self, now):
        message = RadioMessage(message="copy that", category="routine", priority="low")
        result = process_radio_message(message, now=now)
        assert not result.incident_created
        assert result.reason is None

    def test_injected_classifier(self, now, tie_lexicons):
        classifier = PriorityClassifier(tie_lexicons)
        message = RadioMessage(message="alpha team needs ambulance at stage")
        result = process_radio_message(message, classifier=classifier, now=now)
        assert result.incident_created
        assert result.draft.priority == classifier.classify(message.message, "Medical")
        assert result.draft.priority.priority == PriorityTier.URGENT

    def test_to_dict(self, now):
        result = process_radio_message(RadioMessage(id="r-1", message="Smoke by the stage"), now=now)
        data = result.to_dict()
        assert data["incident_created"] is True
        assert data["draft"]["incident_type"] == "Fire"
        assert data["draft"]["priority"]["priority"] in ("urgent", "high", "medium", "low")
        assert data["draft"]["radio_message_id"] == "r-1"
