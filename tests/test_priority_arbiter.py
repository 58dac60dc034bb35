"""Unit tests for the priority arbiter."""

from __future__ import annotations

import pytest

from incommand.services.priority import (
    DEFAULT_LEXICONS, LexiconSet, PriorityClassifier, PriorityTier, SignalLexicon,
    classify_priority, detect_priority, detect_priority_with_confidence, resolve_type_priority,
)


class TestDefaultCase:
    @pytest.mark.parametrize("text,incident_type", [("", None), (None, None), ("", "")])
    def test_no_context_defaults_to_medium(self, text, incident_type):
        result = classify_priority(text, incident_type)
        assert result.priority == PriorityTier.MEDIUM
        assert result.priority == "medium"
        assert result.confidence == 0.3
        assert result.signals == ("default priority (no context)",)
        assert "default priority" in result.reasoning
        assert "defaulting to medium" in result.reasoning


class TestClassify:
    def test_urgent_phrase_wins(self):
        assert classify_priority("Steward reports a life threatening injury").priority == "urgent"

    def test_incident_type_alone_sets_priority(self):
        result = classify_priority("", "Fire")
        assert result.priority == PriorityTier.URGENT
        # 0.4 boost, clear win over zero, times 1.1
        assert result.confidence == pytest.approx(0.44)
        assert 'incident type "Fire" suggests urgent priority' in result.reasoning

    def test_medical_emergency_scenario(self):
        text = "Medical emergency, patient unconscious and not breathing, multiple people affected"
        result = classify_priority(text)
        assert result.priority == PriorityTier.URGENT
        assert "not breathing" in result.signals
        assert "unconscious" in result.signals
        assert "multiple people involved" in result.signals
        assert result.confidence > 0.5
        assert result.confidence == pytest.approx(0.45 * 1.2 * 1.1)
        assert result.reasoning == "clear priority indicators; multiple people involved"

    def test_sit_rep_is_low(self):
        result = classify_priority("routine update, all clear", "Sit Rep")
        assert result.priority == PriorityTier.LOW
        assert 'incident type "Sit Rep" suggests low priority' in result.reasoning
        assert result.reasoning.startswith("incident type")

    def test_moderate_confidence(self):
        # high 0.135 vs medium 0.105: ahead, but not by 1.5x
        result = classify_priority("Fight reported, theft suspected")
        assert result.priority == PriorityTier.HIGH
        assert "moderate priority confidence" in result.reasoning
        assert result.confidence == 0.3

    def test_modifier_signals_come_before_matched_terms(self):
        result = classify_priority("Knife seen, 15 people injured, respond immediately")
        assert result.priority == PriorityTier.URGENT
        assert result.signals[:2] == ("15 people affected", "immediate action required")
        assert "knife" in result.signals
        assert result.reasoning.endswith("15 people affected; immediate action required")

    def test_signals_are_deduplicated(self):
        result = classify_priority("life threatening")
        assert result.signals.count("life threatening") == 1

    def test_temporal_boost_does_not_reach_medium_or_low(self):
        # Only the temporal boost applies to urgent, so it beats medium's keyword
        result = classify_priority("welfare check needed asap")
        assert result.priority == PriorityTier.URGENT
        assert result.signals == ("immediate action required",)

    def test_large_headcount_scores_at_least_small(self):
        base = "Stabbing and shooting, life threatening, {} people injured"
        large = classify_priority(base.format(15))
        small = classify_priority(base.format(2))
        assert large.priority == small.priority == PriorityTier.URGENT
        assert large.confidence >= small.confidence

    def test_confidence_is_clamped(self):
        texts = [
            "x", "lost property", "code red, armed person, bomb, gun, knife, shooting, immediately, ongoing",
            "many people, 50 injured, escalating", "minor issue", "welfare concern",
        ]
        for text in texts:
            for label in (None, "Fire", "Medical", "Theft", "Sit Rep", "Unknown"):
                confidence = classify_priority(text, label).confidence
                assert 0.3 <= confidence <= 1.0

    def test_idempotent(self):
        text = "Crowd surge at gate, several people hurt, ongoing"
        assert classify_priority(text, "Crowd Management") == classify_priority(text, "Crowd Management")

    def test_unknown_type_is_ignored(self):
        result = classify_priority("minor issue", "Not A Type")
        assert result.priority == PriorityTier.LOW
        assert "incident type" not in result.reasoning


class TestTieBreak:
    def test_exact_tie_prefers_most_severe(self, tie_lexicons):
        result = PriorityClassifier(tie_lexicons).classify("alpha")
        assert result.priority == PriorityTier.URGENT
        assert "ambiguous signals, using best match" in result.reasoning
        # 0.075 * 0.8 clamps up to the floor
        assert result.confidence == 0.3

    def test_no_matches_is_ambiguous(self):
        result = classify_priority("nothing to see here")
        assert "ambiguous signals" in result.reasoning
        assert result.confidence == 0.3


class TestResolveTypePriority:
    @pytest.mark.parametrize("label,expected", [
        ("Fire", PriorityTier.URGENT),
        ("Medical", PriorityTier.HIGH),
        ("Theft", PriorityTier.MEDIUM),
        ("Sit Rep", PriorityTier.LOW),
    ])
    def test_known_labels(self, label, expected):
        assert resolve_type_priority(label) == expected

    @pytest.mark.parametrize("label", [None, "", "fire", "Unknown"])
    def test_unknown_or_wrong_case(self, label):
        assert resolve_type_priority(label) is None

    def test_label_in_two_lexicons_resolves_to_most_severe(self):
        lexicons = LexiconSet([
            SignalLexicon(tier=lx.tier, keywords=lx.keywords, phrases=lx.phrases,
                          incident_types=lx.incident_types + ("Shared",), weight=lx.weight)
            if lx.tier in (PriorityTier.HIGH, PriorityTier.LOW) else lx
            for lx in DEFAULT_LEXICONS
        ])
        assert resolve_type_priority("Shared", lexicons) == PriorityTier.HIGH


class TestInjectedLexicons:
    def test_custom_lexicons_drive_classification(self):
        lexicons = LexiconSet([
            SignalLexicon(tier=PriorityTier.URGENT, keywords=(), phrases=(), incident_types=(), weight=1.0),
            SignalLexicon(tier=PriorityTier.HIGH, keywords=(), phrases=(), incident_types=(), weight=1.0),
            SignalLexicon(tier=PriorityTier.MEDIUM, keywords=(), phrases=(), incident_types=(), weight=1.0),
            SignalLexicon(tier=PriorityTier.LOW, keywords=("glitter",), phrases=(), incident_types=(), weight=1.0),
        ])
        classifier = PriorityClassifier(lexicons)
        assert classifier.detect_priority("glitter cannon misfired") == PriorityTier.LOW
        # "misfired" contains "fire" for the built-in lexicons
        assert detect_priority("glitter cannon misfired") == PriorityTier.URGENT


class TestWrappers:
    def test_detect_priority(self):
        assert detect_priority("code red at main stage") == PriorityTier.URGENT

    def test_detect_priority_with_confidence(self):
        priority, confidence = detect_priority_with_confidence("", "Fire")
        assert priority == PriorityTier.URGENT
        assert confidence == pytest.approx(0.44)

    def test_to_dict(self):
        data = classify_priority("", "Fire").to_dict()
        assert data["priority"] == "urgent"
        assert isinstance(data["signals"], list)
