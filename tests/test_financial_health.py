from services.financial_health import assess_financial_health, status_from_safe_to_spend


def test_status_bands():
    assert status_from_safe_to_spend(500, 400) == "safe"
    assert status_from_safe_to_spend(400, 400) == "safe"
    assert status_from_safe_to_spend(200, 400) == "warning"
    assert status_from_safe_to_spend(199, 400) == "danger"


def test_zero_threshold_is_always_safe():
    assert status_from_safe_to_spend(0) == "safe"


def test_assessment_includes_message_when_not_safe():
    health = assess_financial_health(100, 400, month_label="April")

    assert health["status"] == "danger"
    assert health["color"] == "#ef4444"
    assert "April" in health["future_impact_message"]


def test_safe_assessment_has_no_message():
    health = assess_financial_health(1000.25, 400)

    assert health["status"] == "safe"
    assert health["safe_to_spend"] == 1000.25
    assert health["future_impact_message"] is None
