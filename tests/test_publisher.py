"""
Tests for feedback computation and delivery.
"""

import logging
from unittest.mock import MagicMock, call

from charactercount.messages import Message
from charactercount.policy import policy_from_options
from charactercount.publisher import CountResult, Feedback, FeedbackPublisher


def test_compute_characters():
    publisher = FeedbackPublisher(policy_from_options(maxlength=10))
    feedback = publisher.compute("Hello")
    assert feedback == Feedback(
        result=CountResult(count=5, remaining=5),
        message=Message("You have 5 characters remaining", False),
        visible=True,
    )


def test_remaining_is_limit_minus_count():
    publisher = FeedbackPublisher(policy_from_options(maxlength=10))
    for text in ["", "a", "abcdefghij", "abcdefghijklmnop"]:
        result = publisher.compute(text).result
        assert result.remaining == 10 - result.count


def test_compute_unlimited_returns_none():
    publisher = FeedbackPublisher(policy_from_options())
    assert publisher.compute("anything") is None


def test_publish_sends_status_and_announcement(status_sink, announcement_sink):
    publisher = FeedbackPublisher(
        policy_from_options(maxlength=10),
        status_sink=status_sink,
        announcement_sink=announcement_sink,
    )
    publisher.publish("This is too long")

    expected = Message("You have 6 characters too many", True)
    status_sink.show.assert_called_once_with(expected, True)
    announcement_sink.update.assert_called_once_with(expected, True)


def test_hidden_feedback_still_reaches_sinks(status_sink, announcement_sink):
    """Below the threshold the live region gets the text but stays silent."""
    publisher = FeedbackPublisher(
        policy_from_options(maxlength=10, threshold=80),
        status_sink=status_sink,
        announcement_sink=announcement_sink,
    )
    publisher.publish("1234567")

    expected = Message("You have 3 characters remaining", False)
    status_sink.show.assert_called_once_with(expected, False)
    announcement_sink.update.assert_called_once_with(expected, False)


def test_announcement_follows_visibility_transition(announcement_sink):
    publisher = FeedbackPublisher(
        policy_from_options(maxlength=10, threshold=80),
        announcement_sink=announcement_sink,
    )
    publisher.publish("1234567")
    publisher.publish("12345678")
    publisher.publish("123456789")

    assert announcement_sink.update.call_args_list == [
        call(Message("You have 3 characters remaining", False), False),
        call(Message("You have 2 characters remaining", False), True),
        call(Message("You have 1 character remaining", False), True),
    ]


def test_publish_notifies_subscribers(recorder):
    publisher = FeedbackPublisher(
        policy_from_options(maxwords=5),
        subscribers=lambda: [recorder],
    )
    publisher.publish("Hello world")

    assert recorder.calls == [
        (CountResult(2, 3), Message("You have 3 words remaining", False), True)
    ]


def test_publish_records_last_feedback():
    publisher = FeedbackPublisher(policy_from_options(maxlength=10))
    assert publisher.last_feedback is None
    feedback = publisher.publish("Hello")
    assert publisher.last_feedback is feedback


def test_publish_unlimited_delivers_nothing(status_sink, recorder):
    publisher = FeedbackPublisher(
        policy_from_options(),
        status_sink=status_sink,
        subscribers=lambda: [recorder],
    )
    assert publisher.publish("text") is None
    status_sink.show.assert_not_called()
    assert recorder.calls == []


def test_failing_subscriber_does_not_block_others(status_sink, recorder, caplog):
    broken = MagicMock(side_effect=RuntimeError("boom"))
    publisher = FeedbackPublisher(
        policy_from_options(maxlength=10),
        status_sink=status_sink,
        subscribers=lambda: [broken, recorder],
    )

    with caplog.at_level(logging.ERROR, logger="charactercount.publisher"):
        feedback = publisher.publish("Hello")

    assert feedback is not None
    broken.assert_called_once()
    assert len(recorder.calls) == 1
    status_sink.show.assert_called_once()
    assert "Feedback delivery to subscriber failed" in caplog.text


def test_failing_status_sink_does_not_block_announcement(status_sink, announcement_sink):
    status_sink.show.side_effect = RuntimeError("render failed")
    publisher = FeedbackPublisher(
        policy_from_options(maxlength=10),
        status_sink=status_sink,
        announcement_sink=announcement_sink,
    )
    publisher.publish("Hello")
    announcement_sink.update.assert_called_once()
