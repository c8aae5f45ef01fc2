from tailmon.alarm import NO_PEAK, AlarmEngine
from tailmon.models import AlertType


def test_starts_normal():
    alarm = AlarmEngine(threshold=5)
    assert not alarm.active
    assert alarm.events() == []
    assert alarm.evaluate(4, now=1.0) is None
    assert alarm.events() == []


def test_threshold_is_inclusive():
    alarm = AlarmEngine(threshold=5)
    assert alarm.evaluate(4, now=1.0) is None
    event = alarm.evaluate(5, now=2.0)
    assert event.type == AlertType.BREACH
    assert event.hits == 5
    assert event.timestamp == 2.0
    assert alarm.active
    assert alarm.peak_hits == 5


def test_staying_above_threshold_adds_no_events():
    alarm = AlarmEngine(threshold=5)
    alarm.evaluate(6, now=1.0)
    assert alarm.evaluate(9, now=2.0) is None
    assert alarm.evaluate(5, now=3.0) is None
    assert len(alarm.events()) == 1
    assert alarm.peak_hits == 9


def test_recovery_backfills_peak_and_resets():
    alarm = AlarmEngine(threshold=5)
    alarm.evaluate(5, now=1.0)
    alarm.evaluate(7, now=2.0)
    alarm.evaluate(6, now=3.0)

    event = alarm.evaluate(3, now=4.0)

    assert event.type == AlertType.RECOVERY
    assert event.hits == 3
    assert not alarm.active
    assert alarm.peak_hits == NO_PEAK
    recovery, breach = alarm.events()
    assert recovery == event
    assert breach.type == AlertType.BREACH
    assert breach.hits == 7
    assert breach.timestamp == 1.0


def test_recovery_needs_strictly_below_threshold():
    alarm = AlarmEngine(threshold=5)
    alarm.evaluate(5, now=1.0)
    assert alarm.evaluate(5, now=2.0) is None
    assert alarm.active
    assert alarm.evaluate(4, now=3.0).type == AlertType.RECOVERY


def test_second_episode_tracks_its_own_peak():
    alarm = AlarmEngine(threshold=2)
    alarm.evaluate(8, now=1.0)
    alarm.evaluate(0, now=2.0)
    alarm.evaluate(3, now=3.0)
    alarm.evaluate(1, now=4.0)

    hits = [(e.type, e.hits) for e in alarm.events()]
    assert hits == [
        (AlertType.RECOVERY, 1),
        (AlertType.BREACH, 3),
        (AlertType.RECOVERY, 0),
        (AlertType.BREACH, 8),
    ]
