import threading

from cellevac.context import new


def test_not_evacuating_before_evacuate():
    _, reporter, notifier = new()
    assert reporter.evacuating() is False
    assert notifier.evacuate_notify().wait(0.05) is False


def test_evacuate_sets_reporter_and_notifier():
    evacuatable, reporter, notifier = new()
    notify = notifier.evacuate_notify()
    assert not notify.is_set()
    evacuatable.evacuate()
    assert reporter.evacuating() is True
    assert notify.wait(1) is True


def test_repeated_concurrent_evacuate():
    evacuatable, reporter, _ = new()
    errors = []

    def call():
        try:
            evacuatable.evacuate()
        except Exception as err:  # pragma: no cover
            errors.append(err)

    threads = [threading.Thread(target=call) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert errors == []
    assert reporter.evacuating() is True