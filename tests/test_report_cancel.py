"""
Tests for the reporter and cancellation helpers.
"""

import signal
import threading

from lambdaclean.cancel import CancelToken, interrupt_handler
from lambdaclean.report import Reporter


def test_reporter_line_format(reporter, output):
    reporter.deleted("svc-a", "1")
    reporter.kept("svc-a", "2")

    assert output.getvalue() == "[DELETE] svc-a:1\n[KEEP]   svc-a:2\n"
    assert (reporter.deleted_count, reporter.kept_count) == (1, 1)


def test_reporter_is_thread_safe(output):
    reporter = Reporter(stream=output)
    threads = [
        threading.Thread(target=lambda: [reporter.deleted("fn", str(i)) for i in range(50)])
        for _ in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = output.getvalue().splitlines()
    assert len(lines) == 200
    assert all(line.startswith("[DELETE] fn:") for line in lines)
    assert reporter.deleted_count == 200


def test_cancel_token():
    token = CancelToken()
    assert not token.cancelled
    assert token.wait(0.01) is False

    token.cancel()
    assert token.cancelled
    assert token.wait(0.01) is True


def test_interrupt_handler_cancels_and_restores():
    previous = signal.getsignal(signal.SIGINT)
    token = CancelToken()

    with interrupt_handler(token):
        signal.raise_signal(signal.SIGINT)

    assert token.cancelled
    assert signal.getsignal(signal.SIGINT) is previous
