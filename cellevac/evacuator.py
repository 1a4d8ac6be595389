"""Waits for evacuation, then for the cell's containers to drain."""

from __future__ import annotations

import queue
import threading

_POLL = 0.01


class Evacuator:
    """Runs until signalled, or until evacuation finishes or times out."""

    def __init__(self, logger, clock, executor_client, evacuation_notifier,
                 cell_id, evacuation_timeout, polling_interval):
        self.logger = logger
        self.clock = clock
        self.executor_client = executor_client
        self.evacuation_notifier = evacuation_notifier
        self.cell_id = cell_id
        self.evacuation_timeout = evacuation_timeout
        self.polling_interval = polling_interval

    def run(self, signals: queue.Queue, ready: threading.Event) -> None:
        logger = self.logger.getChild("running-evacuator")
        logger.info("started")
        try:
            notify = self.evacuation_notifier.evacuate_notify()
            ready.set()
            while not notify.wait(_POLL):
                if _signalled(signals, logger):
                    return
            logger.info("notified-of-evacuation")

            timer = self.clock.new_timer(self.evacuation_timeout)
            done, stop = threading.Event(), threading.Event()
            threading.Thread(target=self._evacuate, args=(logger, done, stop),
                             daemon=True).start()
            try:
                while not done.is_set():
                    if timer.wait(_POLL):
                        logger.error("failed-to-evacuate-before-timeout")
                        return
                    if _signalled(signals, logger):
                        return
                logger.info("evacuation-complete")
            finally:
                stop.set()
                timer.stop()
        finally:
            logger.info("finished")

    def _evacuate(self, logger, done, stop):
        logger = logger.getChild("evacuating")
        logger.info("started")
        timer = self.clock.new_timer(self.polling_interval)
        try:
            while not self._all_containers_evacuated(logger):
                logger.info("evacuation-incomplete polling-interval=%s",
                            self.polling_interval)
                timer.reset(self.polling_interval)
                while not timer.wait(_POLL * 5):
                    if stop.is_set():
                        return
            done.set()
            logger.info("succeeded")
        finally:
            timer.stop()

    def _all_containers_evacuated(self, logger) -> bool:
        try:
            return not self.executor_client.list_containers(logger)
        except Exception as err:
            logger.error("failed-to-list-containers: %s", err)
            return False


def _signalled(signals: queue.Queue, logger) -> bool:
    try:
        signal = signals.get_nowait()
    except queue.Empty:
        return False
    logger.info("signaled signal=%s", signal)
    return True