"""On shutdown, remove stranded evacuating LRPs and delete all containers."""

from __future__ import annotations

import queue
import threading

from .models import ActualLRPFilter, Presence

EXIT_TIMEOUT_OFFSET = 5.0
STRANDED_EVACUATING_ACTUAL_LRPS_METRIC = "StrandedEvacuatingActualLRPs"
_POLL = 0.01


class CleanupTimeoutError(Exception):
    """Containers were not all deleted before the exit timeout."""


class EvacuationCleanup:
    """Cleans up a cell's evacuation leftovers once it is signalled."""

    def __init__(self, logger, cell_id, graceful_shutdown_interval,
                 proxy_reload_duration, bbs_client, executor_client, clock,
                 metron_client):
        self.logger = logger
        self.cell_id = cell_id
        self.exit_timeout = (graceful_shutdown_interval + proxy_reload_duration
                             + EXIT_TIMEOUT_OFFSET)
        self.bbs_client = bbs_client
        self.executor_client = executor_client
        self.clock = clock
        self.metron_client = metron_client

    def run(self, signals: queue.Queue, ready: threading.Event) -> None:
        logger = self.logger.getChild("evacuation-cleanup")
        logger.info("started")
        try:
            ready.set()
            logger.info("signalled signal=%s", signals.get())
            self._remove_stranded(logger)
            self._delete_all_containers(logger)
        finally:
            logger.info("complete")

    def _remove_stranded(self, logger) -> None:
        try:
            actual_lrps = self.bbs_client.actual_lrps(
                logger, "", ActualLRPFilter(cell_id=self.cell_id))
        except Exception as err:
            logger.error("failed-fetching-actual-lrp-groups: %s", err)
            raise

        stranded = [lrp for lrp in actual_lrps if lrp.presence is Presence.EVACUATING]
        for lrp in stranded:
            try:
                self.bbs_client.remove_evacuating_actual_lrp(
                    logger, "", lrp.key, lrp.instance_key)
            except Exception as err:
                logger.error("failed-removing-evacuating-actual-lrp lrp-key=%s: %s",
                             lrp.key, err)

        count = len(stranded)
        try:
            self.metron_client.send_metric(STRANDED_EVACUATING_ACTUAL_LRPS_METRIC, count)
        except Exception as err:
            logger.error("failed-sending-stranded-evacuating-lrp-metric count=%d: %s",
                         count, err)
        logger.info("finished-evacuating stranded-evacuating-actual-lrps=%d", count)

    def _delete_all_containers(self, logger) -> None:
        logger.info("deleting-all-containers")
        exit_timer = self.clock.new_timer(self.exit_timeout)
        ticker = self.clock.new_ticker(1.0)
        signalled, deleted, stop = threading.Event(), threading.Event(), threading.Event()
        threading.Thread(target=self._delete_running_containers,
                         args=(logger, signalled), daemon=True).start()
        threading.Thread(target=self._check_running_containers,
                         args=(logger, ticker, signalled, deleted, stop),
                         daemon=True).start()
        try:
            while not deleted.is_set():
                if exit_timer.wait(_POLL):
                    logger.info("failed-to-cleanup-all-containers")
                    raise CleanupTimeoutError("failed-to-cleanup-all-containers")
            logger.info("deleted-containers-successfully")
        finally:
            stop.set()
            ticker.stop()
            exit_timer.stop()

    def _list_containers(self, logger):
        try:
            return self.executor_client.list_containers(logger)
        except Exception as err:
            logger.error("failed-listing-containers: %s", err)
            return None

    def _check_running_containers(self, logger, ticker, signalled, deleted, stop):
        try:
            signalled.wait()
            # An unlistable set of containers counts as none running.
            while self._list_containers(logger):
                logger.info("waiting-for-containers-to-delete")
                while not ticker.wait(_POLL * 5):
                    if stop.is_set():
                        return
        finally:
            deleted.set()

    def _delete_running_containers(self, logger, signalled):
        try:
            containers = self._list_containers(logger)
            if containers is None:
                return
            logger.info("sending-signal-to-containers")
            workers = []
            for container in containers:
                source_name, tags = container.run_info.log_config.source_name_and_tags()
                self.metron_client.send_app_log(
                    f"Cell {self.cell_id} reached evacuation timeout for instance "
                    f"{container.guid}", source_name, tags)
                worker = threading.Thread(target=self._delete_one,
                                          args=(logger, container.guid), daemon=True)
                worker.start()
                workers.append(worker)
            logger.info("sent-signal-to-containers")
            for worker in workers:
                worker.join()
        finally:
            signalled.set()

    def _delete_one(self, logger, guid):
        try:
            self.executor_client.delete_container(logger, "", guid)
        except Exception as err:
            logger.error("failed-to-delete-container container-guid=%s: %s", guid, err)