# cellevac

This package holds the evacuation and cleanup logic for a cell that runs
containers for a distributed scheduler.

- When the cell is asked to evacuate, `cellevac` waits for its containers to
  drain.
- When the cell shuts down, `cellevac` does two things. It removes any
  instances left stranded in the evacuating state. Then it deletes the
  containers that are still running.

All durations are given in seconds, as `float`.

## Installation

```
pip install cellevac
```

To run the test suite:

```
pip install "cellevac[test]"
pytest
```

## Modules

### `cellevac.context`

`new()` returns a tuple of three items. All three are the same
`EvacuationContext`, and you use them in the roles evacuatable, reporter and
notifier.

`EvacuationContext` has three methods:

- `evacuate()` marks the cell as evacuating. You can call it more than once,
  from any thread.
- `evacuating()` returns `True` once `evacuate()` has been called.
- `evacuate_notify()` returns a `threading.Event`. The event is set when
  evacuation begins.

### `cellevac.clock`

`SystemClock` is based on `time.monotonic()`. It has three methods:

- `now()` returns the current time.
- `new_timer(duration)` returns a `Timer`.
- `new_ticker(interval)` returns a `Ticker`.

`Timer` has these methods:

- `wait(timeout=None)` returns `True` once the timer has fired. It returns
  `False` if the timer was stopped or the timeout passed first.
- `stop()` stops the timer.
- `reset(duration)` sets the timer to fire again, `duration` seconds from
  now.

`Ticker` fires again and again at a fixed interval, and drops any ticks it
missed. It raises `ValueError` if the interval is not positive.

The runners use only `new_timer` and `new_ticker`. You can pass any object
that offers those two methods in place of the clock, for example in tests.

### `cellevac.models`

These are the data types the runners use.

Scheduler state:

- `Presence`, with the values `ORDINARY`, `EVACUATING` and `SUSPECT`.
- `ActualLRPKey`.
- `ActualLRPInstanceKey`.
- `ActualLRP`, which holds `key`, `instance_key` and `presence`.
- `ActualLRPFilter`.

Containers:

- `LogConfig`.
- `RunInfo`.
- `ContainerState`.
- `Container`.

`LogConfig.source_name_and_tags()` returns the source name and the tags for
app logs. The tags are the config's own `tags`, plus `source_id` (the log
guid) and `instance_id` (the index as a string).

### `cellevac.evacuator`

```
Evacuator(logger, clock, executor_client, evacuation_notifier, cell_id,
          evacuation_timeout, polling_interval)
```

`run(signals, ready)` works in these steps:

1. It sets `ready`.
2. It waits until either `evacuation_notifier.evacuate_notify()` is set or a
   signal arrives on the `signals` queue. If a signal comes first, `run`
   returns.
3. Once evacuation has begun, it polls `executor_client.list_containers()`
   every `polling_interval` until the executor reports no containers. A
   listing error counts as "not yet drained".
4. It returns when the containers are gone, when `evacuation_timeout` expires
   (the expiry is logged as an error), or when a signal arrives.

`run` always returns `None`.

### `cellevac.cleanup`

```
EvacuationCleanup(logger, cell_id, graceful_shutdown_interval,
                  proxy_reload_duration, bbs_client, executor_client, clock,
                  metron_client)
```

`run(signals, ready)` sets `ready` and blocks until a signal arrives on
`signals`. Then it works in these steps:

1. It fetches the cell's actual LRPs. If that fails, the exception is
   re-raised.
2. It removes every LRP whose presence is `EVACUATING`. If one removal fails,
   the failure is logged and the other removals go ahead.
3. It sends how many of them it found as the `StrandedEvacuatingActualLRPs`
   metric.
4. It lists the containers. For each one it sends an app log with the text
   `Cell <cell_id> reached evacuation timeout for instance <guid>`, and it
   deletes each container in its own thread.
5. It checks every second until no containers are listed. A listing error
   counts as none left.

`run` raises `CleanupTimeoutError` if containers are still listed once this
time has passed:

```
graceful_shutdown_interval + proxy_reload_duration + 5 seconds
```

The module also exports `EXIT_TIMEOUT_OFFSET` and
`STRANDED_EVACUATING_ACTUAL_LRPS_METRIC`.

## Example

```python
import logging
import queue
import threading

from cellevac.clock import SystemClock
from cellevac.context import new
from cellevac.evacuator import Evacuator

evacuatable, reporter, notifier = new()
signals = queue.Queue()
ready = threading.Event()

evacuator = Evacuator(
    logging.getLogger("rep"),
    SystemClock(),
    executor_client,          # your executor client
    notifier,
    "cell-1",
    evacuation_timeout=180.0,
    polling_interval=30.0,
)

worker = threading.Thread(target=evacuator.run, args=(signals, ready))
worker.start()
ready.wait()

evacuatable.evacuate()        # begin draining the cell
worker.join()
```

To stop a runner, put any value on `signals`.

## Interfaces you supply

The logger is a standard `logging.Logger`. The runners call `getChild` on it.

The clients only need a few methods. A client reports a failure by raising an
exception.

- Executor client:
  - `list_containers(logger)` returns a list of `Container`.
  - `delete_container(logger, trace_id, guid)`.
- BBS client:
  - `actual_lrps(logger, trace_id, filter)` returns a list of `ActualLRP`.
  - `remove_evacuating_actual_lrp(logger, trace_id, key, instance_key)`.
- Metron client:
  - `send_metric(name, value)`.
  - `send_app_log(message, source_name, tags)`.

## What this package does not do

This package does not include:

- a command-line program or service entry point;
- any client for a scheduler database, a container executor or a metrics or
  log pipeline;
- process supervision or operating-system signal handling.

You wire the runners into your own process and supply the clients yourself.