# xopnet

An event-driven TCP networking toolkit built on the standard library alone.
It provides the pieces of a reactor-style network program:

- `xopnet.event_loop.EventLoop`: starts one or more scheduler threads.
  Channels, timers and trigger events given to the loop go to the first
  scheduler; `get_task_scheduler()` hands out the others in turn.
- `xopnet.selector_task_scheduler.SelectorTaskScheduler`: waits on
  descriptors with `selectors` and dispatches readiness to `Channel` objects,
  between running queued trigger events and due timers.
- `xopnet.task_scheduler.TaskScheduler`: the scheduler loop itself
  (`start`, `stop`, `add_timer`, `remove_timer`, `add_trigger_event`).
- `xopnet.channel`: `Channel` and the `EventType` flags.
- `xopnet.tcp_connection.TcpConnection`: wraps a connected socket, reads into
  a `BufferReader`, queues writes in a `BufferWriter`, and calls
  `read_callback`, `close_callback` and `disconnect_callback`.
- `xopnet.timer`: `TimerQueue` (timers that repeat while their callback
  returns `True`) and `Timer`.
- `xopnet.buffer_reader` and `xopnet.buffer_writer`: `BufferReader`,
  `BufferWriter` and the `read_uint*` / `write_uint*` big- and little-endian
  integer helpers.
- Utilities: `Pipe`, `TcpSocket`, `RingBuffer`, `ThreadSafeQueue`, `Logger`
  (with `log_info`, `log_error`, `log_debug`), `Timestamp` and `localtime`,
  `Process`, `get_local_ip_address` and the `socket_util` helpers.
- `xopnet.h264_file.H264File`: reads frames one at a time from a raw H.264
  Annex B elementary stream, starting over at the end of the file.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example: an echo service

```python
import socket

from xopnet.event_loop import EventLoop
from xopnet.tcp_connection import TcpConnection


def on_read(conn, buffer):
    conn.send(buffer.read_all())
    return True          # returning False closes the connection


loop = EventLoop(1)
listener = socket.create_server(("0.0.0.0", 9000))

try:
    while True:
        sock, _ = listener.accept()
        conn = TcpConnection(loop.get_task_scheduler(), sock)
        conn.read_callback = on_read
finally:
    listener.close()
    loop.quit()
```

A connection without a `disconnect_callback` closes its socket itself when it
closes; with one, releasing the socket is left to that callback's owner.

## Timers and trigger events

```python
from xopnet.event_loop import EventLoop

loop = EventLoop()

def tick():
    print("tick")
    return True          # return False to stop repeating

timer_id = loop.add_timer(tick, 1000)
loop.add_trigger_event(lambda: print("runs on the scheduler thread"))
# ...
loop.remove_timer(timer_id)
loop.quit()
```

`EventLoop` is also a context manager that calls `quit()` on exit.

## Reading H.264 frames

```python
from xopnet.h264_file import H264File

with H264File() as h264:
    if h264.open("test.h264"):
        frame = h264.read_frame(500000)
        print(len(frame.data), frame.end_of_stream)
```

`read_frame` raises `ValueError` if no file is open and `EOFError` (closing
the file) when no complete frame can be found.

## What it does not do

There is no listening server class and no command-line program. The package
does not accept connections for you: open and accept the listening socket
yourself, as in the example above, and wrap each accepted socket in a
`TcpConnection`. Nor does it speak any application protocol; it moves bytes
and leaves their meaning to your callbacks.