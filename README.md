# rhino

Building blocks for message-driven services, using only the standard library:

- **mailboxes** (`rhino.mailbox`): a process that queues posted messages and
  hands them one at a time to a broker, on a dispatcher of your choice;
- **process interfaces** (`rhino.process`): dispatchers, brokers and
  statistics hooks;
- **message envelopes** (`rhino.message`) and the `Started`, `Stopped`,
  `Restart` and `Failure` life-cycle messages;
- **binary buffers** (`rhino.buffer`) with big- or little-endian fixed-width
  integers and length-prefixed strings, and a **codec** (`rhino.codec`) that
  writes and reads dataclasses, lists and scalars;
- an **event bus** (`rhino.event`) and **synchronous request channels**
  (`rhino.syncmsg`);
- **structured logging** (`rhino.log`, `rhino.logfield`);
- an **INI reader** (`rhino.ini`) and time, conversion and timing helpers
  (`rhino.timeutil`, `rhino.convert`, `rhino.sysutil`).

## Installation

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Mailboxes

```python
from rhino import mailbox, process

class Printer(process.UntypedBroker):
    def dispatch_message(self, data):
        print("got", data)

box = mailbox.new(nonblocking=True)          # room for 10 messages
box.on_register(process.new_default_dispatcher(), Printer())
box.start()
box.post("hello")
box.close()
```

`mailbox.new` makes a mailbox with room for 10 messages; `make_buffer(n)`
chooses the size, and `unbounded(...)` returns a factory. A non-blocking
mailbox raises `mailbox.OverfullError` when full; posting to a closed mailbox
raises `RuntimeError`. The broker's `pre_start` runs before the first message
and `post_stop` after the mailbox is closed and drained.

## Buffers and the codec

```python
from dataclasses import dataclass
from rhino import buffer, codec

buf = buffer.new()
buf.write_int(42)
buf.write_str("name")
buf.seek_begin()
print(buf.read_int(), buf.read_str())        # 42 name

@dataclass
class Point:
    x: codec.Int16 = codec.Int16(0)
    y: int = 0                               # plain int is 32 bits
    label: str = ""

out = buffer.new()
codec.write_obj(out, Point(codec.Int16(3), 4, "a"))
out.seek_begin()
print(codec.read_obj(out, Point))
```

Reading past the end of a buffer raises `EOFError`; a value the codec cannot
encode or decode raises `TypeError`.

## Events

```python
from rhino.event import ObserverSet

events = ObserverSet()
sub = events.subscribe(lambda evt: print(evt.topic, evt.message), 1)
events.publish(1, "payload")
sub.unsubscribe()
```

Publishing to a topic without subscribers raises `KeyError`.

## Synchronous channels

```python
import threading
from rhino import syncmsg

ch = syncmsg.channel()
conn = ch.accept()
threading.Thread(target=ch.commit, args=(conn.sync_id, "reply")).start()
print(ch.read(conn, 1.0))                    # "reply", or TimeoutError
```

## Logging

```python
from rhino import log, logfield

logger = log.new(log.Level.DEBUG, "[APP]", logfield.integer("pid", 7))
logger.info("ready", logfield.string("addr", ":8088"))
```

Events go to every subscriber registered with `log.subscribe`; a default
subscriber writes them to standard error, one line per event, formatted by
`log.format_event`.

## INI files

```python
from rhino import ini

items = ini.unmarshal("server.conf")
port = items.integer("server.port")
debug = items.ok("server.debug")
```

Keys under a `[section]` header are addressed as `section.key`; lines
starting with `#` are comments. `ini.parse` takes any iterable of lines.

## What this package does not do

There is no networking here: no TCP server or listener, no framed socket
streams, no packet format and no remote processes. There is also no actor
tree or actor context; `rhino.message` provides only the envelopes and
life-cycle messages. There is no command-line program.