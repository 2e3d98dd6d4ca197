"""A small reader for sectioned ``key=value`` configuration files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rhino.convert import atoi

ROOT = ""
BOOL_LIST = ("yes", "ok", "1", "true")


@dataclass
class Item:
    """One configuration entry; ``ptr`` is its section-qualified key."""

    key: str = ROOT
    value: str = ""
    ptr: str = ""

    def child(self, key: str, value: str) -> "Item":
        if self.key == ROOT:
            return Item(key=key, value=value, ptr=key)
        return Item(key=key, value=value, ptr=f"{self.key}.{key}")

    def append(self, value: str) -> None:
        self.value += value

    def text(self) -> str:
        return self.value

    def integer(self) -> int:
        return atoi(self.value)

    def ok(self) -> bool:
        return self.value.lower() in BOOL_LIST

    def __str__(self) -> str:
        return f"{self.ptr} {{\n    {self.key} : {self.value}\n}};"


class ItemMap(dict):
    """Items keyed by qualified name (case sensitive)."""

    def text(self, key: str) -> str:
        item = self.get(key)
        return item.text() if item is not None else ""

    def integer(self, key: str) -> int:
        item = self.get(key)
        return item.integer() if item is not None else 0

    def ok(self, key: str) -> bool:
        item = self.get(key)
        return item.ok() if item is not None else False

    def __str__(self) -> str:
        body = "".join(f"{item}\n" for item in self.values())
        return (
            "[############ INI Begin #########]\n"
            + body
            + "[############ INI End ############]"
        )


def parse(lines: Iterable[str]) -> ItemMap:
    """Parse configuration lines into an :class:`ItemMap`."""
    items = ItemMap()
    section = Item(key=ROOT)
    current = None
    for raw in lines:
        text = raw.rstrip("\r\n").strip(" ")
        if not text or text.startswith("#"):
            continue
        if text.startswith("[") and text.endswith("]") and len(text) >= 2:
            section.key = text[1:-1]
            current = None
            continue
        key, sep, value = text.partition("=")
        if sep:
            current = section.child(key, value)
            items[current.ptr] = current
        elif current is not None:
            current.append(text)
    return items


def unmarshal(path: str) -> ItemMap:
    """Read and parse the configuration file at ``path``."""
    with open(path, encoding="utf-8") as handle:
        items = parse(handle)
    print(items)
    return items