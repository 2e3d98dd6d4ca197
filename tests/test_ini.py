import pytest

from rhino import ini

CONF = """# server settings
top=1
[server]
host=localhost
port=8080
debug=Yes
motd=hello
 world
[db]
orphan line
name=test
expr=a=b
"""


@pytest.fixture
def conf_path(tmp_path):
    path = tmp_path / "server.conf"
    path.write_text(CONF, encoding="utf-8")
    return path


def test_unmarshal_reads_sections(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert items.text("server.host") == "localhost"
    assert items.integer("server.port") == 8080
    assert items.ok("server.debug") is True
    assert items.text("db.name") == "test"


def test_root_keys_have_no_prefix(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert items.integer("top") == 1


def test_continuation_lines_append(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert items.text("server.motd") == "helloworld"


def test_value_keeps_later_equals(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert items.text("db.expr") == "a=b"


def test_missing_keys_defaults(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert items.text("nope") == ""
    assert items.integer("nope") == 0
    assert items.ok("nope") is False


def test_comments_and_orphans_ignored(conf_path):
    items = ini.unmarshal(str(conf_path))
    assert sorted(items) == sorted(
        ["top", "server.host", "server.port", "server.debug", "server.motd", "db.name", "db.expr"]
    )


def test_item_string_form():
    item = ini.Item(key="server").child("host", "localhost")
    assert str(item) == "server.host {\n    host : localhost\n};"


def test_non_numeric_integer_is_zero():
    items = ini.parse(["x=abc"])
    assert items.integer("x") == 0
    assert items.ok("x") is False


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        ini.unmarshal("./does-not-exist.conf")