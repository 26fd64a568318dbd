import pytest

from pongkernel.handlers import DecodedKey, HandlerTable, KeyCode


def test_builder_methods_return_same_table():
    table = HandlerTable()
    assert table.timer(lambda: None) is table
    assert table.keyboard(lambda key: None) is table
    assert table.startup(lambda: None) is table
    assert table.cpu_loop(lambda: None) is table


def test_handle_timer_calls_timer_handler():
    calls = []
    table = HandlerTable().timer(lambda: calls.append("tick"))
    table.handle_timer()
    table.handle_timer()
    assert calls == ["tick", "tick"]


def test_handle_timer_without_handler_leaves_keyboard_alone():
    keys = []
    table = HandlerTable().keyboard(keys.append)
    table.handle_timer()
    assert keys == []


def test_handle_keyboard_passes_key():
    keys = []
    table = HandlerTable().keyboard(keys.append)
    key = DecodedKey.raw(KeyCode.ARROW_UP)
    table.handle_keyboard(key)
    assert keys == [key]


def test_start_runs_startup_install_then_loop():
    events = []
    installed = []

    def install(table):
        installed.append(table)
        events.append("install")

    def loop():
        events.append("loop")
        return "looped"

    table = (
        HandlerTable()
        .startup(lambda: events.append("startup"))
        .cpu_loop(loop)
    )
    result = table.start(install)
    assert events == ["startup", "install", "loop"]
    assert installed == [table]
    assert result == "looped"


def test_start_without_startup_handler():
    events = []
    table = HandlerTable().cpu_loop(lambda: events.append("loop"))
    table.start(lambda t: events.append("install"))
    assert events == ["install", "loop"]


def test_loop_exception_propagates():
    class Halt(Exception):
        pass

    def loop():
        raise Halt

    table = HandlerTable().cpu_loop(loop)
    with pytest.raises(Halt):
        table.start(lambda t: None)


def test_decoded_key_constructors():
    raw = DecodedKey.raw(KeyCode.ARROW_DOWN)
    assert raw.code is KeyCode.ARROW_DOWN
    assert raw.char is None
    text = DecodedKey.unicode(" ")
    assert text.char == " "
    assert text.code is None
    assert DecodedKey.unicode(" ") == text


def test_decoded_key_rejects_multiple_characters():
    with pytest.raises(ValueError):
        DecodedKey.unicode("ab")


def test_decoded_key_needs_exactly_one_field():
    with pytest.raises(ValueError):
        DecodedKey()
    with pytest.raises(ValueError):
        DecodedKey(code=KeyCode.ENTER, char="x")