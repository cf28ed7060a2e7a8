import io

from todolist.theme import HEX_DONE_DEFAULT, PLAIN, Theme, load_palette


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


def make(environ, stream=None, **kwargs):
    kwargs.setdefault("env_file", None)
    return Theme.from_env(environ, stream=stream or io.StringIO(), **kwargs)


def test_plain_theme_leaves_text_alone():
    assert PLAIN.color("x", PLAIN.fg("#ffffff"), PLAIN.bold) == "x"
    assert PLAIN.ok("done") == "done"


def test_disabled_when_not_a_tty():
    assert make({}).enabled is False


def test_enabled_on_tty():
    assert make({}, stream=FakeTTY()).enabled is True


def test_force_color_env():
    assert make({"FORCE_COLOR": "1"}).enabled is True
    assert make({"FORCE_COLOR": "off"}).enabled is False


def test_no_color_wins_over_tty_and_force_color():
    assert make({"NO_COLOR": ""}, stream=FakeTTY()).enabled is False
    assert make({"NO_COLOR": "1", "FORCE_COLOR": "1"}).enabled is False


def test_explicit_flag_wins():
    assert make({"NO_COLOR": "1"}, force=True).enabled is True
    assert make({}, stream=FakeTTY(), force=False).enabled is False


def test_truecolor_detection():
    theme = make({"COLORTERM": "truecolor"}, force=True)
    assert theme.truecolor is True
    assert theme.fg("#476EAE") == "\033[38;2;71;110;174m"


def test_256_color_fallback():
    theme = make({}, force=True)
    assert theme.truecolor is False
    assert theme.fg("#476EAE") == "\033[38;5;67m"


def test_color_wraps_and_resets():
    theme = Theme(enabled=True)
    assert theme.color("hi", "\033[1m") == "\033[1mhi\033[0m"


def test_palette_from_environment_and_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TODO_DONE=#112233\nTODO_PENDING=00ff00\nTODO_ALERT=nothex\n")
    palette = load_palette({"TODO_PENDING": "#abcdef"}, env_file)
    assert palette["TODO_PENDING"] == "#abcdef"
    assert palette["TODO_DONE"] == "#112233"
    assert palette["TODO_ALERT"] != "nothex"


def test_invalid_env_value_falls_back_to_default():
    palette = load_palette({"TODO_DONE": "green"}, None)
    assert palette["TODO_DONE"] == HEX_DONE_DEFAULT


def test_from_env_reads_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TODO_PRIMARY=#010203\n")
    theme = Theme.from_env({}, stream=io.StringIO(), env_file=env_file)
    assert theme.primary == "#010203"
