import io
import math
import threading

import pytest

from gravsim.body import Body
from gravsim.console import CommandError, Console, split_arguments
from gravsim.universe import Universe
from gravsim.values import RADIUS_SCALE, SCALE
from gravsim.window import Window


def make_console(text=""):
    universe = Universe()
    window = Window()
    out = io.StringIO()
    console = Console(universe, window, io.StringIO(text), out)
    return console, universe, window, out


def add_earth(universe):
    body = Body(name="earth", radius=2.0, x_vel=3.0, y_vel=4.0)
    universe.add_body(body)
    return body


def test_split_arguments_on_spaces():
    assert split_arguments("set body earth") == ["set", "body", "earth"]


def test_split_arguments_empty_line():
    assert split_arguments("") == [""]


def test_split_arguments_keeps_empty_between_double_spaces():
    assert split_arguments("a  b") == ["a", "", "b"]


def test_split_arguments_stops_at_line_break():
    assert split_arguments("add\r\n") == ["add"]
    assert split_arguments("a\nb") == ["a"]


def test_help_lists_commands():
    console, _, _, out = make_console()
    console.run_command(["help"])
    assert out.getvalue().startswith("List of commands:\n")
    assert "quit - end program\n" in out.getvalue()


def test_help_with_argument_is_rejected():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="Found: 2, Expected: 1"):
        console.run_command(["help", "me"])


def test_unknown_command():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="command not recognized"):
        console.run_command(["fly"])


ADD_INPUT = "probe\n1 2 3\n4 5 6\n7\n8\n0.5\n0.1 0.2 0.3\n"


def test_add_body_from_prompts():
    console, universe, _, out = make_console(ADD_INPUT)
    console.run_command(["add"])
    body = universe.bodies["probe"]
    assert body.x == pytest.approx(1 * SCALE)
    assert body.z_vel == pytest.approx(6 * SCALE)
    assert body.radius == pytest.approx(7 * SCALE * RADIUS_SCALE)
    assert body.mass == pytest.approx(8 * SCALE)
    assert body.luminosity == pytest.approx(0.5)
    assert (body.red, body.green, body.blue) == pytest.approx((0.1, 0.2, 0.3))
    assert "Added body: probe\n" in out.getvalue()


def test_added_body_reads_back_through_get():
    console, _, _, out = make_console(ADD_INPUT)
    console.run_command(["add"])
    console.run_command(["get", "body", "probe"])
    text = out.getvalue()
    assert "Coordinates: 1 2 3\n" in text
    assert "Directional Velocities: 4 5 6\n" in text
    assert "Radius: 7\n" in text
    assert "Mass: 8\n" in text


def test_add_body_failed_conversion_aborts():
    console, universe, _, _ = make_console("probe\nx y z\n")
    with pytest.raises(CommandError, match="Failed conversion.") as info:
        console.run_command(["add"])
    assert "Aborting command." in str(info.value)
    assert universe.bodies == {}


def test_add_body_wrong_coordinate_count():
    console, universe, _, _ = make_console("probe\n1 2\n")
    with pytest.raises(CommandError, match="Found: 2, Expected: 3"):
        console.run_command(["add"])
    assert universe.bodies == {}


def test_add_body_luminosity_out_of_range():
    console, universe, _, _ = make_console("probe\n1 2 3\n4 5 6\n7\n8\n1.5\n")
    with pytest.raises(CommandError, match="Out of range."):
        console.run_command(["add"])
    assert "probe" not in universe.bodies


def test_add_body_empty_name_rejected():
    console, universe, _, _ = make_console("\n1 2 3\n4 5 6\n7\n8\n0.5\n0.1 0.2 0.3\n")
    with pytest.raises(CommandError, match="Name must not be empty"):
        console.run_command(["add"])
    assert universe.bodies == {}


def test_clear_removes_all_bodies():
    console, universe, _, _ = make_console()
    add_earth(universe)
    console.run_command(["clear"])
    assert universe.bodies == {}


def test_remove_named_body_and_ignore_unknown():
    console, universe, _, _ = make_console()
    add_earth(universe)
    console.run_command(["remove", "mars"])
    assert list(universe.bodies) == ["earth"]
    console.run_command(["remove", "earth"])
    assert universe.bodies == {}


def test_lock_unknown_body():
    console, _, window, _ = make_console()
    with pytest.raises(CommandError, match="Cannot lock camera to this body"):
        console.run_command(["lock", "mars"])
    assert window.camera_locked is False


def test_lock_and_unlock_camera():
    console, universe, window, out = make_console()
    body = add_earth(universe)
    console.run_command(["lock", "earth"])
    assert window.camera.body_name == "earth"
    assert window.camera.body_distance == pytest.approx(body.radius * 5)
    console.run_command(["unlock"])
    assert window.camera_locked is False
    assert out.getvalue() == "locked\ncamera unlocked\n"


def test_unlock_when_not_locked():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="camera not locked"):
        console.run_command(["unlock"])


def test_pause_and_resume():
    console, universe, _, out = make_console()
    console.run_command(["pause"])
    console.run_command(["pause"])
    assert universe.paused is True
    console.run_command(["unpause"])
    console.run_command(["resume"])
    assert universe.paused is False
    assert out.getvalue() == "paused\nalready paused\nresumed\nalready running\n"


def test_quit_sets_event():
    console, _, _, _ = make_console()
    console.run_command(["quit"])
    assert console.quit_event.is_set()


def test_get_settings():
    console, universe, _, out = make_console()
    universe.c_scaling = 2.0
    console.run_command(["get", "cScaling"])
    console.run_command(["get", "isPaused"])
    assert out.getvalue() == "cScaling = 2\nisPaused = 0\n"


def test_get_prompts_for_selection():
    console, _, _, out = make_console("tickSpeed\n")
    console.run_command(["get"])
    assert out.getvalue().startswith("choices: bodies\n")
    assert out.getvalue().endswith("tickSpeed = 60\n")


def test_get_bodies_lists_names():
    console, universe, _, out = make_console()
    add_earth(universe)
    universe.add_body(Body(name="AA"))
    console.run_command(["get", "bodies"])
    assert out.getvalue() == "AA\nearth\n"


def test_get_unrecognized():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="unrecognized: nothing"):
        console.run_command(["get", "nothing"])


def test_get_too_many_arguments():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="Found: 4, Expected: 1 to 3"):
        console.run_command(["get", "body", "earth", "extra"])


def test_get_camera_shows_lock():
    console, universe, window, out = make_console()
    add_earth(universe)
    window.lock_camera("earth", universe.bodies["earth"])
    console.run_command(["get", "camera"])
    assert "Angles: theta:90 phi:90 psi:0\n" in out.getvalue()
    assert "Locked Body: earth\n" in out.getvalue()


def test_set_tick_speed():
    console, universe, _, _ = make_console()
    console.run_command(["set", "tickSpeed", "100"])
    assert universe.tick_speed == 100


def test_set_value_prompted():
    console, universe, _, _ = make_console("3\n")
    console.run_command(["set", "gravityScaling"])
    assert universe.gravity_scaling == 3


def test_set_parses_leading_number():
    console, universe, _, _ = make_console()
    console.run_command(["set", "cScaling", "2.5abc"])
    assert universe.c_scaling == 2.5


def test_set_rejects_invalid_time_scaling():
    console, universe, _, _ = make_console()
    before = universe.time_scaling
    with pytest.raises(CommandError, match="aborting command"):
        console.run_command(["set", "timeScaling", "-1"])
    assert universe.time_scaling == before


def test_set_too_many_arguments():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="too many arguments"):
        console.run_command(["set", "cScaling", "1", "2"])


def test_set_unrecognized_setting():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="unrecognized: warp"):
        console.run_command(["set", "warp", "1"])


def test_set_body_mass():
    console, universe, _, _ = make_console()
    add_earth(universe)
    console.run_command(["set", "body", "earth", "mass", "5"])
    assert universe.bodies["earth"].mass == pytest.approx(5 * SCALE)


def test_set_body_velocity_keeps_direction():
    console, universe, _, _ = make_console()
    body = add_earth(universe)
    console.run_command(["set", "body", "earth", "velocity", "10"])
    speed = math.hypot(body.x_vel, body.y_vel, body.z_vel)
    assert speed == pytest.approx(10 * SCALE)
    assert body.x_vel / body.y_vel == pytest.approx(3.0 / 4.0)


def test_set_body_properties_prompted():
    console, universe, _, _ = make_console("earth\ncoordinates\n1 2 3\n")
    add_earth(universe)
    console.run_command(["set", "body"])
    body = universe.bodies["earth"]
    assert (body.x, body.y, body.z) == pytest.approx((1 * SCALE, 2 * SCALE, 3 * SCALE))


def test_set_body_color_out_of_range():
    console, universe, _, _ = make_console()
    add_earth(universe)
    with pytest.raises(CommandError, match="out of range"):
        console.run_command(["set", "body", "earth", "color", "0.5", "2", "0.5"])
    assert universe.bodies["earth"].green == 1.0


def test_set_unknown_body():
    console, _, _, _ = make_console()
    with pytest.raises(CommandError, match="aborting command"):
        console.run_command(["set", "body", "mars", "mass", "1"])


def test_set_camera_coordinates():
    console, _, window, _ = make_console()
    console.run_command(["set", "camera", "coordinates", "5", "6", "7"])
    camera = window.camera
    assert (camera.x, camera.y, camera.z) == pytest.approx((5 * SCALE, 6 * SCALE, 7 * SCALE))


def test_set_camera_angles_wrap():
    console, _, window, _ = make_console()
    console.run_command(["set", "camera", "angles", "370", "45", "0"])
    assert window.camera.theta == pytest.approx(10.0)
    assert window.camera.phi == pytest.approx(45.0)


def test_set_camera_negative_speed_rejected():
    console, _, window, _ = make_console()
    before = window.camera_speed
    with pytest.raises(CommandError):
        console.run_command(["set", "camera", "moveSpeed", "-1"])
    assert window.camera_speed == before


def test_run_processes_lines_until_quit():
    console, universe, _, out = make_console("pause\nbogus\nquit\nresume\n")
    console.run(threading.Event())
    assert universe.paused is True
    assert console.quit_event.is_set()
    assert out.getvalue() == "paused\ncommand not recognized\n"


def test_run_stops_at_end_of_input():
    console, universe, _, _ = make_console("pause\n")
    console.run(threading.Event())
    assert universe.paused is True
    assert not console.quit_event.is_set()


def test_run_honours_stop_event():
    console, universe, _, out = make_console("pause\n")
    stop = threading.Event()
    stop.set()
    console.run(stop)
    assert universe.paused is False
    assert out.getvalue() == ""