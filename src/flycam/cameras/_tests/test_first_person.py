from __future__ import annotations

import numpy as np
import pytest

from flycam.cameras import Camera, FirstPersonCamera, OrbitCamera
from flycam.cameras.basis import look_at
from flycam.input.events import get_document


def _camera(camera_kwargs, position=(0.0, 0.0, 5.0), pitch=0.0, yaw=270.0) -> FirstPersonCamera:  # type: ignore[no-untyped-def]
    return FirstPersonCamera(position, pitch, yaw, **camera_kwargs)


def test_initial_pose_looks_down_negative_z(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    np.testing.assert_allclose(cam.front, (0.0, 0.0, -1.0), atol=1e-9)
    expected = look_at(np.array([0.0, 0.0, 5.0]), np.array([0.0, 0.0, 4.0]), np.array([0.0, 1.0, 0.0]))
    np.testing.assert_allclose(cam.view_matrix, expected, atol=1e-9)


def test_satisfies_camera_protocol(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    assert isinstance(_camera(camera_kwargs), Camera)


def test_rejects_position_without_three_components(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(ValueError):
        FirstPersonCamera((1.0, 2.0), 0.0, 0.0, **camera_kwargs)


def test_constructor_copies_position(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    src = np.array([1.0, 2.0, 3.0])
    cam = FirstPersonCamera(src, 0.0, 0.0, **camera_kwargs)
    src[0] = 50.0

    assert cam.position[0] == 1.0


def test_builds_with_default_document_and_config(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.delenv("FLYCAM_KEYS", raising=False)

    cam = FirstPersonCamera((0.0, 0.0, 5.0), 0.0, 270.0)
    orbit = OrbitCamera((0.0, 0.0, 5.0), 0.0, 270.0)

    assert cam.document is get_document()
    expected = look_at(np.array([0.0, 0.0, 5.0]), np.array([0.0, 0.0, 4.0]), np.array([0.0, 1.0, 0.0]))
    np.testing.assert_allclose(cam.view_matrix, expected, atol=1e-9)
    np.testing.assert_allclose(orbit.view_matrix, expected, atol=1e-9)
    cam.remove_listeners()
    orbit.remove_listeners()


def test_view_matrix_reads_are_bit_identical(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=12.5, yaw=33.3)

    first = np.array(cam.view_matrix)
    second = np.array(cam.view_matrix)

    assert first.tobytes() == second.tobytes()


def test_accessors_are_read_only(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    with pytest.raises(ValueError):
        cam.view_matrix[0, 0] = 2.0
    with pytest.raises(ValueError):
        cam.position[0] = 2.0
    with pytest.raises(ValueError):
        cam.front[0] = 2.0


def test_view_matrix_is_overwritten_in_place(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    held = cam.view_matrix

    cam.set_position(1.0, 2.0, 3.0)

    expected = look_at(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 2.0]), np.array([0.0, 1.0, 0.0]))
    np.testing.assert_allclose(held, expected, atol=1e-9)


def test_set_rotation_recomputes_basis_without_clamping(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.set_rotation(90.0, 0.0)
    np.testing.assert_allclose(cam.front, (0.0, 1.0, 0.0), atol=1e-9)

    cam.set_rotation(120.0, 400.0)
    assert cam.pitch == 120.0
    assert cam.yaw == 400.0


def test_rotate_adds_to_angles(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=10.0, yaw=20.0)

    cam.rotate(5.0, -30.0)

    assert cam.pitch == pytest.approx(15.0)
    assert cam.yaw == pytest.approx(-10.0)
    front = np.array(cam.front)
    cam.set_rotation(15.0, -10.0)
    np.testing.assert_allclose(cam.front, front, atol=1e-12)


def test_translate_relative_zero_is_a_no_op(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=17.0, yaw=42.0)
    before = np.array(cam.position)
    view_before = np.array(cam.view_matrix)

    cam.translate_relative((0.0, 0.0, 0.0))

    np.testing.assert_array_equal(cam.position, before)
    np.testing.assert_allclose(cam.view_matrix, view_before, atol=1e-12)


def test_translate_relative_follows_current_basis(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.translate_relative((0.0, 0.0, 2.0))
    np.testing.assert_allclose(cam.position, (0.0, 0.0, 3.0), atol=1e-9)

    cam.translate_relative((1.0, 0.0, 0.0))
    np.testing.assert_allclose(cam.position, (-1.0, 0.0, 3.0), atol=1e-9)

    cam.translate_relative((0.0, 0.5, 0.0))
    np.testing.assert_allclose(cam.position, (-1.0, 0.5, 3.0), atol=1e-9)

    cam.set_rotation(0.0, 0.0)
    cam.translate_relative((0.0, 0.0, 1.0))
    np.testing.assert_allclose(cam.position, (0.0, 0.5, 3.0), atol=1e-9)


def test_translate_is_world_space(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=30.0, yaw=10.0)

    cam.translate((1.0, 2.0, 3.0))

    np.testing.assert_allclose(cam.position, (1.0, 2.0, 8.0), atol=1e-12)


def test_set_pose_replaces_everything(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.set_pose((4.0, 5.0, 6.0), 0.0, 0.0)

    np.testing.assert_allclose(cam.position, (4.0, 5.0, 6.0))
    np.testing.assert_allclose(cam.front, (1.0, 0.0, 0.0), atol=1e-9)
    expected = look_at(np.array([4.0, 5.0, 6.0]), np.array([5.0, 5.0, 6.0]), np.array([0.0, 1.0, 0.0]))
    np.testing.assert_allclose(cam.view_matrix, expected, atol=1e-9)


# --- Keyboard ------------------------------------------------------------------------

def test_held_forward_key_moves_along_front(camera_kwargs, document, timers, clock) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    cam.add_keyboard_listener()

    document.press_key("w")
    clock.advance(0.5)
    timers.last.fire()

    np.testing.assert_allclose(cam.position, (0.0, 0.0, 0.0), atol=1e-9)

    document.release_key("w")
    assert not timers.last.running


def test_keys_are_case_insensitive(camera_kwargs, document, timers, clock) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    cam.add_keyboard_listener()

    document.press_key("D")
    clock.advance(0.1)
    timers.last.fire()

    # d strafes toward screen right, which is world +x when looking down -z
    np.testing.assert_allclose(cam.position, (1.0, 0.0, 5.0), atol=1e-9)


def test_up_and_down_keys(camera_kwargs, document, timers, clock) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    cam.add_keyboard_listener()

    document.press_key("r")
    clock.advance(0.2)
    timers.last.fire()
    document.release_key("r")
    np.testing.assert_allclose(cam.position, (0.0, 2.0, 5.0), atol=1e-9)

    document.press_key("f")
    clock.advance(0.1)
    timers.last.fire()
    np.testing.assert_allclose(cam.position, (0.0, 1.0, 5.0), atol=1e-9)


def test_up_key_rises_along_world_up_when_pitched(camera_kwargs, document, timers, clock) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, position=(0.0, 0.0, 0.0), pitch=45.0, yaw=0.0)
    cam.add_keyboard_listener()

    document.press_key("r")
    clock.advance(0.1)
    timers.last.fire()

    np.testing.assert_allclose(cam.position, (0.0, 1.0, 0.0), atol=1e-9)


def test_translate_relative_vertical_ignores_pitch(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, position=(1.0, 2.0, 3.0), pitch=-60.0, yaw=120.0)

    cam.translate_relative((0.0, -1.5, 0.0))

    np.testing.assert_allclose(cam.position, (1.0, 0.5, 3.0), atol=1e-9)


def test_keyboard_listener_attach_is_idempotent(camera_kwargs, document) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.add_keyboard_listener()
    cam.add_keyboard_listener()

    assert len(document.events.key_press.callbacks) == 1
    assert len(document.events.key_release.callbacks) == 1


def test_remove_keyboard_listener_stops_motion(camera_kwargs, document, timers, clock) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    cam.add_keyboard_listener()
    document.press_key("w")
    timer = timers.last

    cam.remove_keyboard_listener()
    clock.advance(1.0)
    timer.fire()

    assert not timer.running
    assert len(document.events.key_press.callbacks) == 0
    np.testing.assert_allclose(cam.position, (0.0, 0.0, 5.0))

    document.release_key("w")
    document.press_key("w")
    assert not timer.running


def test_remove_listeners_without_attach_is_safe(camera_kwargs) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.remove_keyboard_listener()
    cam.remove_mouse_listener()
    cam.remove_listeners()


# --- Mouse look ----------------------------------------------------------------------

def test_mouse_press_toggles_pointer_lock(camera_kwargs, document, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)
    cam.add_mouse_listener(surface)

    surface.press()
    assert document.pointer_lock_element is surface

    surface.press()
    assert document.pointer_lock_element is None


def test_pointer_movement_rotates_while_locked(camera_kwargs, document, surface, config) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=0.0, yaw=0.0)
    cam.add_mouse_listener(surface)

    document.move_pointer(80.0, 0.0)
    assert cam.yaw == 0.0

    surface.press()
    document.move_pointer(80.0, -60.0)

    assert cam.yaw == pytest.approx(80.0 / 800.0 * config.mouse_rotate_rate)
    assert cam.pitch == pytest.approx(60.0 / 600.0 * config.mouse_rotate_rate)
    assert cam.pitch > 0.0


def test_pointer_movement_ignored_after_unlock(camera_kwargs, document, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=0.0, yaw=0.0)
    cam.add_mouse_listener(surface)
    surface.press()
    surface.press()

    document.move_pointer(50.0, 50.0)

    assert (cam.pitch, cam.yaw) == (0.0, 0.0)


def test_lock_lost_elsewhere_stops_mouse_look(camera_kwargs, document, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=0.0, yaw=0.0)
    cam.add_mouse_listener(surface)
    surface.press()

    document.exit_pointer_lock()
    document.move_pointer(50.0, 50.0)

    assert (cam.pitch, cam.yaw) == (0.0, 0.0)
    assert len(document.events.pointer_move.callbacks) == 0


def test_remove_mouse_listener_releases_lock(camera_kwargs, document, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs, pitch=0.0, yaw=0.0)
    cam.add_mouse_listener(surface)
    surface.press()

    cam.remove_mouse_listener()
    surface.press()
    document.move_pointer(10.0, 10.0)

    assert document.pointer_lock_element is None
    assert (cam.pitch, cam.yaw) == (0.0, 0.0)
    assert len(surface.events.mouse_press.callbacks) == 0


def test_mouse_listener_attach_is_idempotent(camera_kwargs, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.add_mouse_listener(surface)
    cam.add_mouse_listener(surface)

    assert len(surface.events.mouse_press.callbacks) == 1


def test_add_listeners_attaches_both(camera_kwargs, document, surface) -> None:  # type: ignore[no-untyped-def]
    cam = _camera(camera_kwargs)

    cam.add_listeners(surface)
    assert len(document.events.key_press.callbacks) == 1
    assert len(surface.events.mouse_press.callbacks) == 1

    cam.remove_listeners()
    assert len(document.events.key_press.callbacks) == 0
    assert len(surface.events.mouse_press.callbacks) == 0


def test_two_cameras_own_their_handlers(camera_kwargs, document) -> None:  # type: ignore[no-untyped-def]
    a = _camera(camera_kwargs)
    b = _camera(camera_kwargs)
    a.add_keyboard_listener()
    b.add_keyboard_listener()

    a.remove_keyboard_listener()

    assert len(document.events.key_press.callbacks) == 1
    assert b.keyboard.attached
