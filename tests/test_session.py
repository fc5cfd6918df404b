"""Tests for Session against the mock WDA server."""

from __future__ import annotations

import base64
import io
import json
from unittest.mock import patch

import pytest

from iphone_wda.core import (
    AppLaunchOption,
    AppRunState,
    BatteryState,
    ContentType,
    DecodeError,
    DeviceButton,
    Element,
    InvalidArgument,
    NoSuchElement,
    ServerError,
    SourceOption,
)
from iphone_wda.mock import ELEMENT_IDS


# ---------------------------------------------------------------------------
# Session management
# ---------------------------------------------------------------------------


class TestSessionManagement:
    def test_url_and_id(self, session, mock_wda):
        assert session.url == mock_wda.session_url
        assert session.session_id == mock_wda.session_id

    def test_get_active_session(self, session, mock_wda):
        info = session.get_active_session()
        assert info.session_id == mock_wda.session_id
        assert info.bundle_id == "com.apple.Preferences"
        assert info.device == "iphone"
        assert info.sdk_version == "17.4"

    def test_get_active_session_bad_shape(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath(), ["not", "a", "session"])
        with pytest.raises(DecodeError):
            session.get_active_session()

    def test_delete_session(self, session, mock_wda, spath):
        session.delete_session()
        assert mock_wda.last_request()["method"] == "DELETE"
        assert mock_wda.last_request()["path"] == spath()

    def test_delete_session_twice(self, session, mock_wda, spath):
        session.delete_session()
        mock_wda.set_error("DELETE", spath(), "invalid session id", "Session does not exist", 404)
        session.delete_session()
        assert [r["method"] for r in mock_wda.requests] == ["DELETE", "DELETE"]

    def test_delete_session_other_error_propagates(self, session, mock_wda, spath):
        mock_wda.set_error("DELETE", spath(), "unknown error", "boom")
        with pytest.raises(ServerError) as exc:
            session.delete_session()
        assert exc.value.error == "unknown error"


# ---------------------------------------------------------------------------
# Apps
# ---------------------------------------------------------------------------


class TestApps:
    def test_launch_default_waits_for_quiescence(self, session, mock_wda, spath):
        session.app_launch("com.apple.Preferences")
        default_body = mock_wda.last_request("POST", spath("/wda/apps/launch"))["body"]

        session.app_launch(
            "com.apple.Preferences",
            AppLaunchOption().set_should_wait_for_quiescence(True),
        )
        explicit_body = mock_wda.last_request("POST", spath("/wda/apps/launch"))["body"]

        assert default_body == explicit_body == {
            "bundleId": "com.apple.Preferences",
            "shouldWaitForQuiescence": True,
        }

    def test_launch_with_arguments_and_environment(self, session, mock_wda, spath):
        option = (
            AppLaunchOption()
            .set_should_wait_for_quiescence(False)
            .set_arguments(["-AppleLanguages", "(en)"])
            .set_environment({"DEBUG": "1"})
        )
        session.app_launch("com.example.app", option)
        assert mock_wda.last_request("POST", spath("/wda/apps/launch"))["body"] == {
            "bundleId": "com.example.app",
            "shouldWaitForQuiescence": False,
            "arguments": ["-AppleLanguages", "(en)"],
            "environment": {"DEBUG": "1"},
        }

    def test_launch_unknown_bundle_is_passed_through(self, session, mock_wda, spath):
        mock_wda.set_error(
            "POST", spath("/wda/apps/launch"), "unknown error",
            "Application com.nope is not installed",
        )
        with pytest.raises(ServerError) as exc:
            session.app_launch("com.nope")
        assert "not installed" in str(exc.value)
        assert mock_wda.last_request()["body"]["bundleId"] == "com.nope"

    def test_terminate(self, session, mock_wda, spath):
        assert session.app_terminate("com.apple.Preferences") is True
        assert mock_wda.last_request()["body"] == {"bundleId": "com.apple.Preferences"}

        mock_wda.set_value("POST", spath("/wda/apps/terminate"), False)
        assert session.app_terminate("com.apple.Preferences") is False

    def test_activate(self, session, mock_wda, spath):
        session.app_activate("com.apple.mobilesafari")
        req = mock_wda.last_request()
        assert req["path"] == spath("/wda/apps/activate")
        assert req["body"] == {"bundleId": "com.apple.mobilesafari"}

    def test_deactivate(self, session, mock_wda, spath):
        session.app_deactivate()
        assert mock_wda.last_request("POST", spath("/wda/deactivateApp"))["body"] == {}
        session.app_deactivate(3.5)
        assert mock_wda.last_request("POST", spath("/wda/deactivateApp"))["body"] == {"duration": 3.5}

    @pytest.mark.parametrize("code,state", [
        (1, AppRunState.NOT_RUNNING),
        (2, AppRunState.RUNNING_BACK),
        (4, AppRunState.RUNNING_FRONT),
    ])
    def test_state(self, session, mock_wda, spath, code, state):
        mock_wda.set_value("POST", spath("/wda/apps/state"), code)
        assert session.app_state("com.apple.Preferences") is state
        assert mock_wda.last_request()["body"] == {"bundleId": "com.apple.Preferences"}

    @pytest.mark.parametrize("value", [3, 0, "4", True, None])
    def test_state_rejects_unknown_codes(self, session, mock_wda, spath, value):
        mock_wda.set_value("POST", spath("/wda/apps/state"), value)
        with pytest.raises(DecodeError):
            session.app_state("com.apple.Preferences")

    def test_active_app_info(self, session):
        info = session.active_app_info()
        assert info.bundle_id == "com.apple.Preferences"
        assert info.pid == 3573

    def test_active_apps_list(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath("/wda/apps/list"), [
            {"pid": 3573, "bundleId": "com.apple.DocumentsApp"},
            {"pid": 3311, "bundleId": "com.apple.reminders"},
        ])
        apps = session.active_apps_list()
        assert [(a.pid, a.bundle_id) for a in apps] == [
            (3573, "com.apple.DocumentsApp"),
            (3311, "com.apple.reminders"),
        ]
        assert json.loads(str(apps[1])) == {"pid": 3311, "bundleId": "com.apple.reminders"}

    def test_active_apps_list_empty_is_not_an_error(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath("/wda/apps/list"), [])
        assert session.active_apps_list() == []


# ---------------------------------------------------------------------------
# Touch and keys
# ---------------------------------------------------------------------------


class TestGestures:
    def test_tap(self, session, mock_wda, spath):
        session.tap(200, 450)
        req = mock_wda.last_request()
        assert req["path"] == spath("/wda/tap/0")
        assert req["body"] == {"x": 200, "y": 450}

    def test_double_tap(self, session, mock_wda, spath):
        session.double_tap(10, 20)
        assert mock_wda.last_request("POST", spath("/wda/doubleTap"))["body"] == {"x": 10, "y": 20}

    def test_touch_and_hold_default_duration(self, session, mock_wda, spath):
        session.touch_and_hold(10, 20)
        assert mock_wda.last_request("POST", spath("/wda/touchAndHold"))["body"] == {
            "x": 10, "y": 20, "duration": 1.0,
        }

    def test_touch_and_hold_duration(self, session, mock_wda, spath):
        session.touch_and_hold(10, 20, 2.5)
        assert mock_wda.last_request("POST", spath("/wda/touchAndHold"))["body"]["duration"] == 2.5

    def test_tap_server_error(self, session, mock_wda, spath):
        mock_wda.set_error("POST", spath("/wda/tap/0"), "invalid element state", "Out of bounds")
        with pytest.raises(ServerError) as exc:
            session.tap(-1, -1)
        assert exc.value.error == "invalid element state"

    def test_send_keys(self, session, mock_wda, spath):
        session.send_keys("hi\n")
        assert mock_wda.last_request("POST", spath("/wda/keys"))["body"] == {"value": ["h", "i", "\n"]}


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


class TestFindElements:
    def test_find_elements(self, session, mock_wda, spath):
        elements = session.find_elements("class name", "XCUIElementTypeButton")
        assert len(elements) == 2
        for element in elements:
            assert isinstance(element, Element)
            assert element.url.startswith(session.url + "/")
        assert [e.id for e in elements] == ELEMENT_IDS
        assert mock_wda.last_request()["body"] == {"using": "class name", "value": "XCUIElementTypeButton"}

    def test_find_elements_empty(self, session, mock_wda, spath):
        mock_wda.set_value("POST", spath("/elements"), [])
        with pytest.raises(NoSuchElement):
            session.find_elements("name", "missing")

    def test_find_elements_without_id(self, session, mock_wda, spath):
        mock_wda.set_value("POST", spath("/elements"), [{"foo": "bar"}])
        with pytest.raises(DecodeError):
            session.find_elements("name", "x")

    def test_find_elements_w3c_key(self, session, mock_wda, spath):
        mock_wda.set_value("POST", spath("/elements"), [
            {"element-6066-11e4-a52e-4f735466cecf": "W3C-1"},
        ])
        [element] = session.find_elements("name", "x")
        assert element.url == f"{session.url}/element/W3C-1"

    def test_find_element_returns_first(self, session, mock_wda, spath):
        element = session.find_element("name", "General")
        assert element.id == ELEMENT_IDS[0]
        assert element.url == f"{session.url}/element/{ELEMENT_IDS[0]}"
        req = mock_wda.last_request()
        assert req["path"] == spath("/element")
        assert req["body"] == {"using": "name", "value": "General"}

    def test_find_element_no_id(self, session, mock_wda, spath):
        mock_wda.set_value("POST", spath("/element"), {})
        with pytest.raises(NoSuchElement):
            session.find_element("name", "missing")

    def test_find_element_server_no_such_element(self, session, mock_wda, spath):
        mock_wda.set_error("POST", spath("/element"), "no such element", "unable to find", status=404)
        with pytest.raises(NoSuchElement) as exc:
            session.find_element("name", "missing")
        assert isinstance(exc.value.__cause__, ServerError)

    def test_find_element_other_server_error(self, session, mock_wda, spath):
        mock_wda.set_error("POST", spath("/element"), "invalid selector", "bad xpath", status=400)
        with pytest.raises(ServerError):
            session.find_element("xpath", "//[")


# ---------------------------------------------------------------------------
# Device state
# ---------------------------------------------------------------------------


class TestDeviceState:
    def test_device_info(self, session):
        info = session.device_info()
        assert info.name == "Mock iPhone"
        assert info.is_simulator is False
        assert json.loads(str(info))["uuid"] == info.uuid

    def test_battery_info(self, session, mock_wda, spath):
        mock_wda.set_reply("GET", spath("/wda/batteryInfo"), 200, {"value": {"level": 0.92, "state": 2}})
        info = session.battery_info()
        assert info.level == pytest.approx(0.92)
        assert info.state is BatteryState.CHARGING
        assert str(info.state) == "Plugged in, less than 100%"

    def test_window_size(self, session, mock_wda, spath):
        mock_wda.set_reply("GET", spath("/window/size"), 200, {"value": {"width": 812, "height": 375}})
        size = session.window_size()
        assert (size.width, size.height) == (812, 375)

    def test_screen(self, session):
        screen = session.screen()
        assert screen.scale == 3.0
        assert json.loads(str(screen.status_bar_size)) == {
            "width": screen.status_bar_size.width,
            "height": screen.status_bar_size.height,
        }

    def test_scale_and_status_bar_size(self, session):
        assert session.scale() == 3.0
        assert (session.status_bar_size().width, session.status_bar_size().height) == (375, 44)

    def test_scale_propagates_errors(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath("/wda/screen"), "garbage")
        with pytest.raises(DecodeError):
            session.scale()
        with pytest.raises(DecodeError):
            session.status_bar_size()

    def test_lock_state(self, session, mock_wda, spath):
        assert session.is_locked() is False
        session.lock()
        assert mock_wda.last_request()["path"] == spath("/wda/lock")
        session.unlock()
        assert mock_wda.last_request()["path"] == spath("/wda/unlock")

    def test_unlock_timeout(self, session, mock_wda, spath):
        mock_wda.set_error("POST", spath("/wda/unlock"), "unknown error", "Timeout while unlocking")
        with pytest.raises(ServerError):
            session.unlock()


# ---------------------------------------------------------------------------
# Pasteboard
# ---------------------------------------------------------------------------


class TestPasteboard:
    def test_plaintext(self, session, mock_wda, spath):
        session.set_pasteboard_for_plaintext("hello")
        body = mock_wda.last_request("POST", spath("/wda/setPasteboard"))["body"]
        assert body["contentType"] == "plaintext"
        assert base64.b64decode(body["content"], validate=True) == b"hello"

    def test_image(self, session, mock_wda, spath, tmp_path):
        data = b"\x89PNG\r\n\x1a\n" + bytes(range(256))
        path = tmp_path / "shot.png"
        path.write_bytes(data)
        session.set_pasteboard_for_image(str(path))
        body = mock_wda.last_request("POST", spath("/wda/setPasteboard"))["body"]
        assert body["contentType"] == "image"
        assert base64.b64decode(body["content"]) == data

    def test_image_missing_file(self, session, mock_wda, tmp_path):
        with pytest.raises(OSError):
            session.set_pasteboard_for_image(str(tmp_path / "missing.png"))
        assert mock_wda.requests == []

    def test_image_file_closed_on_read_error(self, session, mock_wda):
        class FailingFile(io.BytesIO):
            def read(self, *args):
                raise OSError("read failed")

        failing = FailingFile(b"x")
        with patch("iphone_wda.core.session.open", return_value=failing, create=True):
            with pytest.raises(OSError):
                session.set_pasteboard_for_image("shot.png")
        assert failing.closed
        assert mock_wda.requests == []

    def test_url_uses_urlsafe_base64(self, session, mock_wda, spath):
        url = "https://example.com/?q=a>b"
        session.set_pasteboard_for_url(url)
        body = mock_wda.last_request("POST", spath("/wda/setPasteboard"))["body"]
        assert body["contentType"] == "url"
        assert base64.urlsafe_b64decode(body["content"]) == url.encode()

    def test_set_pasteboard_explicit(self, session, mock_wda, spath):
        session.set_pasteboard("plaintext", "aGk=")
        assert mock_wda.last_request()["body"] == {"contentType": "plaintext", "content": "aGk="}
        session.set_pasteboard(ContentType.URL, "aGk=")
        assert mock_wda.last_request()["body"]["contentType"] == "url"

    def test_set_pasteboard_unknown_type(self, session, mock_wda):
        with pytest.raises(InvalidArgument):
            session.set_pasteboard("video", "aGk=")
        assert mock_wda.requests == []


# ---------------------------------------------------------------------------
# Buttons and Siri
# ---------------------------------------------------------------------------


class TestButtons:
    @pytest.mark.parametrize("method,name", [
        ("press_home_button", "home"),
        ("press_volume_up_button", "volumeUp"),
        ("press_volume_down_button", "volumeDown"),
    ])
    def test_named_buttons(self, session, mock_wda, spath, method, name):
        getattr(session, method)()
        req = mock_wda.last_request()
        assert req["path"] == spath("/wda/pressButton")
        assert req["body"] == {"name": name}

    def test_press_button(self, session, mock_wda):
        session.press_button(DeviceButton.HOME)
        assert mock_wda.last_request()["body"] == {"name": "home"}

    def test_unknown_button(self, session):
        with pytest.raises(InvalidArgument):
            session.press_button("power")


class TestSiri:
    def test_activate(self, session, mock_wda, spath):
        session.siri_activate("What's the weather like?")
        req = mock_wda.last_request()
        assert req["path"] == spath("/wda/siri/activate")
        assert req["body"] == {"text": "What's the weather like?"}

    def test_open_url(self, session, mock_wda, spath):
        session.siri_open_url("https://example.com")
        req = mock_wda.last_request()
        assert req["path"] == spath("/url")
        assert req["body"] == {"url": "https://example.com"}


# ---------------------------------------------------------------------------
# Source and settings
# ---------------------------------------------------------------------------


class TestSource:
    def test_source_default(self, session, mock_wda, spath):
        tree = session.source()
        assert tree.startswith("<?xml")
        assert mock_wda.last_request("GET", spath("/source"))["query"] == {}

    def test_source_options(self, session, mock_wda, spath):
        option = SourceOption().set_format("xml").set_scope("AppiumAUT").set_excluded_attributes(["visible"])
        session.source(option)
        assert mock_wda.last_request("GET", spath("/source"))["query"] == {
            "format": "xml", "scope": "AppiumAUT", "excluded_attributes": "visible",
        }

    def test_source_json_is_text(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath("/source"), {"type": "Application", "children": []})
        tree = session.source(SourceOption().set_format("json"))
        assert json.loads(tree) == {"type": "Application", "children": []}

    def test_accessible_source(self, session):
        tree = json.loads(session.accessible_source())
        assert tree["type"] == "Application"


class TestAppiumSettings:
    def test_get(self, session):
        assert session.get_appium_settings() == {"snapshotMaxDepth": 50, "useFirstMatch": False}

    def test_set_one(self, session, mock_wda, spath):
        result = session.set_appium_setting("snapshotMaxDepth", 10)
        assert mock_wda.last_request()["body"] == {"settings": {"snapshotMaxDepth": 10}}
        assert result["snapshotMaxDepth"] == 10
        assert result["useFirstMatch"] is False

    def test_set_many(self, session, mock_wda):
        session.set_appium_settings({"useFirstMatch": True, "customSnapshotTimeout": 5})
        assert mock_wda.last_request()["body"] == {
            "settings": {"useFirstMatch": True, "customSnapshotTimeout": 5},
        }

    def test_bad_shape(self, session, mock_wda, spath):
        mock_wda.set_value("GET", spath("/appium/settings"), "nope")
        with pytest.raises(DecodeError):
            session.get_appium_settings()
