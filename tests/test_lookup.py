"""Tests for word lookup and tooltip placement."""

import pytest
from PySide6.QtCore import QObject, Signal

from bireader.models import Side
from bireader.services.dictionary import DictionaryEntry, GlossaryDictionary
from bireader.services.lookup import (
    TOOLTIP_HEIGHT,
    TOOLTIP_WIDTH,
    VIEWPORT_MARGIN,
    LookupController,
    LookupState,
    place_tooltip,
)
from bireader.settings import ViewerSettings
from tests.conftest import FakeRect

VIEWPORT = (1280, 800)


class FakePane(QObject):
    """A selection source."""

    selection_finished = Signal(str, object, object, object)


@pytest.fixture
def dictionary():
    return GlossaryDictionary(
        {
            "transformer": DictionaryEntry(
                phonetic="/trænsˈfɔːmə/",
                part_of_speech="n.",
                translation="变换器",
                example="The transformer reads the whole sequence.",
            ),
            "attention": DictionaryEntry(part_of_speech="n.", translation="注意力"),
            "the quick brown fox jumps": DictionaryEntry(translation="敏捷的棕色狐狸跳"),
        }
    )


@pytest.fixture
def controller(qapp, dictionary, store):
    controller = LookupController(dictionary, store, ViewerSettings(arm_delay_ms=100))
    yield controller
    controller.set_enabled(False)
    controller.close()


class TestPlaceTooltip:
    """Test that tooltips never leave the viewport."""

    @pytest.mark.parametrize(
        ("x", "y"),
        [
            (0, 0),
            (VIEWPORT[0], 0),
            (0, VIEWPORT[1]),
            (VIEWPORT[0], VIEWPORT[1]),
            (VIEWPORT[0] / 2, 5),
            (5, VIEWPORT[1] / 2),
            (VIEWPORT[0] - 5, VIEWPORT[1] / 2),
            (VIEWPORT[0] / 2, VIEWPORT[1] - 5),
        ],
    )
    def test_stays_within_viewport(self, x, y):
        geometry = place_tooltip(x, y, *VIEWPORT)
        assert geometry.within(*VIEWPORT)
        assert geometry.left >= VIEWPORT_MARGIN
        assert geometry.top >= VIEWPORT_MARGIN
        assert geometry.right <= VIEWPORT[0] - VIEWPORT_MARGIN
        assert geometry.bottom <= VIEWPORT[1] - VIEWPORT_MARGIN
        assert 12 <= geometry.arrow_x <= TOOLTIP_WIDTH - 12

    def test_prefers_above(self):
        geometry = place_tooltip(640, 400, *VIEWPORT)
        assert geometry.placed_above
        assert geometry.top == 400 - TOOLTIP_HEIGHT - 12
        assert geometry.left == 640 - TOOLTIP_WIDTH / 2
        assert geometry.arrow_x == TOOLTIP_WIDTH / 2

    def test_flips_below_near_top(self):
        geometry = place_tooltip(640, 50, *VIEWPORT)
        assert not geometry.placed_above
        assert geometry.top == 50 + 24

    def test_contains(self):
        geometry = place_tooltip(640, 400, *VIEWPORT)
        assert geometry.contains(640, geometry.top + 10)
        assert not geometry.contains(10, 10)


class TestLookupController:
    """Test the lookup rules and the tooltip lifecycle."""

    def test_dictionary_hit(self, controller):
        payload = controller.handle_selection(" transformer ", FakeRect(100, 300))
        assert payload.word == "transformer"
        assert payload.translation == "变换器"
        assert payload.phonetic == "/trænsˈfɔːmə/"
        assert payload.example == "The transformer reads the whole sequence."
        assert payload.anchor_x == 120
        assert payload.anchor_y == 300
        assert controller.state == LookupState.SHOWING
        assert controller.tooltip is payload

    def test_single_word_miss_shows_marker(self, controller):
        payload = controller.handle_selection("the", FakeRect(100, 300))
        assert payload.translation == "(not in dictionary)"
        assert payload.phonetic == ""
        assert payload.part_of_speech == ""

    def test_short_phrase_miss_is_echoed(self, controller):
        payload = controller.handle_selection("a rather odd phrase", FakeRect(0, 300))
        assert payload.translation == "“a rather odd phrase”"

    def test_long_unmatched_span_is_ignored(self, qtbot, controller):
        with qtbot.assertNotEmitted(controller.tooltip_shown):
            payload = controller.handle_selection(
                "one two three four five six", FakeRect(0, 300)
            )
        assert payload is None
        assert controller.state == LookupState.IDLE
        assert controller.tooltip is None

    def test_long_matched_span_is_shown(self, controller):
        payload = controller.handle_selection(
            "The quick brown fox jumps", FakeRect(0, 300)
        )
        assert payload.translation == "敏捷的棕色狐狸跳"

    @pytest.mark.parametrize("text", ["", "   ", "x" * 81])
    def test_not_a_lookup_target(self, controller, text):
        assert controller.handle_selection(text, FakeRect(0, 300)) is None

    def test_thresholds_come_from_settings(self, dictionary):
        controller = LookupController(
            dictionary, settings=ViewerSettings(max_unmatched_tokens=1)
        )
        assert controller.handle_selection("two words", FakeRect(0, 300)) is None

    def test_example_from_paragraph(self, controller):
        payload = controller.handle_selection(
            "attention", FakeRect(0, 300), paragraph_id=3, side=Side.SOURCE
        )
        assert payload.example == "It uses attention."

    def test_ignored_selection_keeps_open_tooltip(self, controller):
        shown = controller.handle_selection("transformer", FakeRect(0, 300))
        controller.handle_selection("one two three four five six", FakeRect(0, 300))
        assert controller.tooltip is shown
        assert controller.state == LookupState.SHOWING

    def test_duplicate_selection_keeps_tooltip(self, qtbot, controller):
        first = controller.handle_selection("transformer", FakeRect(100, 300))
        with qtbot.assertNotEmitted(controller.tooltip_shown):
            second = controller.handle_selection("transformer", FakeRect(100, 300))
        assert second is first

    def test_new_selection_replaces_tooltip(self, controller):
        controller.handle_selection("transformer", FakeRect(100, 300))
        payload = controller.handle_selection("attention", FakeRect(400, 300))
        assert controller.tooltip is payload

    def test_geometry_uses_viewport_size(self, controller):
        controller.viewport_size = (400.0, 300.0)
        controller.handle_selection("transformer", FakeRect(390, 20))
        assert controller.geometry.within(400, 300)

    def test_outside_press_is_armed_after_delay(self, qtbot, controller):
        controller.handle_selection("transformer", FakeRect(600, 400))
        assert not controller.armed
        # The press that made the selection must not close the tooltip.
        assert not controller.handle_outside_press(5, 5)
        assert controller.tooltip is not None
        qtbot.waitUntil(lambda: controller.armed, timeout=1000)
        geometry = controller.geometry
        assert not controller.handle_outside_press(geometry.left + 5, geometry.top + 5)
        with qtbot.waitSignal(controller.tooltip_closed):
            assert controller.handle_outside_press(5, 5)
        assert controller.tooltip is None
        assert controller.state == LookupState.IDLE
        assert not controller.armed

    def test_close_is_idempotent(self, qtbot, controller):
        controller.handle_selection("transformer", FakeRect(600, 400))
        controller.close()
        with qtbot.assertNotEmitted(controller.tooltip_closed):
            controller.close()

    def test_attach_listens_only_while_enabled(self, controller):
        pane = FakePane()
        controller.attach(pane)
        pane.selection_finished.emit("transformer", FakeRect(0, 300), None, Side.SOURCE)
        assert controller.tooltip is None
        controller.set_enabled(True)
        pane.selection_finished.emit("transformer", FakeRect(0, 300), None, Side.SOURCE)
        assert controller.tooltip.word == "transformer"

    def test_disable_closes_and_unsubscribes(self, qtbot, controller):
        pane = FakePane()
        controller.attach(pane)
        controller.set_enabled(True)
        pane.selection_finished.emit("transformer", FakeRect(0, 300), None, Side.SOURCE)
        with qtbot.waitSignal(controller.tooltip_closed):
            controller.set_enabled(False)
        assert controller.tooltip is None
        assert not controller.armed
        pane.selection_finished.emit("attention", FakeRect(0, 300), None, Side.SOURCE)
        assert controller.tooltip is None
        qtbot.wait(150)
        assert not controller.armed
