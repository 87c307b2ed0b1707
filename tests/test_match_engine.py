import math
import random
import unittest

from pitch_quiz.core.events import DisplayEvents
from pitch_quiz.errors import ConfigError
from pitch_quiz.match_engine import MatchEngine, format_detection_text
from pitch_quiz.mocks import ManualScheduler, RecordingPresentation
from pitch_quiz.note_types import (
    Detection,
    MatchState,
    NotationConfig,
    NotationScheme,
    NoteName,
)
from pitch_quiz.note_utils import NoteMapper, enumerate_vocabulary

C4 = 261.63
G4 = 392.0


class TestMatchEngine(unittest.TestCase):
    def setUp(self):
        self.ui = RecordingPresentation(NotationConfig(include_accidentals=False))
        self.scheduler = ManualScheduler()
        self.engine = self.make_engine()

    def make_engine(self, **kwargs):
        events = DisplayEvents()
        events.connect(self.ui)
        self.ui.on_config_changed(lambda: engine.on_config_changed())
        engine = MatchEngine(
            mapper=NoteMapper(self.ui.notation_config),
            scheduler=self.scheduler,
            events=events,
            cooldown_seconds=1.2,
            rng=random.Random(7),
            **kwargs,
        )
        return engine

    def set_target(self, letter):
        self.engine.current_target = letter
        self.ui.log.clear()

    def test_starts_listening_with_a_target_from_the_vocabulary(self):
        self.assertEqual(self.engine.state, MatchState.LISTENING)
        self.assertIn(self.engine.current_target, enumerate_vocabulary(self.ui.notation_config()))
        self.assertEqual(self.ui.of("target"), [self.engine.current_target])
        self.assertEqual(self.ui.of("result"), [None])

    def test_match_enters_cooldown_and_ignores_detections(self):
        self.set_target("C")

        self.engine.on_detection(Detection(C4, 0.99))

        self.assertEqual(self.ui.of("result"), [True])
        self.assertEqual(self.engine.state, MatchState.COOLDOWN)
        self.assertTrue(self.engine.awaiting_next)
        self.assertEqual(len(self.scheduler.pending), 1)
        self.assertEqual(self.scheduler.pending[0].delay, 1.2)

        # Still singing, or singing something else: nothing is shown
        self.ui.log.clear()
        self.engine.on_detection(Detection(C4, 0.99))
        self.engine.on_detection(Detection(G4, 0.99))
        self.engine.on_detection(Detection(None, 0.0))
        self.assertEqual(self.ui.log, [])
        self.assertEqual(len(self.scheduler.pending), 1)

    def test_cooldown_end_picks_new_target_and_clears_display(self):
        self.set_target("C")
        self.engine.on_detection(Detection(C4, 0.99))
        self.ui.log.clear()

        self.assertEqual(self.scheduler.fire_pending(), 1)

        self.assertEqual(self.engine.state, MatchState.LISTENING)
        self.assertEqual(len(self.ui.of("target")), 1)
        self.assertEqual(self.ui.of("detection"), [""])
        self.assertEqual(self.ui.of("result"), [None])
        self.assertIn(self.engine.current_target, enumerate_vocabulary(self.ui.notation_config()))

    def test_match_is_octave_independent(self):
        self.set_target("C")
        self.engine.on_detection(Detection(C4 / 4, 0.99))  # C2
        self.assertEqual(self.ui.of("result"), [True])

    def test_mismatch_shows_frequency_and_note(self):
        self.set_target("C")

        self.engine.on_detection(Detection(G4, 0.99))

        self.assertEqual(self.ui.of("result"), [False])
        text = self.ui.of("detection")[-1]
        self.assertIn("392.00 Hz", text)
        self.assertIn("G4", text)
        self.assertEqual(self.engine.state, MatchState.LISTENING)
        self.assertEqual(self.scheduler.pending, [])

    def test_low_confidence_is_no_note(self):
        self.set_target("A")
        self.engine.on_detection(Detection(440.0, 0.5))
        self.assertEqual(self.ui.of("detection"), ["Detected: - (-)"])
        self.assertEqual(self.ui.of("result"), [None])
        self.assertEqual(self.engine.attempts, 0)

    def test_confidence_gate_boundary(self):
        self.set_target("A")
        self.engine.on_detection(Detection(440.0, 0.9499))
        self.assertEqual(self.ui.of("detection"), ["Detected: - (-)"])
        self.assertEqual(self.ui.of("result"), [None])

        self.engine.on_detection(Detection(440.0, 0.95))
        self.assertEqual(self.ui.of("result"), [None, True])
        self.assertEqual(self.engine.state, MatchState.COOLDOWN)

    def test_unusable_frequency_is_shown_as_no_note(self):
        self.set_target("A")
        self.engine.on_detection(Detection(math.nan, 0.99))
        self.engine.on_detection(Detection(-5.0, 0.99))
        self.engine.on_detection(Detection(0.0, 0.99))
        self.engine.on_detection(Detection(math.inf, 0.99))
        self.assertEqual(self.ui.of("detection"), ["Detected: - (-)"] * 4)
        self.assertEqual(self.ui.of("result"), [None] * 4)
        self.assertEqual(self.engine.attempts, 0)

    def test_excluded_accidental_is_no_note(self):
        self.set_target("A")
        self.engine.on_detection(Detection(466.16, 0.99))
        self.assertEqual(self.ui.of("detection"), ["Detected: 466.16 Hz (-)"])
        self.assertEqual(self.ui.of("result"), [None])
        self.assertEqual(self.engine.state, MatchState.LISTENING)

    def test_disabling_accidentals_reselects_into_naturals(self):
        self.ui.set_include_accidentals(True)
        self.set_target("C#")

        self.ui.set_include_accidentals(False)

        self.assertEqual(len(self.ui.of("target")), 1)
        self.assertIn(self.engine.current_target, ["C", "D", "E", "F", "G", "A", "B"])

    def test_config_change_during_cooldown_cancels_timer(self):
        self.set_target("C")
        self.engine.on_detection(Detection(C4, 0.99))
        call = self.scheduler.pending[0]

        self.ui.set_alternative_notation(True)

        self.assertTrue(call.cancelled)
        self.assertEqual(self.scheduler.pending, [])
        self.assertEqual(self.engine.state, MatchState.LISTENING)
        self.assertIn(self.engine.current_target, enumerate_vocabulary(self.ui.notation_config()))

    def test_alternative_notation_matches_alternative_letters(self):
        self.ui.set_alternative_notation(True)
        self.set_target("H")
        self.engine.on_note(NoteName("H", 3), 246.94)
        self.assertEqual(self.ui.of("result"), [True])

    def test_avoid_repeat_never_picks_same_target_twice(self):
        engine = self.make_engine(avoid_repeat=True)
        previous = engine.current_target
        for _ in range(50):
            current = engine.select_new_target()
            self.assertNotEqual(current, previous)
            previous = current

    def test_counters(self):
        self.set_target("C")
        self.engine.on_detection(Detection(G4, 0.99))
        self.engine.on_detection(Detection(C4, 0.99))
        self.assertEqual(self.engine.attempts, 2)
        self.assertEqual(self.engine.matches, 1)

    def test_close_cancels_pending_cooldown(self):
        self.set_target("C")
        self.engine.on_detection(Detection(C4, 0.99))
        self.engine.close()
        self.assertEqual(self.scheduler.pending, [])

    def test_rejects_out_of_range_settings(self):
        with self.assertRaises(ConfigError):
            self.make_engine(confidence_threshold=1.5)
        with self.assertRaises(ConfigError):
            MatchEngine(
                mapper=NoteMapper(lambda: NotationConfig()),
                scheduler=self.scheduler,
                cooldown_seconds=-1,
            )


class TestFormatDetectionText(unittest.TestCase):
    def test_formats(self):
        self.assertEqual(format_detection_text(None, None), "Detected: - (-)")
        self.assertEqual(
            format_detection_text(440.0, NoteName("A", 4)), "Detected: 440.00 Hz (A4)"
        )
        self.assertEqual(
            format_detection_text(466.16, None),
            "Detected: 466.16 Hz (-)",
        )


if __name__ == "__main__":
    unittest.main()
