import unittest

from fretboard_master.fretboard import (
    ALL_STRINGS,
    NOTES,
    frequency_of,
    normalize_pitch_class,
    octave_for,
    pitch_at,
    positions_for,
)
from fretboard_master.note_types import Difficulty, NotePosition


class TestPitchAt(unittest.TestCase):
    def test_open_strings(self):
        tuning = {s: pitch_at(s, 0) for s in ALL_STRINGS}
        self.assertEqual(tuning, {6: "E", 5: "A", 4: "D", 3: "G", 2: "B", 1: "E"})

    def test_fretted_notes(self):
        self.assertEqual(pitch_at(6, 5), "A")
        self.assertEqual(pitch_at(5, 3), "C")
        self.assertEqual(pitch_at(3, 4), "B")
        self.assertEqual(pitch_at(2, 1), "C")
        self.assertEqual(pitch_at(1, 12), "E")

    def test_octave_periodicity(self):
        for string in ALL_STRINGS:
            for fret in range(25):
                self.assertEqual(pitch_at(string, fret), pitch_at(string, fret + 12))

    def test_invalid_input(self):
        with self.assertRaises(ValueError):
            pitch_at(7, 0)
        with self.assertRaises(ValueError):
            pitch_at(0, 3)
        with self.assertRaises(ValueError):
            pitch_at(1, -1)


class TestPositionsFor(unittest.TestCase):
    def test_a_on_low_e_in_beginner_range(self):
        self.assertEqual(positions_for("A", [6], 5), [NotePosition(6, 5)])

    def test_order_is_string_major_fret_ascending(self):
        positions = positions_for("E", [1, 6], 12)
        self.assertEqual(
            positions,
            [
                NotePosition(1, 0),
                NotePosition(1, 12),
                NotePosition(6, 0),
                NotePosition(6, 12),
            ],
        )

    def test_max_fret_is_inclusive(self):
        self.assertEqual(positions_for("D", [6], 10), [NotePosition(6, 10)])
        self.assertEqual(positions_for("D", [6], 9), [])

    def test_unreachable_pitch_is_empty(self):
        # Low E only reaches E..A within five frets
        self.assertEqual(positions_for("C", [6], 5), [])

    def test_flats_are_accepted(self):
        self.assertEqual(positions_for("Bb", [5], 5), positions_for("A#", [5], 5))

    def test_every_position_sounds_the_pitch(self):
        for difficulty in Difficulty:
            for pitch in NOTES:
                for pos in positions_for(pitch, ALL_STRINGS, difficulty.max_fret):
                    self.assertEqual(pitch_at(pos.string, pos.fret), pitch)
                    self.assertLessEqual(pos.fret, difficulty.max_fret)

    def test_full_coverage_from_eleven_frets(self):
        for difficulty in Difficulty:
            if difficulty.max_fret < 11:
                continue
            for pitch in NOTES:
                self.assertTrue(
                    positions_for(pitch, ALL_STRINGS, difficulty.max_fret),
                    f"{pitch} unreachable at {difficulty.name}",
                )

    def test_beginner_covers_every_pitch_across_all_strings(self):
        for pitch in NOTES:
            self.assertTrue(positions_for(pitch, ALL_STRINGS, Difficulty.BEGINNER.max_fret))

    def test_beginner_single_string_misses_some_pitches(self):
        for string in ALL_STRINGS:
            reachable = {p for p in NOTES if positions_for(p, [string], 5)}
            self.assertEqual(len(reachable), 6)


class TestFrequencies(unittest.TestCase):
    def test_reference_octave(self):
        self.assertAlmostEqual(frequency_of("A", 4), 440.0)
        self.assertAlmostEqual(frequency_of("C", 4), 261.63)

    def test_octave_scaling(self):
        self.assertAlmostEqual(frequency_of("A", 2), 110.0)
        self.assertAlmostEqual(frequency_of("E", 2), 329.63 / 4)
        self.assertAlmostEqual(frequency_of("A", 5), 880.0)

    def test_octave_for(self):
        self.assertEqual(octave_for(6, 0), 2)
        self.assertEqual(octave_for(6, 12), 3)
        self.assertEqual(octave_for(1, 0), 4)
        self.assertEqual(octave_for(1, 22), 5)
        self.assertEqual(octave_for(2, 11), 3)
        self.assertEqual(octave_for(6, 8), 2)


class TestNormalizePitchClass(unittest.TestCase):
    def test_sharps_and_naturals(self):
        for note in NOTES:
            self.assertEqual(normalize_pitch_class(note), note)

    def test_flats(self):
        self.assertEqual(normalize_pitch_class("Bb"), "A#")
        self.assertEqual(normalize_pitch_class("Db"), "C#")
        self.assertEqual(normalize_pitch_class("Cb"), "B")

    def test_case_and_whitespace(self):
        self.assertEqual(normalize_pitch_class(" f# "), "F#")
        self.assertEqual(normalize_pitch_class("eb"), "D#")

    def test_invalid(self):
        for name in ("H", "", "C##", "A4", "Bbb"):
            with self.assertRaises(ValueError):
                normalize_pitch_class(name)


class TestDifficulty(unittest.TestCase):
    def test_settings(self):
        self.assertEqual(
            {d.name.lower(): (d.time_limit, d.max_fret) for d in Difficulty},
            {
                "beginner": (8, 5),
                "intermediate": (6, 12),
                "advanced": (4, 15),
                "expert": (3, 22),
            },
        )

    def test_parse(self):
        self.assertIs(Difficulty.parse("Expert"), Difficulty.EXPERT)
        self.assertIs(Difficulty.parse(Difficulty.ADVANCED), Difficulty.ADVANCED)
        with self.assertRaises(ValueError):
            Difficulty.parse("legendary")

    def test_next_cycles(self):
        self.assertIs(Difficulty.BEGINNER.next(), Difficulty.INTERMEDIATE)
        self.assertIs(Difficulty.EXPERT.next(), Difficulty.BEGINNER)


if __name__ == "__main__":
    unittest.main()
