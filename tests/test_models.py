"""
Unit tests for the core data models.

Covers coordinate move parsing, evaluations, puzzle levels, puzzle
serialization and configuration loading.
"""

import unittest

from chess_puzzler.core.models import Config, Evaluation, Move, Puzzle, PuzzleLevel


class MoveTests(unittest.TestCase):
    """Test coordinate move parsing and rendering."""

    def test_round_trip_four_characters(self):
        """Test parsing then rendering reproduces a 4-character move."""
        for text in ("e2e4", "g1f3", "a7a8", "h1a8", "e1g1"):
            self.assertEqual(str(Move.parse(text)), text)

    def test_promotion_is_lowercase(self):
        """Test the promotion letter is rendered lowercase."""
        move = Move.parse("e7e8Q")
        self.assertEqual(move.promotion, "q")
        self.assertEqual(str(move), "e7e8q")

    def test_fields(self):
        """Test origin and destination squares."""
        move = Move.parse("b8c6")
        self.assertEqual(move.from_square, "b8")
        self.assertEqual(move.to_square, "c6")
        self.assertIsNone(move.promotion)

    def test_to_dict(self):
        """Test dictionary form used for JSON output."""
        self.assertEqual(
            Move.parse("a2a1n").to_dict(),
            {"from": "a2", "to": "a1", "promotion": "n"}
        )

    def test_invalid_moves(self):
        """Test malformed coordinate moves are rejected."""
        for text in ("", "e4", "e2e", "i2e4", "e0e4", "e2e4k", "e2e4qq"):
            with self.assertRaises(ValueError):
                Move.parse(text)

    def test_moves_are_immutable(self):
        """Test moves cannot be modified after construction."""
        move = Move.parse("e2e4")
        with self.assertRaises(AttributeError):
            move.to_square = "e5"


class EvaluationTests(unittest.TestCase):
    """Test the evaluation value type."""

    def test_in_check(self):
        """Test the in-check evaluation."""
        evaluation = Evaluation.in_check()
        self.assertTrue(evaluation.is_check)
        self.assertIsNone(evaluation.score)
        self.assertEqual(str(evaluation), "in check")

    def test_score(self):
        """Test a numeric evaluation."""
        evaluation = Evaluation.score_of(-1.25)
        self.assertFalse(evaluation.is_check)
        self.assertEqual(evaluation.score, -1.25)
        self.assertEqual(str(evaluation), "-1.25")


class PuzzleLevelTests(unittest.TestCase):
    """Test puzzle level multipliers and parsing."""

    def test_solution_lengths(self):
        """Test solution half-moves per level."""
        self.assertEqual(PuzzleLevel.EASY.solution_length, 2)
        self.assertEqual(PuzzleLevel.MEDIUM.solution_length, 4)
        self.assertEqual(PuzzleLevel.HARD.solution_length, 6)

    def test_from_name(self):
        """Test case-insensitive level parsing."""
        self.assertIs(PuzzleLevel.from_name("Hard"), PuzzleLevel.HARD)
        self.assertIs(PuzzleLevel.from_name(" easy "), PuzzleLevel.EASY)

    def test_from_name_unknown(self):
        """Test rejection of an unknown level name."""
        with self.assertRaises(ValueError) as context:
            PuzzleLevel.from_name("expert")
        self.assertIn("easy, medium, hard", str(context.exception))


class PuzzleTests(unittest.TestCase):
    """Test puzzle accessors and serialization."""

    def setUp(self):
        moves = [Move.parse(m) for m in ("e2e4", "e7e5", "g1f3", "f7f6", "f3e5", "f6e5")]
        self.puzzle = Puzzle(
            level=PuzzleLevel.EASY,
            start_position="g1f3",
            start_index=2,
            blunder_index=3,
            moves=moves,
        )

    def test_parts(self):
        """Test setup, blunder and solution slices."""
        self.assertEqual([str(m) for m in self.puzzle.setup_moves], ["e2e4", "e7e5", "g1f3"])
        self.assertEqual(str(self.puzzle.blunder_move), "f7f6")
        self.assertEqual([str(m) for m in self.puzzle.solution_moves], ["f3e5", "f6e5"])

    def test_to_dict(self):
        """Test puzzle dictionary form used for JSON output."""
        data = self.puzzle.to_dict()
        self.assertEqual(data["level"], "easy")
        self.assertEqual(data["startPositionOfPuzzle"], "g1f3")
        self.assertEqual(data["startIndex"], 2)
        self.assertEqual(len(data["moves"]), 6)
        self.assertEqual(data["moves"][0], {"from": "e2", "to": "e4", "promotion": None})

    def test_str(self):
        """Test the single-line puzzle format."""
        self.assertEqual(str(self.puzzle), "easy|g1f3|e2e4 e7e5 g1f3 f7f6 f3e5 f6e5")


class ConfigTests(unittest.TestCase):
    """Test configuration loading."""

    def test_defaults(self):
        """Test default configuration values."""
        config = Config()
        self.assertEqual(config.puzzle_level, PuzzleLevel.MEDIUM)
        self.assertEqual(config.scan_depth, 1)
        self.assertEqual(config.solution_depth, 5)
        self.assertEqual(config.min_game_moves, 15)

    def test_invalid_values(self):
        """Test rejection of invalid configuration values."""
        with self.assertRaises(ValueError):
            Config(level="impossible")
        with self.assertRaises(ValueError):
            Config(output_format="xml")
        with self.assertRaises(ValueError):
            Config(solution_depth=0)

    def test_min_game_moves_is_clamped(self):
        """Test the minimum game length never drops below a scannable game."""
        self.assertEqual(Config(min_game_moves=0).min_game_moves, 2)
        self.assertEqual(Config(min_game_moves=1).min_game_moves, 2)
        self.assertEqual(Config(min_game_moves=3).min_game_moves, 3)

    def test_dict_round_trip_ignores_unknown_keys(self):
        """Test dictionary round trip ignoring unknown keys."""
        data = Config(level="hard", seed=7).to_dict()
        data["unknown"] = True
        config = Config.from_dict(data)
        self.assertEqual(config.level, "hard")
        self.assertEqual(config.seed, 7)

    def test_from_env(self):
        """Test configuration from environment variables."""
        config = Config.from_env({
            "STOCKFISH_PATH": "/opt/stockfish",
            "PUZZLER_LEVEL": "easy",
            "PUZZLER_SOLUTION_DEPTH": "8",
            "PUZZLER_MIN_GAME_MOVES": "20",
            "PUZZLER_ENGINE_TIMEOUT": "30",
        })
        self.assertEqual(config.stockfish_path, "/opt/stockfish")
        self.assertEqual(config.puzzle_level, PuzzleLevel.EASY)
        self.assertEqual(config.solution_depth, 8)
        self.assertEqual(config.min_game_moves, 20)
        self.assertEqual(config.engine_timeout, 30.0)

    def test_from_env_disables_timeout(self):
        """Test disabling the timeout from the environment."""
        config = Config.from_env({"PUZZLER_ENGINE_TIMEOUT": "none"})
        self.assertIsNone(config.engine_timeout)

    def test_from_env_empty(self):
        """Test an empty environment gives the defaults."""
        self.assertEqual(Config.from_env({}), Config())


if __name__ == "__main__":
    unittest.main()
