import pathlib
import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sensetone.config import SensetoneConfig, config_from_mapping, load_config  # noqa: E402
from sensetone.errors import ConfigError, OverlapValueError  # noqa: E402


class ConfigTests(unittest.TestCase):
    def test_defaults_match_calibration(self):
        cfg = SensetoneConfig().validated()
        self.assertEqual(cfg.accel_frame_width, 20)
        self.assertEqual(cfg.gyro_frame_width, 20)
        self.assertEqual(cfg.overlap, 0.0)
        self.assertEqual(cfg.smoothing_window, 7)
        self.assertEqual(cfg.accel_freq_correlation, 750.0)
        self.assertEqual(cfg.silence_threshold_hz, 90)
        self.assertEqual(cfg.initial_volume, 0.5)

    def test_pipeline_block_is_flattened_and_unknown_keys_ignored(self):
        cfg = config_from_mapping(
            {
                "pipeline": {"overlap": "0.25", "smoothing_mode": " Triangular "},
                "accel_frame_width": 32,
                "plot_colour": "red",
            }
        )
        self.assertEqual(cfg.overlap, 0.25)
        self.assertEqual(cfg.smoothing_mode, "triangular")
        self.assertEqual(cfg.accel_frame_width, 32)

    def test_empty_mapping_gives_defaults(self):
        self.assertEqual(config_from_mapping(None), SensetoneConfig())
        self.assertEqual(config_from_mapping({}), SensetoneConfig())

    def test_out_of_range_values_raise(self):
        with self.assertRaises(OverlapValueError):
            config_from_mapping({"overlap": 1.2})
        with self.assertRaises(OverlapValueError):
            config_from_mapping({"overlap": float("nan")})
        for bad in (
            {"accel_frame_width": 1},
            {"smoothing_window": 0},
            {"smoothing_mode": "gaussian"},
            {"filter_order": 0},
            {"gyro_low_pass_hz": 0},
            {"initial_volume": 1.5},
            {"playback_ramp_steps": 0},
            {"history_size": 0},
        ):
            with self.subTest(bad=bad):
                with self.assertRaises(ConfigError):
                    config_from_mapping(bad)

    def test_overlap_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            SensetoneConfig(overlap=-0.5).validated()

    def test_missing_file_gives_defaults(self):
        self.assertEqual(load_config(None), SensetoneConfig())
        self.assertEqual(load_config("/nonexistent/sensetone.yaml"), SensetoneConfig())

    def test_yaml_file_is_loaded(self):
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "sensetone.yaml"
            path.write_text(
                "pipeline:\n  overlap: 0.5\n  diagnostics_enabled: true\nhistory_size: 4\n",
                encoding="utf-8",
            )
            cfg = load_config(path)
        self.assertEqual(cfg.overlap, 0.5)
        self.assertTrue(cfg.diagnostics_enabled)
        self.assertEqual(cfg.history_size, 4)

    def test_non_mapping_yaml_is_rejected(self):
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(path)


if __name__ == "__main__":
    unittest.main()
