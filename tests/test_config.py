# tests/test_config.py
import os
import sys
import tempfile
import types
import unittest
from pathlib import Path

from vscroll import Config, ConfigError, GridConfig, WindowConfig


class TestWindowConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = WindowConfig()
        self.assertEqual(cfg.as_dict(), {
            "item_size": 50,
            "container_height": 300,
            "buffer_size": 5,
            "overscan": 2,
        })

    def test_partial_update(self):
        cfg = WindowConfig()
        cfg.update(container_height=640, itemHeight=32)
        self.assertEqual(cfg.container_height, 640)
        self.assertEqual(cfg.item_size, 32)
        self.assertEqual(cfg.buffer_size, 5)

    def test_sizes_must_be_positive(self):
        with self.assertRaises(ConfigError):
            WindowConfig(item_size=0)
        with self.assertRaises(ConfigError):
            GridConfig(column_width=-1)

    def test_counts_must_be_whole_and_non_negative(self):
        with self.assertRaises(ConfigError):
            WindowConfig(buffer_size=-1)
        with self.assertRaises(ConfigError):
            WindowConfig(overscan=1.5)
        self.assertEqual(WindowConfig(overscan=3.0).overscan, 3)

    def test_rejects_non_numbers(self):
        with self.assertRaises(ConfigError):
            WindowConfig(container_height="300")
        with self.assertRaises(ConfigError):
            WindowConfig(buffer_size=True)

    def test_rejects_non_finite(self):
        for field in ("item_size", "container_height", "overscan"):
            with self.assertRaises(ConfigError):
                WindowConfig(**{field: float('inf')})
        with self.assertRaises(ConfigError):
            GridConfig(container_width=float('nan'))

    def test_unknown_field(self):
        cfg = WindowConfig()
        with self.assertRaises(ConfigError):
            cfg.update(container_height=10, row_height=20)
        self.assertEqual(cfg.container_height, 300)

    def test_attribute_assignment_is_validated(self):
        cfg = WindowConfig()
        with self.assertRaises(ConfigError):
            cfg.container_height = -1
        cfg.container_height = 120
        self.assertEqual(cfg.container_height, 120)

    def test_copy_is_independent(self):
        cfg = GridConfig(fixed_rows_top=2)
        clone = cfg.copy()
        clone.fixed_rows_top = 4
        self.assertEqual(cfg.fixed_rows_top, 2)
        self.assertNotEqual(cfg, clone)


class TestConfigLoader(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)

    def write(self, name, text):
        path = self.dir / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_loads_yaml_file(self):
        path = self.write("vscroll.yaml", "window:\n  item_size: 25\ngrid:\n  fixedRowsTop: 2\n")
        cfg = Config(path, embedded_module_name="_vscroll_test_missing")
        self.assertEqual(cfg.source, "file")
        self.assertEqual(cfg.get_nested("window.item_size"), 25)
        self.assertIsNone(cfg.get_nested("window.missing"))
        self.assertEqual(cfg.get_nested("", "fallback"), "fallback")
        self.assertEqual(WindowConfig.from_config(cfg).item_size, 25)
        self.assertEqual(GridConfig.from_config(cfg).fixed_rows_top, 2)

    def test_overrides_win_over_file(self):
        path = self.write("vscroll.yaml", "window:\n  item_size: 25\n")
        cfg = Config(path, embedded_module_name="_vscroll_test_missing")
        self.assertEqual(WindowConfig.from_config(cfg, item_size=40).item_size, 40)

    def test_missing_file(self):
        cfg = Config(str(self.dir / "nope.yaml"), embedded_module_name="_vscroll_test_missing")
        self.assertIsNone(cfg.source)
        self.assertEqual(cfg.as_dict(), {})
        self.assertEqual(WindowConfig.from_config(cfg), WindowConfig())

    def test_invalid_yaml_is_ignored(self):
        path = self.write("bad.yaml", "window: [unclosed\n")
        with self.assertLogs("vscroll.config", level="WARNING"):
            cfg = Config(path, embedded_module_name="_vscroll_test_missing")
        self.assertIsNone(cfg.source)

    def test_section_must_be_mapping(self):
        path = self.write("vscroll.yaml", "window: 12\n")
        cfg = Config(path, embedded_module_name="_vscroll_test_missing")
        with self.assertRaises(ConfigError):
            WindowConfig.from_config(cfg)

    def test_embedded_module_preferred(self):
        module = types.ModuleType("_vscroll_test_embedded")
        module.CONFIG = {"grid": {"row_height": 30}}
        sys.modules[module.__name__] = module
        self.addCleanup(sys.modules.pop, module.__name__, None)

        path = self.write("vscroll.yaml", "grid:\n  row_height: 60\n")
        cfg = Config(path, embedded_module_name=module.__name__)
        self.assertEqual(cfg.source, "embedded")
        self.assertEqual(GridConfig.from_config(cfg).row_height, 30)

        cfg.reload(prefer_embedded=False)
        self.assertEqual(cfg.source, "file")
        self.assertEqual(GridConfig.from_config(cfg).row_height, 60)

    def test_relative_path_resolves_against_cwd(self):
        self.write("vscroll.yaml", "window:\n  overscan: 4\n")
        cwd = os.getcwd()
        os.chdir(self.dir)
        self.addCleanup(os.chdir, cwd)
        cfg = Config("vscroll.yaml", embedded_module_name="_vscroll_test_missing")
        self.assertEqual(cfg.resolved_config_path, (self.dir / "vscroll.yaml").resolve())
        self.assertEqual(cfg.get("window"), {"overscan": 4})


if __name__ == '__main__':
    unittest.main()
