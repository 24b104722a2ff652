import math
import unittest

from mousecartpole import MCPConfig, MouseCartPoleConfig


class MCPConfigTests(unittest.TestCase):
    def test_defaults(self):
        cfg = MCPConfig()
        self.assertEqual((cfg.width, cfg.height, cfg.dpi), (600, 400, 100))
        self.assertTrue(cfg.offscreen)
        self.assertFalse(cfg.interactive)
        self.assertEqual(cfg.device, "cpu")
        self.assertIsNone(cfg.seed)
        self.assertIsNone(cfg.log_level)
        self.assertTrue(cfg.render)

    def test_surface_validation(self):
        with self.assertRaises(ValueError):
            MCPConfig(width=0)
        with self.assertRaises(ValueError):
            MCPConfig(height=-5)
        with self.assertRaises(ValueError):
            MCPConfig(dpi=0)
        with self.assertRaises(ValueError):
            MCPConfig(interactive=True, offscreen=True)

    def test_unknown_device(self):
        with self.assertRaises(ValueError):
            MCPConfig(device="tpu")

    def test_repr_lists_fields(self):
        text = repr(MCPConfig(width=320))
        self.assertTrue(text.startswith("MCPConfig("))
        self.assertIn("width: 320", text)
        self.assertIn("device: 'cpu'", text)


class FromConfigTests(unittest.TestCase):
    def test_none_and_overrides(self):
        cfg = MouseCartPoleConfig.from_config(None, stack_size=5)
        self.assertIsInstance(cfg, MouseCartPoleConfig)
        self.assertEqual(cfg.stack_size, 5)

    def test_dict(self):
        cfg = MouseCartPoleConfig.from_config({"force_mag": 10.0, "width": 300})
        self.assertEqual(cfg.force_mag, 10.0)
        self.assertEqual(cfg.width, 300)

    def test_instance_is_copied(self):
        original = MouseCartPoleConfig(tau=0.01)
        cfg = MouseCartPoleConfig.from_config(original)
        self.assertEqual(cfg.tau, 0.01)
        self.assertIsNot(cfg, original)

    def test_base_instance_is_upgraded(self):
        cfg = MouseCartPoleConfig.from_config(MCPConfig(width=800, seed=4))
        self.assertIsInstance(cfg, MouseCartPoleConfig)
        self.assertEqual(cfg.width, 800)
        self.assertEqual(cfg.seed, 4)
        self.assertEqual(cfg.stack_size, 3)

    def test_cfg_and_overrides_conflict(self):
        with self.assertRaises(ValueError):
            MouseCartPoleConfig.from_config({"tau": 0.01}, stack_size=2)


class MouseCartPoleConfigTests(unittest.TestCase):
    def test_physics_defaults(self):
        cfg = MouseCartPoleConfig()
        self.assertEqual(cfg.gravity, 9.8)
        self.assertEqual(cfg.masscart, 1.0)
        self.assertEqual(cfg.masspole, 0.1)
        self.assertEqual(cfg.length, 0.5)
        self.assertEqual(cfg.force_mag, 50.0)
        self.assertEqual(cfg.tau, 0.02)
        self.assertEqual(cfg.kinematics_integrator, "euler")
        self.assertEqual(cfg.pole_friction, 0.1)
        self.assertEqual(cfg.x_threshold, 2.4)
        self.assertAlmostEqual(cfg.theta_threshold_reward, math.pi / 4)
        self.assertEqual(cfg.x_threshold_reward, 0.5)
        self.assertEqual(cfg.stack_size, 3)

    def test_derived_masses(self):
        cfg = MouseCartPoleConfig(masscart=2.0, masspole=0.5, length=0.4)
        self.assertAlmostEqual(cfg.total_mass, 2.5)
        self.assertAlmostEqual(cfg.polemass_length, 0.2)

    def test_physics_validation(self):
        bad = [
            {"kinematics_integrator": "rk4"},
            {"stack_size": 0},
            {"tau": 0.0},
            {"masscart": -1.0},
            {"masspole": 0.0},
            {"length": 0.0},
            {"x_threshold": 0.0},
        ]
        for overrides in bad:
            with self.subTest(**overrides), self.assertRaises(ValueError):
                MouseCartPoleConfig(**overrides)

    def test_semi_implicit_is_accepted(self):
        cfg = MouseCartPoleConfig(kinematics_integrator="semi-implicit-euler")
        self.assertEqual(cfg.kinematics_integrator, "semi-implicit-euler")


if __name__ == "__main__":
    unittest.main()
