import math
import tempfile
import unittest
from pathlib import Path

import torch
from matplotlib.patches import Rectangle

from mousecartpole import LinearScale, MouseCartPoleEnv, MouseCartPoleRenderer
from mousecartpole.envs.cartpole.renderer import pole_rotation
from mousecartpole.renderer.node import ease_cubic_in_out


class LinearScaleTests(unittest.TestCase):
    def test_maps_and_inverts(self):
        scale = LinearScale((-2.4, 2.4), (0.0, 600.0))
        self.assertAlmostEqual(scale(-2.4), 0.0)
        self.assertAlmostEqual(scale(0.0), 300.0)
        self.assertAlmostEqual(scale(2.4), 600.0)
        self.assertAlmostEqual(scale.invert(450.0), 1.2)

    def test_flipped_range(self):
        scale = LinearScale((0.0, 3.0), (400.0, 0.0))
        self.assertAlmostEqual(scale(1.0), 400.0 - 400.0 / 3.0)
        self.assertAlmostEqual(scale.invert(0.0), 3.0)


class EasingTests(unittest.TestCase):
    def test_cubic_in_out(self):
        self.assertEqual(ease_cubic_in_out(0.0), 0.0)
        self.assertEqual(ease_cubic_in_out(0.5), 0.5)
        self.assertEqual(ease_cubic_in_out(1.0), 1.0)
        self.assertLess(ease_cubic_in_out(0.25), 0.25)
        self.assertGreater(ease_cubic_in_out(0.75), 0.75)


class MouseCartPoleRendererTests(unittest.TestCase):
    def setUp(self):
        self.renderer = MouseCartPoleRenderer()

    def tearDown(self):
        self.renderer.close()

    def test_scene_layout(self):
        r = self.renderer
        self.assertEqual([n.name for n in r.nodes], ["cart", "pole", "mouse_target"])
        self.assertAlmostEqual(r.ground_y, r.y_scale(1.0))
        self.assertAlmostEqual(r.cart.tx, 300.0)
        self.assertAlmostEqual(r.pole.rotation, 180.0)
        self.assertAlmostEqual(r.mouse_target.ty, r.ground_y)

    def test_pole_rotation(self):
        self.assertEqual(pole_rotation(0.0), 180.0)
        self.assertAlmostEqual(pole_rotation(math.pi / 2), 270.0)
        self.assertAlmostEqual(pole_rotation(-math.pi / 2), 90.0)

    def test_draw_places_immediately(self):
        r = self.renderer
        r.draw_cart(1.2)
        r.draw_pole(1.2, 0.3)
        r.draw_mouse_indicator(-1.2)
        self.assertAlmostEqual(r.cart.tx, 450.0)
        self.assertAlmostEqual(r.pole.tx, 450.0)
        self.assertAlmostEqual(r.pole.rotation, pole_rotation(0.3))
        self.assertAlmostEqual(r.mouse_target.tx, 150.0)
        self.assertFalse(any(n.in_transition for n in r.nodes))

    def test_animate_to_eases_over_duration(self):
        r = self.renderer
        r.animate_to(1.2, 0.1, 100)
        self.assertTrue(r.pole.in_transition)
        self.assertTrue(r.cart.in_transition)
        self.assertAlmostEqual(r.cart.tx, 300.0)

        self.assertTrue(r.advance(50))
        self.assertAlmostEqual(r.cart.tx, 375.0)
        self.assertAlmostEqual(r.pole.tx, 375.0)

        self.assertFalse(r.advance(50))
        self.assertAlmostEqual(r.cart.tx, 450.0)
        self.assertAlmostEqual(r.pole.rotation, pole_rotation(0.1))

    def test_new_animation_interrupts_old_one(self):
        r = self.renderer
        r.animate_to(2.4, 0.0, 100)
        r.advance(50)
        r.animate_to(0.0, 0.0, 100)
        r.flush()
        self.assertAlmostEqual(r.cart.tx, 300.0)
        self.assertFalse(r.cart.in_transition)

    def test_zero_duration_applies_immediately(self):
        r = self.renderer
        r.animate_to(-2.4, 0.2, 0)
        self.assertFalse(r.pole.in_transition)
        self.assertAlmostEqual(r.cart.tx, 0.0)
        self.assertAlmostEqual(r.pole.rotation, pole_rotation(0.2))

    def test_rotation_takes_shortest_path(self):
        node = self.renderer.pole
        node.set_rotation(350.0)
        node.transition(100, rotation=10.0)
        node.advance(50)
        self.assertAlmostEqual(node.rotation, 360.0)
        node.finish()
        self.assertEqual(node.rotation, 10.0)

    def test_wound_up_rotation_still_turns_the_short_way(self):
        node = self.renderer.pole
        node.set_rotation(900.0)
        node.transition(100, rotation=190.0)
        node.advance(50)
        self.assertAlmostEqual(node.rotation, 185.0)
        node.finish()
        self.assertEqual(node.rotation, 190.0)

    def test_wound_up_rotation_crosses_zero_the_short_way(self):
        node = self.renderer.pole
        node.set_rotation(725.0)
        node.transition(100, rotation=0.0)
        node.advance(50)
        self.assertAlmostEqual(node.rotation, 2.5)

    def test_direct_set_cancels_matching_transition(self):
        node = self.renderer.pole
        node.transition(100, rotation=200.0, tx=400.0)
        node.set_position(tx=100.0)
        self.assertTrue(node.in_transition)
        node.finish()
        self.assertEqual(node.tx, 100.0)
        self.assertEqual(node.rotation, 200.0)
        node.transition(100, rotation=190.0)
        node.set_rotation(170.0)
        self.assertFalse(node.in_transition)

    def test_unknown_transition_attribute(self):
        with self.assertRaises(ValueError):
            self.renderer.cart.transition(100, opacity=0.5)

    def test_add_node(self):
        r = self.renderer
        node = r.add_node(Rectangle((0, 0), 5, 5), tx=10.0, ty=20.0, name="marker")
        self.assertIs(r.nodes[-1], node)
        self.assertEqual((node.tx, node.ty), (10.0, 20.0))

    def test_step_snaps_scene_to_state(self):
        r = self.renderer
        state = torch.tensor([1.2, 0.0, 0.1, 0.0, -1.2], dtype=torch.float64)
        self.assertIsNone(r.step(state))
        self.assertAlmostEqual(r.cart.tx, 450.0)
        self.assertAlmostEqual(r.pole.rotation, pole_rotation(0.1))
        self.assertAlmostEqual(r.mouse_target.tx, 150.0)

        stacked = torch.cat([torch.zeros(5, dtype=torch.float64), state])
        pixels = r(stacked, return_pixels=True)
        self.assertEqual(tuple(pixels.shape), (3, 400, 600))

    def test_grab_pixels(self):
        pixels = self.renderer.grab_pixels()
        self.assertEqual(pixels.dtype, torch.uint8)
        self.assertEqual(tuple(pixels.shape), (3, 400, 600))
        # top-left corner is background (#DDDDDD)
        self.assertEqual(pixels[:, 0, 0].tolist(), [221, 221, 221])

    def test_save_svg(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self.renderer.save(Path(tmp) / "frames" / "scene.svg")
            text = Path(path).read_text()
        self.assertIn("<svg", text)

    def test_custom_surface_size(self):
        renderer = MouseCartPoleRenderer(width=300, height=200)
        try:
            self.assertAlmostEqual(renderer.x_scale(0.0), 150.0)
            self.assertEqual(tuple(renderer.grab_pixels().shape), (3, 200, 300))
        finally:
            renderer.close()


class EnvRendererIntegrationTests(unittest.TestCase):
    def test_env_drives_renderer(self):
        renderer = MouseCartPoleRenderer(seed=2)
        env = MouseCartPoleEnv(renderer=renderer)
        try:
            env.reset(initial_state=[0.6, 0.0, 0.05, 0.0])
            env.update_mouse_position(-0.6)
            self.assertAlmostEqual(renderer.mouse_target.tx, renderer.x_scale(-0.6))

            env.render(40)
            renderer.flush()
            self.assertAlmostEqual(renderer.cart.tx, renderer.x_scale(0.6))
            self.assertAlmostEqual(renderer.pole.rotation, pole_rotation(0.05))
        finally:
            env.close()


if __name__ == "__main__":
    unittest.main()
