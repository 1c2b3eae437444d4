from __future__ import annotations

import unittest

from actor_sim.backends.kinematic_backend import KinematicActorHost
from actor_sim.controllers.basic import PathFollower, VelocityFollower
from actor_sim.core.registry import (
    create_controller,
    create_host,
    create_transport,
    register_builtin_components,
)


class TestRegistry(unittest.TestCase):
    def setUp(self) -> None:
        register_builtin_components()

    def test_builtin_components_resolve(self) -> None:
        self.assertIsInstance(create_controller("velocity"), VelocityFollower)
        self.assertIsInstance(create_controller(" PATH "), PathFollower)
        host = create_host("kinematic", name="walker")
        self.assertIsInstance(host, KinematicActorHost)
        self.assertEqual(host.name, "walker")
        self.assertTrue(create_transport("inprocess").ok())

    def test_unknown_component_raises_helpful_error(self) -> None:
        with self.assertRaises(ValueError) as e1:
            create_controller("does-not-exist")
        self.assertIn("Unknown follow mode", str(e1.exception))
        self.assertIn("path", str(e1.exception))

        with self.assertRaises(ValueError) as e2:
            create_host("does-not-exist")
        self.assertIn("Unknown host", str(e2.exception))

        with self.assertRaises(ValueError) as e3:
            create_transport("does-not-exist")
        self.assertIn("Unknown transport", str(e3.exception))


if __name__ == "__main__":
    unittest.main()
