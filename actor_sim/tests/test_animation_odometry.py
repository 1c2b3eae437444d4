from __future__ import annotations

import math
import unittest

from actor_sim.animation import AnimationCoordinator
from actor_sim.backends.kinematic_backend import KinematicActorHost
from actor_sim.core.messages import Odometry
from actor_sim.core.types import STANDING_ANIMATION, WALKING_ANIMATION, Pose2D, Twist
from actor_sim.odometry import OdometryPublisher, build_odometry


class TestAnimationCoordinator(unittest.TestCase):
    def test_install_sets_standing_trajectory(self) -> None:
        host = KinematicActorHost()
        anim = AnimationCoordinator(host, factor=4.0)
        self.assertTrue(anim.install())
        self.assertEqual(host.trajectory, {"type": STANDING_ANIMATION, "duration": 1.0})

        anim.select(WALKING_ANIMATION)
        self.assertEqual(host.trajectory["type"], WALKING_ANIMATION)
        self.assertEqual(anim.clip, WALKING_ANIMATION)

    def test_missing_clip_skips_installation(self) -> None:
        host = KinematicActorHost(animations=(WALKING_ANIMATION,))
        anim = AnimationCoordinator(host)
        with self.assertLogs("actor_sim.animation", level="ERROR") as logs:
            self.assertFalse(anim.install())
        self.assertIn("standing not found", logs.output[0])
        self.assertIsNone(host.trajectory)

        # Clip selection is still tracked locally.
        anim.select(WALKING_ANIMATION)
        self.assertEqual(anim.clip, WALKING_ANIMATION)
        self.assertIsNone(host.trajectory)

    def test_advance_is_monotonic_and_scaled(self) -> None:
        host = KinematicActorHost()
        anim = AnimationCoordinator(host, factor=4.0)
        anim.advance_by_distance(0.5)
        anim.advance_by_distance(0.0)
        anim.advance(1.0)
        self.assertAlmostEqual(anim.clock, 3.0)
        self.assertAlmostEqual(host.script_time(), 3.0)

        with self.assertRaises(ValueError):
            anim.advance(-0.1)

    def test_unknown_clip_is_rejected(self) -> None:
        anim = AnimationCoordinator(KinematicActorHost())
        with self.assertRaises(ValueError):
            anim.select("running")


class TestOdometry(unittest.TestCase):
    def test_orientation_removes_default_rotation(self) -> None:
        odom = build_odometry(
            Pose2D(1.0, 2.0, math.pi / 2.0 + 0.3),
            Twist(0.5, -0.5, 0.1),
            default_rotation=math.pi / 2.0,
            frame_id="map",
            child_frame_id="walker",
            stamp=3.5,
        )
        self.assertEqual(odom.position, (1.0, 2.0, 0.0))
        self.assertAlmostEqual(odom.orientation[0], 0.0)
        self.assertAlmostEqual(odom.orientation[1], 0.0)
        self.assertAlmostEqual(odom.orientation[2], math.sin(0.15))
        self.assertAlmostEqual(odom.orientation[3], math.cos(0.15))
        self.assertEqual(odom.linear, (0.5, -0.5, 0.0))
        self.assertEqual(odom.angular, (0.0, 0.0, 0.1))
        self.assertEqual((odom.frame_id, odom.child_frame_id, odom.stamp), ("map", "walker", 3.5))

    def test_publisher_emits_every_call(self) -> None:
        sent: list[Odometry] = []
        pub = OdometryPublisher(sent.append, child_frame_id="walker")
        pub.publish(Pose2D(0.0, 0.0, 0.0), Twist(), stamp=0.1)
        pub.publish(Pose2D(0.0, 0.0, 0.0), Twist(), stamp=0.2)
        self.assertEqual(pub.published, 2)
        self.assertEqual([m.stamp for m in sent], [0.1, 0.2])


if __name__ == "__main__":
    unittest.main()
