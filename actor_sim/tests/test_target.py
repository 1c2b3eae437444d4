from __future__ import annotations

import threading
import unittest

from actor_sim.core.target import TargetState
from actor_sim.core.types import FollowMode, VelocitySample, Waypoint


class TestTargetState(unittest.TestCase):
    def test_reset_targets_initial_pose(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.reset(Waypoint(1.0, 2.0, 0.5))
        snap = target.snapshot()
        self.assertEqual(snap.waypoints, (Waypoint(1.0, 2.0, 0.5),))
        self.assertEqual(snap.index, 0)
        self.assertEqual(snap.target, Waypoint(1.0, 2.0, 0.5))
        self.assertFalse(snap.aborted)
        self.assertFalse(snap.has_next)

    def test_replace_path_resets_index_and_abort(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.replace_path([Waypoint(1.0, 0.0), Waypoint(2.0, 0.0)])
        target.advance_index(target.snapshot().generation)
        target.set_aborted(True)

        target.replace_path([Waypoint(5.0, 5.0)])
        snap = target.snapshot()
        self.assertEqual(snap.index, 0)
        self.assertFalse(snap.aborted)
        self.assertEqual(snap.target, Waypoint(5.0, 5.0))

    def test_empty_path_has_no_target(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.replace_path([])
        snap = target.snapshot()
        self.assertEqual(snap.waypoints, ())
        self.assertIsNone(snap.target)

    def test_advance_index_stops_at_last_waypoint(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.replace_path([Waypoint(0.0, 0.0), Waypoint(1.0, 0.0)])
        gen = target.snapshot().generation

        self.assertEqual(target.advance_index(gen), Waypoint(1.0, 0.0))
        self.assertIsNone(target.advance_index(gen))
        self.assertEqual(target.snapshot().index, 1)

    def test_stale_generation_is_ignored(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.replace_path([Waypoint(0.0, 0.0), Waypoint(1.0, 0.0)])
        stale = target.snapshot().generation
        target.replace_path([Waypoint(7.0, 0.0), Waypoint(8.0, 0.0)])

        self.assertIsNone(target.advance_index(stale))
        self.assertFalse(target.hold(3.0, 3.0, stale))
        snap = target.snapshot()
        self.assertEqual(snap.index, 0)
        self.assertEqual(snap.target, Waypoint(7.0, 0.0))

    def test_hold_clears_path(self) -> None:
        target = TargetState(FollowMode.PATH)
        target.replace_path([Waypoint(4.0, 0.0, 0.3)])
        self.assertTrue(target.hold(1.0, 1.0, target.snapshot().generation))
        snap = target.snapshot()
        self.assertEqual(snap.waypoints, ())
        self.assertEqual(snap.index, 0)
        self.assertEqual((snap.target.x, snap.target.y), (1.0, 1.0))

    def test_pop_velocity_consumes_one_sample_and_holds_last(self) -> None:
        target = TargetState(FollowMode.VELOCITY)
        self.assertEqual(target.pop_velocity(), VelocitySample())

        target.push_velocity(VelocitySample(1.0, 0.0))
        target.push_velocity(VelocitySample(2.0, 0.5))
        self.assertEqual(target.snapshot().pending_velocities, 2)

        self.assertEqual(target.pop_velocity(), VelocitySample(1.0, 0.0))
        self.assertEqual(target.pop_velocity(), VelocitySample(2.0, 0.5))
        self.assertEqual(target.pop_velocity(), VelocitySample(2.0, 0.5))
        self.assertEqual(target.snapshot().pending_velocities, 0)

    def test_concurrent_path_updates_are_atomic(self) -> None:
        target = TargetState(FollowMode.PATH)
        stop = threading.Event()
        torn: list[object] = []

        def writer(offset: int) -> None:
            for i in range(200):
                n = (i + offset) % 4 + 1
                target.replace_path([Waypoint(float(n), float(k)) for k in range(n)])

        def reader() -> None:
            while not stop.is_set():
                snap = target.snapshot()
                if snap.waypoints:
                    n = len(snap.waypoints)
                    if any(wp.x != float(n) for wp in snap.waypoints) or snap.target != snap.waypoints[0]:
                        torn.append(snap)

        r = threading.Thread(target=reader)
        r.start()
        writers = [threading.Thread(target=writer, args=(k,)) for k in range(4)]
        for w in writers:
            w.start()
        for w in writers:
            w.join()
        stop.set()
        r.join()

        self.assertEqual(torn, [])


if __name__ == "__main__":
    unittest.main()
