import math

import pytest

from garden_rover.config import MotionConfig
from garden_rover.exceptions import InvalidCoordinateError
from garden_rover.motion import MotionModel, MotionState, Pose, normalize_angle


def drive(model, pose, target, max_ticks=5000):
    arrivals = 0
    for tick in range(max_ticks):
        if model.update(pose, target).arrived:
            arrivals += 1
            break
    return arrivals, tick + 1


def test_arrives_once_and_holds(motion):
    pose = Pose(x=-4.0, z=0.0)
    arrivals, _ = drive(motion, pose, (0, 0))
    assert arrivals == 1
    assert (pose.x, pose.z, pose.velocity) == (0.0, 0.0, 0.0)
    assert motion.state == MotionState.ARRIVED

    for _ in range(10):
        update = motion.update(pose, (0, 0))
        assert not update.arrived
        assert update.distance_moved == 0.0
    assert (pose.x, pose.z) == (0.0, 0.0)


def test_already_at_target_arrives_immediately(motion):
    pose = Pose(x=2.1, z=-3.9)
    update = motion.update(pose, (1, 2))
    assert update.arrived
    assert update.cell == (1, 2)
    assert (pose.x, pose.z) == (2.0, -4.0)


def test_reset_rearms_arrival(motion):
    pose = Pose()
    assert motion.update(pose, (0, 0)).arrived
    assert not motion.update(pose, (0, 0)).arrived
    motion.reset()
    assert motion.update(pose, (0, 0)).arrived


def test_new_target_restarts_approach(motion):
    pose = Pose()
    motion.update(pose, (0, 0))
    update = motion.update(pose, (1, 0))
    assert update.state == MotionState.APPROACHING
    assert not update.arrived


def test_heading_change_is_rate_limited(motion):
    pose = Pose(x=0.0, z=0.0, heading=0.0)
    limit = motion.config.max_rotation_step
    motion.update(pose, (0, 2))
    assert abs(pose.heading) == pytest.approx(limit)
    # misaligned: turns in place
    assert pose.velocity == 0.0
    assert (pose.x, pose.z) == (0.0, 0.0)


def test_velocity_ramps_and_saturates():
    config = MotionConfig(max_velocity=1.0, acceleration=30.0)
    model = MotionModel(_coords(9), config)
    pose = Pose(x=-8.0, z=0.0)
    model.update(pose, (4, 0))
    assert pose.velocity == pytest.approx(config.acceleration * config.dt)
    for _ in range(60):
        model.update(pose, (4, 0))
        assert pose.velocity <= config.max_velocity + 1e-12
    assert pose.velocity == pytest.approx(config.max_velocity)


def test_speed_multiplier_shortens_trip():
    slow = MotionModel(_coords(5), MotionConfig())
    fast = MotionModel(_coords(5), MotionConfig(speed_multiplier=2.0))
    _, slow_ticks = drive(slow, Pose(x=-4.0), (2, 0))
    _, fast_ticks = drive(fast, Pose(x=-4.0), (2, 0))
    assert fast_ticks < slow_ticks


def test_turns_before_driving_behind(motion):
    pose = Pose(x=0.0, z=0.0, heading=0.0)
    arrivals, _ = drive(motion, pose, (-2, 0))
    assert arrivals == 1
    assert (pose.x, pose.z) == (-4.0, 0.0)


def test_rejects_fractional_target(motion):
    with pytest.raises(InvalidCoordinateError):
        motion.update(Pose(), (0.5, 0))


def test_normalize_angle():
    assert normalize_angle(3 * math.pi) == pytest.approx(math.pi)
    assert normalize_angle(-3 * math.pi / 2) == pytest.approx(math.pi / 2)
    assert normalize_angle(0.25) == 0.25


def test_pose_helpers(coords):
    pose = Pose.snapped_to((1, -1), coords)
    assert pose.position == (2.0, 2.0)
    clone = pose.copy()
    clone.x = 5.0
    assert pose.x == 2.0
    assert pose.to_dict()['velocity'] == 0.0


def _coords(n):
    from garden_rover.environment import CoordinateSystem
    return CoordinateSystem(grid_size=n, cell_scale=2.0)


def test_arrival_on_first_tick_inside_threshold(motion):
    threshold = motion.config.arrival_threshold
    pose = Pose(x=-4.0, z=0.0)
    tx, tz = 0.0, 0.0
    previous = math.hypot(tx - pose.x, tz - pose.z)
    for _ in range(5000):
        before = pose.copy()
        update = motion.update(pose, (0, 0))
        if update.arrived:
            break
        assert update.distance_to_target >= threshold
        previous = update.distance_to_target
    else:
        pytest.fail("rover never arrived")

    # the tick before arrival was still outside the threshold
    assert previous >= threshold
    # and the arriving tick's own step lands inside it
    MotionModel(motion.coordinates, motion.config)._step(before, tx, tz)
    assert math.hypot(tx - before.x, tz - before.z) < threshold
    assert (pose.x, pose.z) == (tx, tz)
