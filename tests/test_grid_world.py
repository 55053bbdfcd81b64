# keywords: [grid world tests, movement, obstacles, trail growth, configuration]
"""Test suite for ChallengeGridWorld transitions and descriptor validation."""

import numpy as np
import pytest

from interfaces import ActorState, Effect, Move, Turn, STEP, TURN, SKIP, WorldProtocol, Unrecognized
from world.challenge_grid import ChallengeGridWorld, ConfigurationError, DIR_VECTORS, turn_direction

STEP_EFFECT = Effect(STEP, Move(1))


def turn(direction):
    return Effect(TURN, Turn(direction))


@pytest.fixture
def star_world():
    """1x5 corridor, stars at (0, 2) and (0, 4)."""
    return ChallengeGridWorld(rows=1, cols=5, collectibles=[(0, 2), (0, 4)])


class TestTurning:
    """Turns rotate the facing and nothing else."""

    @pytest.mark.parametrize("start,way,expected", [
        ("up", "right", "right"),
        ("right", "right", "down"),
        ("left", "right", "up"),
        ("up", "left", "left"),
        ("left", "left", "down"),
    ])
    def test_turn_direction(self, start, way, expected):
        assert turn_direction(start, way) == expected

    @pytest.mark.parametrize("way", ["left", "right"])
    def test_four_turns_is_identity(self, way):
        world = ChallengeGridWorld(rows=2, cols=2)
        state = world.reset()
        for _ in range(4):
            state = world.step(state, turn(way)).state
        assert state == world.reset()

    def test_turn_keeps_position_and_trail(self):
        world = ChallengeGridWorld(rows=3, cols=3, collectibles=[(2, 2)])
        state = ActorState(1, 1, "up", body=((2, 1),), collected=((0, 0),), step_count=3)
        result = world.step(state, turn("left"))
        assert result.legal
        assert result.state == state._replace(direction="left")


class TestMovement:
    """Unit steps, walls and obstacles."""

    def test_direction_vectors(self):
        assert DIR_VECTORS.shape == (4, 2)
        assert np.abs(DIR_VECTORS).sum(axis=1).tolist() == [1, 1, 1, 1]

    @pytest.mark.parametrize("direction,expected", [
        ("up", (0, 1)), ("right", (1, 2)), ("down", (2, 1)), ("left", (1, 0)),
    ])
    def test_step_each_direction(self, direction, expected):
        world = ChallengeGridWorld(rows=3, cols=3)
        result = world.step(ActorState(1, 1, direction), STEP_EFFECT)
        assert result.legal
        assert result.state.position == expected
        assert result.state.step_count == 1

    @pytest.mark.parametrize("position,direction", [
        ((0, 0), "up"), ((0, 0), "left"), ((2, 2), "down"), ((2, 2), "right"),
    ])
    def test_walls_do_not_wrap(self, position, direction):
        world = ChallengeGridWorld(rows=3, cols=3)
        state = ActorState(position[0], position[1], direction)
        result = world.step(state, STEP_EFFECT)
        assert not result.legal
        assert result.state == state

    def test_obstacle_blocks(self):
        world = ChallengeGridWorld(rows=2, cols=3, obstacles=[(0, 1)])
        assert world.blocked[0, 1]
        assert not world.is_open(0, 1)
        result = world.step(world.reset(), STEP_EFFECT)
        assert not result.legal

    def test_skip_effects_are_not_world_effects(self):
        world = ChallengeGridWorld(rows=2, cols=2)
        with pytest.raises(ValueError):
            world.step(world.reset(), Effect(SKIP, Unrecognized("x")))


class TestTrail:
    """Collectible worlds grow one segment per new collectible."""

    def test_collect_appends_segment_at_vacated_cell(self, star_world):
        state = star_world.reset()
        state = star_world.step(state, STEP_EFFECT).state
        assert state.body == ()
        result = star_world.step(state, STEP_EFFECT)
        assert result.collected == (0, 2)
        assert result.state.collected == ((0, 2),)
        assert result.state.body == ((0, 1),)

    def test_trail_follows_head(self, star_world):
        state = star_world.reset()
        for _ in range(3):
            state = star_world.step(state, STEP_EFFECT).state
        assert state.position == (0, 3)
        assert state.body == ((0, 2),)

    def test_second_collectible_grows_again(self, star_world):
        state = star_world.reset()
        for _ in range(4):
            state = star_world.step(state, STEP_EFFECT).state
        assert state.collected == ((0, 2), (0, 4))
        assert state.body == ((0, 3), (0, 2))
        assert len(state.body) == len(state.collected)

    def test_no_double_collection(self):
        world = ChallengeGridWorld(rows=1, cols=3, collectibles=[(0, 1)])
        state = world.step(world.reset(), STEP_EFFECT).state
        state = world.step(state, STEP_EFFECT).state
        state = world.step(state, turn("right")).state
        state = world.step(state, turn("right")).state
        result = world.step(state, STEP_EFFECT)
        assert result.collected is None
        assert result.state.collected == ((0, 1),)
        assert len(result.state.body) == 1

    def test_goal_world_never_grows(self):
        world = ChallengeGridWorld(rows=1, cols=3, goal=(0, 2))
        state = world.step(world.reset(), STEP_EFFECT).state
        assert state.body == ()
        assert not world.grows


class TestConfiguration:
    """Descriptor validation."""

    def test_goal_and_collectibles_rejected(self):
        with pytest.raises(ConfigurationError):
            ChallengeGridWorld(rows=3, cols=3, goal=(2, 2), collectibles=[(1, 1)])

    @pytest.mark.parametrize("kwargs", [
        {"rows": 0, "cols": 3},
        {"rows": 3, "cols": 3, "start": (3, 0)},
        {"rows": 3, "cols": 3, "obstacles": [(0, 0)]},
        {"rows": 3, "cols": 3, "obstacles": [(5, 5)]},
        {"rows": 3, "cols": 3, "goal": (1, 1), "obstacles": [(1, 1)]},
        {"rows": 3, "cols": 3, "collectibles": [(0, 3)]},
        {"rows": 3, "cols": 3, "collectibles": [(1, 1), (1, 1)]},
        {"rows": 3, "cols": 3, "start_direction": "north"},
    ])
    def test_invalid_worlds(self, kwargs):
        with pytest.raises(ConfigurationError):
            ChallengeGridWorld(**kwargs)

    def test_from_challenge(self):
        world = ChallengeGridWorld.from_challenge({
            "id": "c9",
            "grid": {"rows": 4, "cols": 5},
            "obstacles": [{"r": 1, "c": 1}],
            "goal": {"r": 3, "c": 4},
            "start": {"r": 0, "c": 0, "dir": "DOWN"},
        })
        assert world.challenge_id == "c9"
        assert (world.rows, world.cols) == (4, 5)
        assert world.goal == (3, 4)
        assert world.variant == "goal"
        assert world.reset() == ActorState(0, 0, "down")

    @pytest.mark.parametrize("descriptor", [
        {"grid": {"rows": 3, "cols": 3}},
        {"grid": {"rows": -1, "cols": 3}, "start": {"r": 0, "c": 0}},
        {"grid": {"rows": 3, "cols": 3}, "start": {"r": 0, "c": 0, "dir": "sideways"}},
        {"grid": {"rows": 3, "cols": 3}, "start": {"r": 0, "c": 0}, "goal": {"r": 2}},
    ])
    def test_from_challenge_invalid(self, descriptor):
        with pytest.raises(ConfigurationError):
            ChallengeGridWorld.from_challenge(descriptor)

    def test_free_play_variant(self):
        world = ChallengeGridWorld(rows=2, cols=2)
        assert world.variant == "free"

    def test_metadata(self, star_world):
        metadata = star_world.get_metadata()
        assert metadata["name"] == "ChallengeGridWorld"
        assert metadata["config"]["variant"] == "collect"
        assert metadata["config"]["collectibles"] == [(0, 2), (0, 4)]

    def test_protocol_compliance(self, star_world):
        assert isinstance(star_world, WorldProtocol)
