# keywords: [verdict, win condition, goal, collectibles]
"""Decide success or failure once a program has run to the end."""

from interfaces import ActorState, RunOutcome, WorldProtocol


def evaluate(world: WorldProtocol, state: ActorState) -> bool:
    """Success check for a run that finished without an illegal move.

    - Goal worlds: the head must stand on the goal cell.
    - Collectible worlds: every collectible must have been gathered, in any order.
    - Worlds with neither objective are free play and always succeed.
    """
    if world.goal is not None:
        return state.position == world.goal
    if world.collectibles:
        return set(world.collectibles).issubset(state.collected)
    return True


def outcome_for(world: WorldProtocol, state: ActorState) -> str:
    return RunOutcome.SUCCESS if evaluate(world, state) else RunOutcome.INCOMPLETE
