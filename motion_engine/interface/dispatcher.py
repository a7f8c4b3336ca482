"""
Intent dispatcher: the caller that turns resolved Intents into scene changes.

Preconditions live here, not in the planner:

    pick   -> rejected if the actor already holds something or nothing resolves
    drop   -> rejected if the actor holds nothing
    any    -> rejected with reason "busy" while a plan is running

Direct joint intents (pose, delta, reset) apply immediately through the
joint-limit clamp.  Rejections never mutate the scene.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from motion_engine.config.engine_config import PlannerSettings
from motion_engine.control.executor import ActionExecutor, PlanRun
from motion_engine.model.pose import Vector3
from motion_engine.model.scene import PickableObject, SceneState
from motion_engine.motion import library
from motion_engine.motion.keyframes import wave_sequence
from motion_engine.planning.action_plan import ActionPlan
from motion_engine.planning.action_planner import (
    create_drop_plan,
    create_move_plan,
    create_pick_plan,
    find_target,
)
from motion_engine.safety.limits import constrain_pose
from shared.messages.intent import Intent, IntentType, Side

logger = logging.getLogger("motion_engine.interface.dispatcher")

CompletionCallback = Callable[[], None]

REASON_BUSY = "busy"
REASON_HOLDING = "already holding an object"
REASON_NOT_HOLDING = "not holding anything"
REASON_NO_TARGET = "no matching object"
REASON_BAD_JOINT = "invalid joint"
REASON_MISSING_VALUE = "missing value"
REASON_UNRECOGNIZED = "unrecognized command"


@dataclass
class DispatchResult:
    """Outcome of dispatching one intent."""

    accepted: bool
    reason: str = ""
    plan: Optional[ActionPlan] = None
    run: Optional[PlanRun] = None


class IntentDispatcher:
    """Dispatch intents for one actor against a scene and executor."""

    def __init__(
        self,
        scene: SceneState,
        executor: ActionExecutor,
        actor_id: str,
        planner: Optional[PlannerSettings] = None,
    ):
        self.scene = scene
        self.executor = executor
        self.actor_id = actor_id
        self.planner = planner or PlannerSettings.from_config()

    def dispatch(self, intent: Intent, on_complete: Optional[CompletionCallback] = None) -> DispatchResult:
        """Act on *intent*. *on_complete* fires once the resulting motion has finished.

        Immediate intents complete before this returns; rejected intents never
        call *on_complete*.
        """
        if self.executor.is_busy(self.actor_id):
            return self._reject(intent, REASON_BUSY)

        handler = {
            IntentType.PICK: self._pick,
            IntentType.DROP: self._drop,
            IntentType.MOVE: self._move,
            IntentType.POSE: self._pose,
            IntentType.DELTA: self._delta,
            IntentType.RESET: self._reset,
            IntentType.WAVE: self._wave,
        }.get(intent.type)
        if handler is None:
            return self._reject(intent, REASON_UNRECOGNIZED)
        return handler(intent, on_complete)

    def dispatch_all(
        self,
        intents: Iterable[Intent],
        on_complete: Optional[CompletionCallback] = None,
    ) -> list[DispatchResult]:
        """Run *intents* one after another, each waiting for the previous to finish.

        Rejected intents are skipped.  *on_complete* fires once, after the last
        intent.  The returned list fills in as the queue drains.
        """
        pending = deque(intents)
        results: list[DispatchResult] = []

        def run_next() -> None:
            while pending:
                intent = pending.popleft()
                # immediate intents re-enter run_next before dispatch returns
                slot = len(results)
                results.append(DispatchResult(accepted=False, reason="pending"))
                result = self.dispatch(intent, on_complete=run_next)
                results[slot] = result
                if result.accepted:
                    return
            if on_complete is not None:
                on_complete()

        run_next()
        return results

    # ------------------------------------------------------------------
    # Planned intents
    # ------------------------------------------------------------------

    def _pick(self, intent: Intent, on_complete) -> DispatchResult:
        actor = self.scene.get_actor(self.actor_id)
        if actor.is_holding:
            return self._reject(intent, REASON_HOLDING)

        target = self._resolve(intent)
        if target is None:
            return self._reject(intent, REASON_NO_TARGET)

        plan = create_pick_plan(actor, target, self.planner, self.executor.motion)
        return self._run(intent, plan, on_complete)

    def _drop(self, intent: Intent, on_complete) -> DispatchResult:
        actor = self.scene.get_actor(self.actor_id)
        if not actor.is_holding:
            return self._reject(intent, REASON_NOT_HOLDING)
        return self._run(intent, create_drop_plan(actor, self.planner), on_complete)

    def _move(self, intent: Intent, on_complete) -> DispatchResult:
        if not intent.target_position or len(intent.target_position) != 3:
            return self._reject(intent, REASON_MISSING_VALUE)
        actor = self.scene.get_actor(self.actor_id)
        destination = Vector3.from_array(intent.target_position)
        plan = create_move_plan(actor, destination, self.planner, self.executor.motion)
        return self._run(intent, plan, on_complete)

    def _wave(self, intent: Intent, on_complete) -> DispatchResult:
        actor = self.scene.get_actor(self.actor_id)
        side = (intent.side or Side.RIGHT).value
        run = self.executor.play_sequence(wave_sequence(actor.pose, side=side), self.actor_id, on_complete)
        logger.info("Dispatched wave (%s) for %s", side, self.actor_id)
        return DispatchResult(accepted=True, run=run)

    def _resolve(self, intent: Intent) -> Optional[PickableObject]:
        if intent.object_id:
            obj = self.scene.find_object(intent.object_id)
            return obj if obj is not None and not obj.is_attached else None
        return find_target(self.scene.objects(), intent.object_name)

    def _run(self, intent: Intent, plan: ActionPlan, on_complete) -> DispatchResult:
        logger.info("Dispatching %s as plan %s (%d steps)", intent.type.value, plan.plan_id, len(plan))
        run = self.executor.execute(plan, self.actor_id, on_complete)
        return DispatchResult(accepted=True, plan=plan, run=run)

    # ------------------------------------------------------------------
    # Immediate intents
    # ------------------------------------------------------------------

    def _pose(self, intent: Intent, on_complete) -> DispatchResult:
        joint = intent.joint_name
        if joint is None:
            return self._reject(intent, REASON_BAD_JOINT)
        if intent.angle is None:
            return self._reject(intent, REASON_MISSING_VALUE)
        actor = self.scene.get_actor(self.actor_id)
        return self._apply(actor.pose.with_joint(joint, intent.angle), on_complete)

    def _delta(self, intent: Intent, on_complete) -> DispatchResult:
        joint = intent.joint_name
        if joint is None:
            return self._reject(intent, REASON_BAD_JOINT)
        if intent.delta is None:
            return self._reject(intent, REASON_MISSING_VALUE)
        actor = self.scene.get_actor(self.actor_id)
        return self._apply(actor.pose.with_joint(joint, actor.pose.get(joint) + intent.delta), on_complete)

    def _reset(self, intent: Intent, on_complete) -> DispatchResult:
        actor = self.scene.get_actor(self.actor_id)
        self.scene.update_actor(
            self.actor_id,
            pose=library.idle(),
            position=actor.position.with_y(self.executor.motion.ground_y),
        )
        logger.info("Reset %s to idle", self.actor_id)
        if on_complete is not None:
            on_complete()
        return DispatchResult(accepted=True)

    def _apply(self, pose, on_complete) -> DispatchResult:
        self.scene.update_actor(self.actor_id, pose=constrain_pose(pose, self.executor.limits))
        if on_complete is not None:
            on_complete()
        return DispatchResult(accepted=True)

    def _reject(self, intent: Intent, reason: str) -> DispatchResult:
        logger.warning("Rejected %s intent %r: %s", intent.type.value, intent.text, reason)
        return DispatchResult(accepted=False, reason=reason)
