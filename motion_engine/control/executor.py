"""
Action Executor: drive an ActionPlan against the scene, one step at a time.

Each run is a small state machine::

    IDLE --advance()--> RUNNING(step 0) --step done--> RUNNING(step 1) ... --> DONE
                              \\------------ new plan for same actor -----------> SUPERSEDED

Interpolated steps (navigate, align, squat, reach, lift, stand) tick on a
periodic timer and commit a clamped pose on every tick.  Discrete steps
(grasp, drop) mutate the scene once and then wait out their duration.

Only one run is live per actor; starting a new one cancels the old one's
timers and its completion callback is never invoked.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from motion_engine.config.engine_config import MotionSettings, TimingSettings
from motion_engine.control.scheduler import Scheduler, TimerHandle
from motion_engine.model.pose import JOINT_NAMES, NUM_JOINTS, Pose, Vector3
from motion_engine.model.scene import Actor, SceneState
from motion_engine.motion import library
from motion_engine.motion.easing import ease_in_out, ease_out, ease_out_back
from motion_engine.motion.interpolation import blend_joints, lerp, lerp_pose, lerp_vec3
from motion_engine.motion.keyframes import MotionSequence
from motion_engine.planning.action_plan import (
    ActionPlan,
    ActionStep,
    AlignStep,
    DropStep,
    GraspStep,
    LiftStep,
    NavigateStep,
    ReachStep,
    SquatStep,
    StandStep,
    is_well_formed,
)
from motion_engine.safety.limits import JointLimits, constrain_pose
from shared.messages.events import PlanEventMessage, PlanEventType

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[], None]
EventListener = Callable[[PlanEventMessage], None]

# Squat: share of the step spent on the weight-shift pose
SQUAT_PREP_FRACTION = 0.3
# Reach: shoulders lead, elbows trail by a fixed offset and stop short of the target
REACH_SHOULDER_GAIN = 1.3
REACH_ELBOW_DELAY = 0.15
# Lift: torso stays bent until this share of the eased lift
LIFT_TORSO_DELAY = 0.4

_REACH_SHOULDER_MASK = np.array(
    [n in ("left_arm.shoulder_pitch", "right_arm.shoulder_pitch") for n in JOINT_NAMES]
)
_REACH_ELBOW_MASK = np.array([n in ("left_arm.elbow_flex", "right_arm.elbow_flex") for n in JOINT_NAMES])


class PlanState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    SUPERSEDED = "superseded"


_TERMINAL = (PlanState.DONE, PlanState.SUPERSEDED)


@dataclass(frozen=True)
class ExecutionCursor:
    """Where a run is: the current step and the actor as it was when the step began."""

    step_index: int
    started_at: float  # scheduler clock, seconds
    start_actor: Actor


class PlanRun:
    """One execution of a plan for one actor."""

    def __init__(
        self,
        executor: ActionExecutor,
        plan: ActionPlan,
        actor_id: str,
        on_complete: Optional[CompletionCallback] = None,
    ):
        self.plan = plan
        self.actor_id = actor_id
        self.state = PlanState.IDLE
        self.cursor: Optional[ExecutionCursor] = None
        self.progress = 0.0  # of the current step, 0-1
        self.steps_completed = 0
        self.steps_skipped = 0
        self._executor = executor
        self._on_complete = on_complete
        self._timer: Optional[TimerHandle] = None

    @property
    def stage_count(self) -> int:
        return len(self.plan.steps)

    @property
    def transitions(self) -> int:
        """Steps finished so far, completed or skipped."""
        return self.steps_completed + self.steps_skipped

    @property
    def is_active(self) -> bool:
        return self.state not in _TERMINAL

    @property
    def current_step(self) -> Optional[ActionStep]:
        if self.cursor is None or self.cursor.step_index >= len(self.plan.steps):
            return None
        return self.plan.steps[self.cursor.step_index]

    def advance(self) -> None:
        """Leave the current step and enter the next one, or finish."""
        if not self.is_active:
            return
        index = 0 if self.cursor is None else self.cursor.step_index + 1
        if index >= self.stage_count:
            self._finish()
            return
        self.state = PlanState.RUNNING
        self.progress = 0.0
        self.cursor = ExecutionCursor(
            step_index=index,
            started_at=self._executor.scheduler.now(),
            start_actor=self._executor.scene.get_actor(self.actor_id),
        )
        self._executor._start_stage(self)

    def _finish(self) -> None:
        self.state = PlanState.DONE
        self.cursor = None
        self._executor._on_run_finished(self)
        if self._on_complete is not None:
            self._on_complete()

    def __repr__(self) -> str:
        index = self.cursor.step_index if self.cursor else None
        return f"<PlanRun {self.plan.plan_id} actor={self.actor_id} {self.state.value} step={index}>"


class SequenceRun(PlanRun):
    """A keyframed MotionSequence played as a single stage."""

    def __init__(self, executor, sequence: MotionSequence, actor_id, on_complete=None):
        label = sequence.label or "sequence"
        super().__init__(executor, ActionPlan(plan_id=f"seq-{label}"), actor_id, on_complete)
        self.sequence = sequence

    @property
    def stage_count(self) -> int:
        return 1


# A tick driver maps (progress 0-1, elapsed ms) to a scene commit.
TickDriver = Callable[[float, float], None]


class ActionExecutor:
    """Runs ActionPlans and MotionSequences on a Scheduler."""

    def __init__(
        self,
        scene: SceneState,
        scheduler: Scheduler,
        timing: Optional[TimingSettings] = None,
        motion: Optional[MotionSettings] = None,
        limits: Optional[JointLimits] = None,
        listener: Optional[EventListener] = None,
    ):
        self.scene = scene
        self.scheduler = scheduler
        self.timing = timing or TimingSettings.from_config()
        self.motion = motion or MotionSettings.from_config()
        self.limits = limits
        self.listener = listener
        self._runs: dict[str, PlanRun] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(
        self,
        plan: ActionPlan,
        actor_id: str,
        on_complete: Optional[CompletionCallback] = None,
    ) -> PlanRun:
        """Start *plan* for *actor_id*. A live run for the same actor is superseded."""
        self.scene.get_actor(actor_id)  # KeyError for unknown actors
        run = PlanRun(self, plan, actor_id, on_complete)
        self._begin(run)
        return run

    def play_sequence(
        self,
        sequence: MotionSequence,
        actor_id: str,
        on_complete: Optional[CompletionCallback] = None,
    ) -> PlanRun:
        """Play a keyframed sequence on *actor_id*. Looping sequences run until superseded."""
        self.scene.get_actor(actor_id)
        run = SequenceRun(self, sequence, actor_id, on_complete)
        self._begin(run)
        return run

    def is_busy(self, actor_id: str) -> bool:
        run = self._runs.get(actor_id)
        return run is not None and run.is_active

    def active_run(self, actor_id: str) -> Optional[PlanRun]:
        run = self._runs.get(actor_id)
        return run if run is not None and run.is_active else None

    def cancel(self, actor_id: str) -> bool:
        """Stop the live run of *actor_id* without invoking its callback."""
        run = self.active_run(actor_id)
        if run is None:
            return False
        self._supersede(run)
        return True

    def shutdown(self) -> int:
        """Cancel every live run and outstanding timer. Returns timers cancelled."""
        outstanding = self.scheduler.active_count
        for run in list(self._runs.values()):
            if run.is_active:
                self._supersede(run)
        self._runs.clear()
        self.scheduler.cancel_all()
        return outstanding

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def _begin(self, run: PlanRun) -> None:
        previous = self._runs.get(run.actor_id)
        if previous is not None and previous.is_active:
            logger.info("Plan %s supersedes %s", run.plan.plan_id, previous.plan.plan_id)
            self._supersede(previous)
        self._runs[run.actor_id] = run
        logger.info(
            "Executing plan %s for %s (%d stages)", run.plan.plan_id, run.actor_id, run.stage_count
        )
        self._emit(run, PlanEventType.PLAN_STARTED)
        run.advance()

    def _supersede(self, run: PlanRun) -> None:
        self.scheduler.cancel(run._timer)
        run._timer = None
        run.state = PlanState.SUPERSEDED
        self._emit(run, PlanEventType.PLAN_SUPERSEDED)

    def _on_run_finished(self, run: PlanRun) -> None:
        logger.info("Plan %s completed for %s", run.plan.plan_id, run.actor_id)
        self._emit(run, PlanEventType.PLAN_COMPLETED)
        if self._runs.get(run.actor_id) is run:
            del self._runs[run.actor_id]

    def _start_stage(self, run: PlanRun) -> None:
        if isinstance(run, SequenceRun):
            self._start_ticking(run, run.sequence.duration_ms, self._sequence_driver(run), run.sequence)
            return

        step = run.current_step
        index = run.cursor.step_index
        if not is_well_formed(step):
            logger.warning("Skipping malformed %s step %d of %s", step.kind.value, index, run.plan.plan_id)
            run.steps_skipped += 1
            self._emit(run, PlanEventType.STEP_SKIPPED, step)
            run.advance()
            return

        logger.debug("Plan %s step %d: %s (%.0f ms)", run.plan.plan_id, index, step.kind.value, step.duration_ms)
        self._emit(run, PlanEventType.STEP_STARTED, step)

        if isinstance(step, GraspStep):
            self._grasp(run, step)
        elif isinstance(step, DropStep):
            self._drop(run, step)
        else:
            driver = self._driver_for(run, step)
            self._start_ticking(run, step.duration_ms, driver)

    def _complete_stage(self, run: PlanRun) -> None:
        self.scheduler.cancel(run._timer)
        run._timer = None
        if not run.is_active:
            return
        run.progress = 1.0
        run.steps_completed += 1
        self._emit(run, PlanEventType.STEP_COMPLETED, run.current_step)
        run.advance()

    def _start_ticking(
        self,
        run: PlanRun,
        duration_ms: float,
        driver: TickDriver,
        sequence: Optional[MotionSequence] = None,
    ) -> None:
        started_at = run.cursor.started_at

        def tick() -> None:
            elapsed_ms = (self.scheduler.now() - started_at) * 1000.0
            if duration_ms <= 0:
                progress = 1.0
            else:
                progress = min(elapsed_ms / duration_ms, 1.0)
            if sequence is not None and sequence.loop:
                progress = sequence.normalized_time(elapsed_ms)
            run.progress = progress
            driver(progress, elapsed_ms)
            finished = sequence.is_finished(elapsed_ms) if sequence is not None else progress >= 1.0
            if finished:
                self._complete_stage(run)

        run._timer = self.scheduler.call_every(self.timing.tick_ms / 1000.0, tick)

    # ------------------------------------------------------------------
    # Scene commits
    # ------------------------------------------------------------------

    def _commit(
        self,
        actor_id: str,
        pose: Optional[Pose] = None,
        position: Optional[Vector3] = None,
        heading: Optional[float] = None,
    ) -> None:
        changes = {}
        if pose is not None:
            changes["pose"] = constrain_pose(pose, self.limits)
        if position is not None:
            changes["position"] = position
        if heading is not None:
            changes["heading"] = float(heading)
        if changes:
            self.scene.update_actor(actor_id, **changes)

    # ------------------------------------------------------------------
    # Discrete steps
    # ------------------------------------------------------------------

    def _grasp(self, run: PlanRun, step: GraspStep) -> None:
        if self.scene.find_object(step.object_id) is None:
            logger.warning("Grasp target %s not in scene; nothing attached", step.object_id)
        elif self.scene.attach(run.actor_id, step.object_id):
            logger.info("%s grasped %s", run.actor_id, step.object_id)
        self._wait_out(run, step.duration_ms)

    def _drop(self, run: PlanRun, step: DropStep) -> None:
        released = self.scene.detach(run.actor_id, self.motion.object_ground_y)
        if released is None:
            logger.warning("%s has nothing to drop", run.actor_id)
        else:
            logger.info("%s dropped %s", run.actor_id, released)
        self._wait_out(run, step.duration_ms)

    def _wait_out(self, run: PlanRun, duration_ms: float) -> None:
        run._timer = self.scheduler.call_later(
            max(duration_ms, 0.0) / 1000.0, lambda: self._complete_stage(run)
        )

    # ------------------------------------------------------------------
    # Interpolated step drivers
    # ------------------------------------------------------------------

    def _driver_for(self, run: PlanRun, step: ActionStep) -> TickDriver:
        builders = {
            NavigateStep: self._navigate_driver,
            AlignStep: self._align_driver,
            SquatStep: self._squat_driver,
            ReachStep: self._reach_driver,
            LiftStep: self._lift_driver,
            StandStep: self._stand_driver,
        }
        return builders[type(step)](run, step)

    def _navigate_driver(self, run: PlanRun, step: NavigateStep) -> TickDriver:
        start = run.cursor.start_actor
        ground_y = self.motion.ground_y
        target = step.target.with_y(ground_y)
        stride_ms = self.timing.stride_ms
        bob = self.motion.bob_amplitude
        if step.heading is not None:
            # face the destination before the first stride
            self._commit(run.actor_id, heading=step.heading)

        def drive(progress: float, elapsed_ms: float) -> None:
            if progress >= 1.0:
                self._commit(run.actor_id, position=target)
                return
            eased = ease_in_out(progress)
            phase = (elapsed_ms % stride_ms) / stride_ms
            pos = lerp_vec3(start.position, target, eased).with_y(
                ground_y + math.sin(phase * 2.0 * math.pi) * bob
            )
            self._commit(run.actor_id, pose=library.walk_cycle(phase), position=pos)

        return drive

    def _align_driver(self, run: PlanRun, step: AlignStep) -> TickDriver:
        start_heading = run.cursor.start_actor.heading

        def drive(progress: float, elapsed_ms: float) -> None:
            # raw numeric interpolation, no shortest-arc wrapping
            self._commit(run.actor_id, heading=lerp(start_heading, step.heading, ease_in_out(progress)))

        return drive

    def _squat_driver(self, run: PlanRun, step: SquatStep) -> TickDriver:
        start = run.cursor.start_actor
        prep, full = library.squat_prep(), library.squat()
        ground_y, depth = self.motion.ground_y, self.motion.squat_depth

        def drive(progress: float, elapsed_ms: float) -> None:
            if progress < SQUAT_PREP_FRACTION:
                pose = lerp_pose(start.pose, prep, progress / SQUAT_PREP_FRACTION)
            else:
                pose = lerp_pose(prep, full, (progress - SQUAT_PREP_FRACTION) / (1.0 - SQUAT_PREP_FRACTION))
            y = ground_y - ease_out_back(progress) * depth
            self._commit(run.actor_id, pose=pose, position=start.position.with_y(y))

        return drive

    def _reach_driver(self, run: PlanRun, step: ReachStep) -> TickDriver:
        start = run.cursor.start_actor
        target = library.reach_down()

        def drive(progress: float, elapsed_ms: float) -> None:
            eased = ease_out(progress)
            shoulder = min(eased * REACH_SHOULDER_GAIN, 1.0)
            elbow = max(0.0, eased - REACH_ELBOW_DELAY)
            weights = np.zeros(NUM_JOINTS)
            weights[_REACH_SHOULDER_MASK] = shoulder
            weights[_REACH_ELBOW_MASK] = elbow
            self._commit(run.actor_id, pose=blend_joints(start.pose, target, weights))

        return drive

    def _lift_driver(self, run: PlanRun, step: LiftStep) -> TickDriver:
        start = run.cursor.start_actor
        ground_y, depth = self.motion.ground_y, self.motion.squat_depth
        start_torso = start.pose.torso.pitch

        def drive(progress: float, elapsed_ms: float) -> None:
            actor = self.scene.get_actor(run.actor_id)
            held = self.scene.find_object(actor.holding_object_id)
            weight = held.size if held is not None else self.motion.default_weight
            target = library.holding(weight, self.motion.heavy_weight_threshold)

            eased = ease_out(progress)
            torso_phase = max(0.0, (eased - LIFT_TORSO_DELAY) / (1.0 - LIFT_TORSO_DELAY))
            pose = lerp_pose(start.pose, target, eased).with_torso(
                pitch=lerp(start_torso, target.torso.pitch, torso_phase)
            )
            y = lerp(ground_y - depth, ground_y, eased)
            self._commit(run.actor_id, pose=pose, position=start.position.with_y(y))

        return drive

    def _stand_driver(self, run: PlanRun, step: StandStep) -> TickDriver:
        start = run.cursor.start_actor
        rest = library.idle()
        ground_y, depth = self.motion.ground_y, self.motion.squat_depth

        def drive(progress: float, elapsed_ms: float) -> None:
            eased = ease_in_out(progress)
            y = lerp(ground_y - depth, ground_y, eased)
            self._commit(
                run.actor_id,
                pose=lerp_pose(start.pose, rest, eased),
                position=start.position.with_y(y),
            )

        return drive

    def _sequence_driver(self, run: SequenceRun) -> TickDriver:
        sequence = run.sequence

        def drive(progress: float, elapsed_ms: float) -> None:
            pose, position = sequence.sample(elapsed_ms)
            self._commit(run.actor_id, pose=pose, position=position)

        return drive

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, run: PlanRun, event: PlanEventType, step: Optional[ActionStep] = None) -> None:
        if self.listener is None:
            return
        message = PlanEventMessage(
            event=event,
            plan_id=run.plan.plan_id,
            actor_id=run.actor_id,
            step_index=run.cursor.step_index if run.cursor is not None else None,
            step_kind=step.kind.value if step is not None else None,
            timestamp=self.scheduler.now(),
        )
        try:
            self.listener(message)
        except Exception:
            logger.exception("Plan event listener failed on %s", event.value)
