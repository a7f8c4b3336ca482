#!/usr/bin/env python3
"""
Run text commands against the demo scene and print the final scene snapshot.

Builds one robot plus a red box, blue ball and green cylinder, parses every
command argument with the rule-based parser and plays the resulting motions
in real time on an asyncio loop.

Usage:
    python scripts/run_scene.py "pick up the red box" "walk to 0 2" "drop it"
    python scripts/run_scene.py --verbose "빨간 상자 집어 그리고 내려놔"
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from motion_engine.config.engine_config import MotionSettings
from motion_engine.control.executor import ActionExecutor
from motion_engine.control.scheduler import AsyncioScheduler
from motion_engine.interface.dispatcher import IntentDispatcher
from motion_engine.interface.intent_parser import parse_command
from motion_engine.model.pose import Vector3
from motion_engine.model.scene import Actor, PickableObject, SceneState, ShapeType
from motion_engine.utils.logging_config import setup_logging
from shared.messages.events import PlanEventMessage

logger = logging.getLogger("run_scene")

ACTOR_ID = "robot"


def build_demo_scene(motion: MotionSettings) -> SceneState:
    scene = SceneState()
    scene.add_actor(Actor(id=ACTOR_ID, name="Robot", position=Vector3(0.0, motion.ground_y, 0.0)))
    floor = motion.object_ground_y
    for obj in (
        PickableObject("box-1", "Red Box", ShapeType.BOX, Vector3(1.0, floor, 0.0), "#ef4444"),
        PickableObject("ball-1", "Blue Ball", ShapeType.SPHERE, Vector3(-1.0, floor, 1.0), "#3b82f6"),
        PickableObject("cylinder-1", "Green Cylinder", ShapeType.CYLINDER, Vector3(0.5, floor, -1.5), "#10b981"),
    ):
        scene.add_object(obj)
    return scene


def log_event(event: PlanEventMessage) -> None:
    logger.debug("%s %s step=%s kind=%s", event.event.value, event.plan_id, event.step_index, event.step_kind)


async def run(commands: list[str]) -> SceneState:
    motion = MotionSettings.from_config()
    scene = build_demo_scene(motion)
    scheduler = AsyncioScheduler(asyncio.get_running_loop())
    executor = ActionExecutor(scene, scheduler, motion=motion, listener=log_event)
    dispatcher = IntentDispatcher(scene, executor, ACTOR_ID)

    intents = [intent for text in commands for intent in parse_command(text)]
    logger.info("Running %d intents from %d commands", len(intents), len(commands))

    done = asyncio.Event()
    results = dispatcher.dispatch_all(intents, on_complete=done.set)
    try:
        await done.wait()
    finally:
        executor.shutdown()

    for intent, result in zip(intents, results):
        status = "ok" if result.accepted else f"rejected ({result.reason})"
        logger.info("%-40r %s", intent.text, status)
    return scene


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Play text commands on the demo scene")
    parser.add_argument("commands", nargs="+", help="Commands, run in order")
    parser.add_argument("--verbose", "-v", action="store_true", help="Per-step DEBUG logging")
    parser.add_argument("--log-file", default=None, help="Also log to this rotating file")
    args = parser.parse_args()

    setup_logging(
        logging.INFO,
        log_file=args.log_file,
        engine_level=logging.DEBUG if args.verbose else None,
    )
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    scene = asyncio.run(run(args.commands))
    print(json.dumps(scene.snapshot().model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
