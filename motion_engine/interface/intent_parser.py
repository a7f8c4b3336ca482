"""
Rule-based command parser: text -> list of resolved Intents.

Examples:
    "raise right arm"                  -> pose: right shoulder pitch = 90
    "rotate left elbow 45"             -> pose: left elbow flex = 45
    "bend right knee by 20"            -> delta: right knee flex += 20
    "wave left arm"                    -> wave: left
    "pick up the red box"              -> pick: object_name="red box"
    "빨간 상자 집어"                    -> pick: object_name="빨간 상자"
    "drop it"                          -> drop
    "walk to 1.5 -2"                   -> move: target_position=[1.5, 0, -2]
    "pick up the ball and then drop it"
                                       -> [pick, drop]

No language model: patterns are regular expressions, anything else is
IntentType.UNKNOWN.  An external parser can replace this module since the
dispatcher only consumes ``Intent`` records.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from shared.messages.intent import Axis, Intent, IntentType, JointKind, Side

logger = logging.getLogger("motion_engine.interface.intent_parser")

RAISED_ARM_DEG = 90.0
LOWERED_ARM_DEG = 0.0

# Korean phrases rewritten to their English command before matching
_KOREAN_PHRASES: dict[str, str] = {
    "오른팔 올려": "raise right arm",
    "왼팔 올려": "raise left arm",
    "오른팔 내려": "lower right arm",
    "왼팔 내려": "lower left arm",
    "오른팔 흔들어": "wave right arm",
    "왼팔 흔들어": "wave left arm",
    "리셋": "reset",
    "초기화": "reset",
}

_SPLIT_RE = re.compile(r"\s*(?:,(?!\s*-?\d)|\band\s+then\b|\bthen\b|\band\b|그리고)\s*")

_NUM = r"(-?\d+(?:\.\d+)?)"
_SIDE = r"(left|right)"
_JOINT = r"(shoulder|elbow|hip|knee)"

_RAISE_RE = re.compile(rf"\braise\s+(?:the\s+|your\s+)?{_SIDE}\s+arm\b")
_LOWER_RE = re.compile(rf"\blower\s+(?:the\s+|your\s+)?{_SIDE}\s+arm\b")
_ROTATE_RE = re.compile(
    rf"\b(?:rotate|set|turn)\s+(?:the\s+)?{_SIDE}\s+{_JOINT}(?:\s+(roll|pitch))?\s+(by\s+|to\s+)?{_NUM}\s*(?:deg(?:rees?)?|°)?"
)
_BEND_RE = re.compile(rf"\b(bend|straighten)\s+(?:the\s+)?{_SIDE}\s+(elbow|knee)(?:\s+by\s+{_NUM})?")
_WAVE_RE = re.compile(rf"\bwave(?:\s+(?:the\s+|your\s+)?{_SIDE}(?:\s+arm)?)?\b")
_PICK_RE = re.compile(
    r"^(?:please\s+)?(?:pick\s+up|pick|grab|take|fetch|get)\b\s*(?:up\b\s*)?(?:the\s+|a\s+|an\s+)?(.*?)\s*$"
)
_PICK_KO_RE = re.compile(r"^(.*?)\s*(?:을|를)?\s*(?:집어|주워|들어)(?:\s*줘)?\s*$")
_DROP_RE = re.compile(r"^(?:please\s+)?(?:drop|release|let\s+go|put\s+(?:it\s+)?down|put\s+down)\b")
_DROP_KO_RE = re.compile(r"(?:내려\s*놔|내려\s*놓아|놓아|놔\s*줘)")
_MOVE_RE = re.compile(rf"\b(?:walk|move|go)\s+to\s+{_NUM}\s*[, ]\s*{_NUM}\s*$")

DEFAULT_BEND_DEG = 30.0


def split_commands(text: str) -> list[str]:
    """Split a compound command into its clauses, in order."""
    return [part for part in _SPLIT_RE.split(text.strip()) if part]


def parse_command(text: str) -> list[Intent]:
    """Parse *text* into one intent per clause.

    An empty command yields a single NOOP intent.
    """
    clauses = split_commands(text or "")
    if not clauses:
        return [Intent(type=IntentType.NOOP, text=text or "")]
    intents = [parse_clause(clause) for clause in clauses]
    logger.debug("Parsed %r -> %s", text, [i.type.value for i in intents])
    return intents


def parse_clause(text: str) -> Intent:
    """Parse a single clause with no conjunctions."""
    raw = text.strip()
    t = raw.lower()
    if not t:
        return Intent(type=IntentType.NOOP, text=raw)

    for ko, en in _KOREAN_PHRASES.items():
        if ko in t:
            t = en
            break

    intent = (
        _parse_arm_pose(t, raw)
        or _parse_rotate(t, raw)
        or _parse_bend(t, raw)
        or _parse_wave(t, raw)
        or _parse_reset(t, raw)
        or _parse_drop(t, raw)
        or _parse_move(t, raw)
        or _parse_pick(t, raw)
    )
    if intent is None:
        logger.debug("No rule matched %r", raw)
        return Intent(type=IntentType.UNKNOWN, text=raw)
    return intent


# ---------------------------------------------------------------------------
# Clause rules
# ---------------------------------------------------------------------------


def _parse_arm_pose(t: str, raw: str) -> Optional[Intent]:
    for pattern, angle in ((_RAISE_RE, RAISED_ARM_DEG), (_LOWER_RE, LOWERED_ARM_DEG)):
        m = pattern.search(t)
        if m:
            return Intent(
                type=IntentType.POSE,
                side=Side(m.group(1)),
                joint=JointKind.SHOULDER,
                axis=Axis.PITCH,
                angle=angle,
                text=raw,
            )
    return None


def _default_axis(joint: JointKind) -> Axis:
    return Axis.FLEX if joint in (JointKind.ELBOW, JointKind.KNEE) else Axis.PITCH


def _parse_rotate(t: str, raw: str) -> Optional[Intent]:
    m = _ROTATE_RE.search(t)
    if not m:
        return None
    side, joint_word, axis_word, mode, value = m.groups()
    joint = JointKind(joint_word)
    axis = Axis(axis_word) if axis_word else _default_axis(joint)
    is_delta = bool(mode) and mode.strip() == "by"
    return Intent(
        type=IntentType.DELTA if is_delta else IntentType.POSE,
        side=Side(side),
        joint=joint,
        axis=axis,
        angle=None if is_delta else float(value),
        delta=float(value) if is_delta else None,
        text=raw,
    )


def _parse_bend(t: str, raw: str) -> Optional[Intent]:
    m = _BEND_RE.search(t)
    if not m:
        return None
    verb, side, joint_word, value = m.groups()
    amount = float(value) if value is not None else DEFAULT_BEND_DEG
    return Intent(
        type=IntentType.DELTA,
        side=Side(side),
        joint=JointKind(joint_word),
        axis=Axis.FLEX,
        delta=amount if verb == "bend" else -amount,
        text=raw,
    )


def _parse_wave(t: str, raw: str) -> Optional[Intent]:
    m = _WAVE_RE.search(t)
    if not m:
        return None
    return Intent(type=IntentType.WAVE, side=Side(m.group(1) or "right"), text=raw)


def _parse_reset(t: str, raw: str) -> Optional[Intent]:
    if re.search(r"\breset\b", t):
        return Intent(type=IntentType.RESET, text=raw)
    return None


def _parse_drop(t: str, raw: str) -> Optional[Intent]:
    if _DROP_RE.search(t) or _DROP_KO_RE.search(t):
        return Intent(type=IntentType.DROP, text=raw)
    return None


def _parse_move(t: str, raw: str) -> Optional[Intent]:
    m = _MOVE_RE.search(t)
    if not m:
        return None
    x, z = float(m.group(1)), float(m.group(2))
    return Intent(type=IntentType.MOVE, target_position=[x, 0.0, z], text=raw)


def _parse_pick(t: str, raw: str) -> Optional[Intent]:
    m = _PICK_RE.match(t) or _PICK_KO_RE.match(t)
    if not m:
        return None
    name = m.group(1).strip()
    # "pick it up" and bare "pick up" leave no description
    if name in ("", "it", "it up", "something", "anything"):
        name = None
    return Intent(type=IntentType.PICK, object_name=name, text=raw)
