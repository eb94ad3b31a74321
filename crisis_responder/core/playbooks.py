"""
CrisisAI Responder - Playbook Table

Keyword sets for severity assessment and the ordered category rules with
their guidance payloads. Everything here is data; the evaluation lives in
``crisis_responder.core.classifier``.

The severity keyword sets and the category keywords are maintained
separately and overlap only partially (e.g. "drowning" is a critical
severity term, but the drowning category never forces escalation). Unifying
them would change the severity reported for existing inputs.

Payload wording is user-facing guidance read during an emergency and must be
kept verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from crisis_responder.core.types import Category, ResourceLink, Severity


# =============================================================================
# Severity Keyword Sets (evaluated in this order, first match wins)
# =============================================================================

CRITICAL_KEYWORDS: Tuple[str, ...] = (
    "fire", "flame", "smoke", "explosion", "cardiac", "heart attack",
    "not breathing", "unconscious", "collapsed", "drowning", "shooting",
    "stabbing", "severe bleeding", "choking",
)

HIGH_KEYWORDS: Tuple[str, ...] = (
    "accident", "crash", "collision", "injury", "broken bone", "unconscious",
    "seizure", "allergic reaction", "overdose", "flood", "gas leak",
)

MEDIUM_KEYWORDS: Tuple[str, ...] = (
    "fall", "cut", "burn", "sprain", "dizzy", "chest pain",
    "difficulty breathing", "nausea",
)


# =============================================================================
# Category Rules
# =============================================================================

@dataclass(frozen=True)
class CategoryRule:
    """
    One row of the category table.

    A rule matches when any keyword is a substring of the lower-cased
    message, or, for ``matches_images`` rules, when at least one image is
    attached.
    """
    category: Category
    headline: str
    steps: Tuple[str, ...]
    keywords: Tuple[str, ...] = ()
    matches_images: bool = False
    resources: Tuple[ResourceLink, ...] = ()
    forced_severity: Optional[Severity] = None
    forces_emergency: bool = False

    def matches(self, text_lower: str, image_count: int) -> bool:
        if self.matches_images:
            return image_count > 0
        return any(kw in text_lower for kw in self.keywords)


FIRE = CategoryRule(
    category=Category.FIRE,
    keywords=("fire", "flame", "smoke", "explosion"),
    headline="🔥 FIRE EMERGENCY — Immediate evacuation required. Do not attempt to fight the fire.",
    steps=(
        "Activate the nearest fire alarm pull station immediately.",
        "Call 911 — provide your exact address, building floor, and number of people.",
        "Do NOT use elevators — evacuate via stairwells only.",
        "Feel doors with the back of your hand before opening. If hot, use alternate route.",
        "Stay low below smoke while evacuating. Cover nose and mouth.",
        "If trapped, seal door gaps with clothing and signal from a window.",
        "Once outside, move at least 300 feet away from the building.",
        "Never re-enter until fire department gives all-clear.",
    ),
    resources=(
        ResourceLink(name="Fire Emergency: 911", type="call"),
        ResourceLink(name="National Fire Protection Association", url="https://www.nfpa.org"),
    ),
)

ACCIDENT = CategoryRule(
    category=Category.ACCIDENT,
    keywords=("accident", "crash", "collision", "overturned"),
    headline="🚗 VEHICLE ACCIDENT — Life safety is the priority. Do not move injured persons.",
    steps=(
        "Call 911 immediately — report location, number of vehicles, visible injuries, hazards.",
        "Turn on hazard lights and place warning triangles/flares at safe distance.",
        "Turn off ignition of vehicles if safe to do so — prevent fire risk.",
        "Do NOT move injured persons unless in immediate danger of fire/explosion.",
        "For conscious victims: keep warm, calm, and still until help arrives.",
        "Apply firm pressure to severe bleeding wounds using clean cloth.",
        "Check for responsive/breathing in unconscious victims — begin CPR if needed.",
        "Prevent bystanders from crowding the scene to keep pathways clear for responders.",
    ),
    resources=(
        ResourceLink(name="Emergency: 911", type="call"),
        ResourceLink(
            name="American Red Cross First Aid",
            url="https://www.redcross.org/take-a-class/first-aid",
        ),
    ),
)

CARDIAC = CategoryRule(
    category=Category.CARDIAC,
    keywords=(
        "heart", "cardiac", "chest pain", "not breathing", "collapsed",
        "unconscious", "cpr",
    ),
    headline="❤️ CARDIAC EMERGENCY — Begin life-saving measures now. Every second matters.",
    steps=(
        "Call 911 immediately — stay on the line for instructions.",
        'Check responsiveness: tap shoulders firmly and shout "Are you okay?"',
        "If unresponsive and not breathing normally — begin CPR immediately.",
        "CPR: Place heel of hand on center of chest. Push hard and fast (100–120/min).",
        "Compression depth: at least 2 inches. Allow full chest recoil between compressions.",
        "After 30 compressions, give 2 rescue breaths if trained. Otherwise continue compressions.",
        "Use an AED if available — it will guide you. Turn on and follow voice prompts.",
        "Continue CPR without interruption until emergency services take over.",
    ),
    resources=(
        ResourceLink(name="Emergency: 911", type="call"),
        ResourceLink(name="American Heart Association CPR", url="https://cpr.heart.org"),
    ),
)

DROWNING = CategoryRule(
    category=Category.DROWNING,
    keywords=("drown", "water", "pool", "lake", "river"),
    headline="🌊 DROWNING EMERGENCY — Do not enter the water unless trained. Reach, throw, don't go.",
    steps=(
        "Call 911 immediately.",
        "Do NOT jump in water unless you are a trained lifeguard.",
        "Throw a rope, life ring, towel, or any floating object to the victim.",
        "If victim is out of water and unconscious — check breathing.",
        "Begin CPR if not breathing — start with 5 rescue breaths before chest compressions.",
        "Keep victim warm — prevent hypothermia with blankets.",
        "Even if victim appears to recover, always seek immediate medical evaluation.",
    ),
)

IMAGE_ANALYSIS = CategoryRule(
    category=Category.IMAGE_ANALYSIS,
    matches_images=True,
    headline="📸 Image received and analyzed. Emergency situation detected requiring immediate response.",
    steps=(
        "Ensure you are in a safe position away from the hazard.",
        "Call 911 with your exact location and describe what you see.",
        "Do not approach hazardous materials, damaged structures, or unstable areas.",
        "Provide first aid only if you have been trained and it is safe to do so.",
        "Document the scene with photos only if it does not increase your risk.",
        "Keep other people away from the scene until responders arrive.",
        "Stay on the line with emergency services and follow their instructions.",
    ),
    forced_severity=Severity.HIGH,
    forces_emergency=True,
)

CHOKING = CategoryRule(
    category=Category.CHOKING,
    keywords=("chok", "heimlich"),
    headline="😮 CHOKING EMERGENCY — Act immediately. Time is critical.",
    steps=(
        'Ask "Are you choking?" — if they cannot speak/cough/breathe, act immediately.',
        "Call 911 or have someone call while you assist.",
        "Stand behind the person and give 5 firm back blows between shoulder blades.",
        "Perform 5 abdominal thrusts (Heimlich): wrap arms around waist, thrust upward.",
        "Alternate back blows and abdominal thrusts until object dislodges.",
        "If the person becomes unconscious, lower them carefully and begin CPR.",
        "For infants: use 5 back blows + 5 chest thrusts (not abdominal thrusts).",
    ),
    forces_emergency=True,
)

GAS_LEAK = CategoryRule(
    category=Category.GAS_LEAK,
    keywords=("gas", "leak", "smell"),
    headline="⚠️ GAS LEAK SUSPECTED — Evacuate immediately. Do not create sparks.",
    steps=(
        "Do NOT turn any light switches, appliances, or phones on or off.",
        "Open doors and windows immediately as you exit.",
        "Evacuate everyone from the building — do not use elevators.",
        "Do not use your phone inside the building — wait until outside.",
        "Once outside, call 911 and your gas utility company.",
        "Keep everyone at least 300 feet from the building.",
        "Do not re-enter until authorities declare it safe.",
    ),
    forces_emergency=True,
)

GENERAL = CategoryRule(
    category=Category.GENERAL,
    headline="🆘 Emergency situation logged. Please provide more details for specific guidance.",
    steps=(
        "Assess your immediate surroundings for safety.",
        "Call 911 if there is any risk to life or property.",
        "Move yourself and others away from the hazard if possible.",
        "Provide first aid only if trained and safe to do so.",
        "Wait for emergency services — do not hang up if on call with 911.",
        "Document the situation for responders if safe.",
    ),
)

# Priority order matters: the first matching rule wins.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    FIRE,
    ACCIDENT,
    CARDIAC,
    DROWNING,
    IMAGE_ANALYSIS,
    CHOKING,
    GAS_LEAK,
)

FALLBACK_RULE = GENERAL

RULES_VERSION = "keyword-rules-v1"
