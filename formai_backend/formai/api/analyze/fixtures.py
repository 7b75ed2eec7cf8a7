# formai/api/analyze/fixtures.py
"""
데모 모드 고정 응답.
외부 API 없이 프론트엔드 개발/시연을 할 수 있도록 항상 같은 벤치프레스 예시를 돌려줍니다.
id와 createdAt은 요청마다 새로 채워집니다.
"""
import copy
from typing import Any, Dict

_DEMO_ANALYSIS = {
    "machine": {
        "name": "Barbell Bench Press",
        "confidence": 0.92,
        "muscles": {
            "primary": ["Pectoralis major"],
            "secondary": ["Anterior deltoids", "Triceps brachii"],
        },
    },
    "howItWorks": (
        "A flat bench and barbell setup where you press the barbell from chest level to arm's length "
        "to train the chest, shoulders, and triceps."
    ),
    "steps": [
        "Set the bar at a height where you can unrack with a slight elbow bend; load appropriate weight and add collars.",
        "Lie on the bench with eyes under the bar, feet planted, slight arch, and shoulder blades retracted.",
        "Grip the bar slightly wider than shoulder width; wrists straight and forearms vertical when the bar is on the chest.",
        "Unrack, bring the bar over mid-chest, inhale and lower under control to lightly touch the lower chest/sternum.",
        "Drive the bar back up by pressing through the chest and triceps, exhaling as you pass the sticking point.",
        "Lock out without hyperextending elbows; re-rack by guiding the bar back to the hooks with control.",
    ],
    "safetyRisks": [
        "Avoid flared elbows at 90°; keep ~45-70° to protect shoulders.",
        "Do not bounce the bar off the chest; pause lightly before pressing.",
        "Use spotter or safety arms; never max alone.",
        "Keep feet planted; avoid lifting hips off the bench.",
    ],
    "commonMistakes": [
        "Overly wide grip reducing range of motion.",
        "Letting wrists bend back excessively.",
        "Butt lifting off bench to cheat the rep.",
        "Bar path straight up/down instead of slight J-curve toward shoulders.",
    ],
    "alternatives": [
        "Dumbbell Bench Press",
        "Incline Barbell Bench Press",
        "Machine Chest Press",
        "Push-ups",
    ],
    "quickCoach": (
        "Set scapular retraction, light chest touch, and a controlled 2-3s lower. "
        "Drive through the feet, keep wrists stacked, and elbows ~60°."
    ),
}


def demo_analysis() -> Dict[str, Any]:
    """데모 응답의 사본을 반환합니다."""
    return copy.deepcopy(_DEMO_ANALYSIS)
