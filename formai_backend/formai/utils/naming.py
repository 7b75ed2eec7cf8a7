# formai/utils/naming.py
"""
운동/기구 이름 정규화

AI 모델은 같은 기구를 매번 조금씩 다른 이름으로 부릅니다.
("flat bench press", "Bench Press (barbell)" ...)
응답을 내보내기 직전에 아래 규칙으로 대표 이름 하나로 맞춥니다.
"""

# (매칭 키워드, 대표 이름) - 위에서부터 먼저 맞는 규칙이 이깁니다.
_BENCH_PRESS_VARIANTS = (
    ("incline", "Incline Barbell Bench Press"),
    ("decline", "Decline Barbell Bench Press"),
)


def canonicalize_exercise_name(name: str) -> str:
    """
    자유 텍스트 운동 이름을 대표 이름으로 변환합니다.
    어떤 규칙에도 해당하지 않으면 원래 문자열을 그대로 반환합니다.

    :param name: 모델이 반환한 기구/운동 이름
    :return: 정규화된 이름
    """
    n = name.lower()

    if "bench press" in n:
        for keyword, canonical in _BENCH_PRESS_VARIANTS:
            if keyword in n:
                return canonical
        return "Barbell Bench Press"

    if "chest press" in n:
        return "Chest Press Machine"

    if "lat pulldown" in n or "lat pull-down" in n:
        return "Lat Pulldown"

    return name
