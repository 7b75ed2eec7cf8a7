# formai/api/analyze/prompts.py
"""
기구 분석에 사용하는 프롬프트와 메시지 구성 함수.

- OUTPUT_SHAPE_CONTRACT: 출력 JSON 형태 규칙 (재시도 때는 이것만 다시 전달)
- SYSTEM_PROMPT: 작업 설명 + 출력 형태 규칙
"""
from typing import Any, Dict, List, Optional

TASK_PREAMBLE = """You are FormAI, a concise, friendly, safety-first gym assistant.
Given a photo of a gym machine OR free-weight setup, identify the exact common exercise name and coach the user:
1) Name the machine/exercise (use canonical, widely-used names). Prefer classic compound names. Examples:
   - Free-weight barbell on a flat bench with rack/spotter arms -> "Barbell Bench Press"
   - Bench + barbell angled upward -> "Incline Barbell Bench Press"
   - Seated cable with high pulley and wide bar -> "Lat Pulldown"
2) Which muscles are targeted (primary/secondary).
3) Explain how the machine works.
4) Provide beginner-friendly, step-by-step usage instructions.
5) List safety risks and how to avoid them.
6) List common mistakes.
7) Recommend alternative machines/exercises for similar goals.
8) Provide a brief "quick coaching" summary (2-3 lines)."""

OUTPUT_SHAPE_CONTRACT = """Strict output rules:
- Output MUST be valid JSON only that matches exactly this TypeScript type:
  type AnalyzeResponse = {
    id: string;
    machine: { name: string; confidence: number; muscles: { primary: string[]; secondary: string[] } };
    howItWorks: string;
    steps: string[];
    safetyRisks: string[];
    commonMistakes: string[];
    alternatives: string[];
    quickCoach: string;
    createdAt: string;
  };
- machine.confidence is a number between 0 and 1.
- Prefer canonical names (e.g., "Barbell Bench Press" instead of generic "Chest Press").
- If uncertain or image is ambiguous, set machine.name = "Unknown" and confidence = 0, and include safetyRisks = ["Image unclear or not a gym machine"]."""

SYSTEM_PROMPT = f"{TASK_PREAMBLE}\n\n{OUTPUT_SHAPE_CONTRACT}"

JSON_ONLY_DIRECTIVE = "Return only JSON. No extra text."
RETRY_DIRECTIVE = "Return valid JSON ONLY that matches the AnalyzeResponse type."


def _image_part(image_data: str) -> Dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": image_data}}


def build_user_text(user_note: Optional[str]) -> str:
    lines = []
    if user_note and user_note.strip():
        lines.append(f"User note: {user_note.strip()}")
    lines.append(JSON_ONLY_DIRECTIVE)
    return "\n".join(lines)


def build_analysis_messages(image_data: str, user_note: Optional[str] = None) -> List[Dict[str, Any]]:
    """첫 번째 시도: 전체 작업 설명 + 사용자 메모 + 이미지"""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": build_user_text(user_note)},
                _image_part(image_data),
            ],
        },
    ]


def build_retry_messages(image_data: str) -> List[Dict[str, Any]]:
    """재시도: 출력 형태 규칙만 다시 강조하고 같은 이미지를 보냅니다."""
    return [
        {"role": "system", "content": OUTPUT_SHAPE_CONTRACT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": RETRY_DIRECTIVE},
                _image_part(image_data),
            ],
        },
    ]
