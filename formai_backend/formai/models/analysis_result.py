# formai/models/analysis_result.py
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class MuscleGroups:
    # 순서는 모델이 강조한 순서 그대로 유지합니다 (정렬하지 않음).
    primary: List[str] = field(default_factory=list)
    secondary: List[str] = field(default_factory=list)


@dataclass
class Machine:
    name: str
    confidence: float
    muscles: MuscleGroups


@dataclass
class AnalysisResult:
    """
    검증을 통과한 기구 분석 결과.
    JSON 직렬화(camelCase)는 formai.api.analyze.schemas.AnalysisResultSchema가 담당합니다.
    """
    id: str
    machine: Machine
    how_it_works: str
    steps: List[str]
    safety_risks: List[str]
    common_mistakes: List[str]
    alternatives: List[str]
    quick_coach: str
    created_at: str
    raw_model_notes: Optional[str] = None
