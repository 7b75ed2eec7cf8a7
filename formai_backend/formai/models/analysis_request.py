# formai/models/analysis_request.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AnalysisRequest:
    """
    분석 요청 한 건을 표현하는 값 객체. 요청마다 새로 만들어지며 공유되지 않습니다.
    """
    client_key: str
    image_data: Optional[str] = None  # data:<mime>;base64,... 형태의 인라인 이미지
    user_note: Optional[str] = None
    demo_mode: bool = False
