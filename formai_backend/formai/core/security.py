# formai/core/security.py
from typing import Mapping

ANONYMOUS_CLIENT_KEY = "anon"


def resolve_client_key(headers: Mapping[str, str]) -> str:
    """
    요청 한도 계산에 사용할 클라이언트 식별자를 결정합니다.
    프록시 뒤에서 동작하므로 X-Forwarded-For의 첫 번째 주소를 사용하고,
    없으면 고정 익명 키로 묶습니다.

    인증 사용자 기준으로 바꾸려면 이 함수만 교체하면 됩니다.
    """
    forwarded = headers.get("X-Forwarded-For") or ""
    first = forwarded.split(",")[0].strip()
    return first or ANONYMOUS_CLIENT_KEY
