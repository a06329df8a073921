"""
LLM Agent 기본 클래스
LLM 호출 한 번을 감싸는 작업(노트 분석, 검색 조건 추출)의 공통 뼈대입니다.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar
from loguru import logger

from app.llm import BaseLLMRunner, get_llm_runner, build_user_prompt

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """
    LLM Agent 기본 클래스

    - 러너는 생성 시 주입되며, 없으면 설정된 전역 러너를 사용합니다.
    - 사용자 텍스트는 구분자로 감싸 user 메시지로만 전달됩니다.
    - MalformedResponse, EmptyCompletion, TransportError는
      로그만 남기고 그대로 호출자에게 전달됩니다.
    """

    name: str = "BaseAgent"
    system_prompt: str = ""

    def __init__(self, runner: Optional[BaseLLMRunner] = None):
        self.runner = runner or get_llm_runner()
        self.logger = logger.bind(agent=self.name)

    async def run(self, text: InputT) -> OutputT:
        """텍스트 검증 -> LLM 호출 -> 결과 반환"""
        try:
            self._validate_input(text)
            return await self._process(text)
        except Exception as e:
            self.logger.error(f"{self.name} failed: {type(e).__name__}: {e}")
            raise

    async def _complete(self, user_text: str, max_tokens: int) -> str:
        """시스템 프롬프트 + 구분자로 감싼 사용자 텍스트로 완성 요청"""
        return await self.runner.complete(
            self.system_prompt,
            build_user_prompt(user_text),
            max_tokens,
        )

    @abstractmethod
    async def _process(self, text: InputT) -> OutputT:
        ...

    def _validate_input(self, text: InputT) -> None:
        # 공백뿐인 텍스트는 LLM에 보내지 않음
        if text is None or not str(text).strip():
            raise ValueError(f"{self.name}: 입력 텍스트가 비어 있습니다.")
