"""
LLM Runner
텍스트 완성(시스템 프롬프트 + 사용자 텍스트 -> 문자열) 호출 래퍼입니다.

- GroqRunner: OpenAI 호환 HTTP API (기본)
- LlamaCppRunner: llama.cpp 로컬 GGUF 모델
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional
from pathlib import Path

import httpx
from loguru import logger

from app.config import settings
from app.errors import EmptyCompletion, TransportError

# llama-cpp-python이 설치되지 않았을 때 graceful 처리
try:
    from llama_cpp import Llama
    LLAMA_AVAILABLE = True
except ImportError:
    LLAMA_AVAILABLE = False
    Llama = None


class BaseLLMRunner(ABC):
    """
    텍스트 완성 협력자 기본 클래스

    모든 구현은 빈 응답이면 EmptyCompletion,
    호출 자체가 실패하면 TransportError를 발생시킵니다.
    타임아웃 외의 재시도는 하지 않습니다.
    """

    provider_name: str = "base"

    def __init__(self):
        self.logger = logger.bind(component=f"LLMRunner:{self.provider_name}")

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """LLM 사용 가능 여부"""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int,
    ) -> str:
        """
        텍스트 완성

        Args:
            system_prompt: 시스템 지시문
            user_text: 사용자 입력 (구분자 포함)
            max_tokens: 최대 생성 토큰 수

        Returns:
            모델이 생성한 원문 문자열 (검증하지 않음)
        """

    def _messages(self, system_prompt: str, user_text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]

    def _extract_content(self, data: Any) -> str:
        """chat completion 응답에서 첫 번째 메시지 본문 추출"""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content or not str(content).strip():
            self.logger.warning("Empty completion from LLM")
            raise EmptyCompletion(
                "Empty response from LLM",
                details={"provider": self.provider_name},
            )
        return str(content).strip()


class GroqRunner(BaseLLMRunner):
    """
    Groq (OpenAI 호환 chat completions) 래퍼

    JSON 객체 응답 형식을 강제합니다.
    """

    provider_name = "groq"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.api_key = api_key if api_key is not None else settings.GROQ_API_KEY
        self.model = model or settings.GROQ_MODEL
        self.api_url = api_url or settings.GROQ_API_URL
        self.timeout = timeout or settings.LLM_TIMEOUT
        self._transport = transport

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int,
    ) -> str:
        request = {
            "model": self.model,
            "messages": self._messages(system_prompt, user_text),
            "response_format": {"type": "json_object"},
            "temperature": settings.LLM_TEMPERATURE,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.api_url, json=request, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            self.logger.error(f"LLM HTTP error: {e.response.status_code}")
            raise TransportError(
                f"LLM request failed with status {e.response.status_code}",
                details={"provider": self.provider_name},
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(f"LLM request failed: {e}")
            raise TransportError(
                f"LLM request failed: {e}",
                details={"provider": self.provider_name},
            ) from e
        except ValueError as e:
            self.logger.error(f"LLM returned non-JSON body: {e}")
            raise TransportError(
                "LLM returned an unreadable response body",
                details={"provider": self.provider_name},
            ) from e

        return self._extract_content(data)


class LlamaCppRunner(BaseLLMRunner):
    """
    llama.cpp 래퍼

    GGUF 모델을 처음 호출 시 로드합니다.
    추론은 블로킹이므로 워커 스레드에서 실행합니다.
    """

    provider_name = "llama_cpp"

    def __init__(
        self,
        model_path: Optional[str] = None,
        n_ctx: Optional[int] = None,
        n_gpu_layers: Optional[int] = None,
    ):
        """
        Args:
            model_path: GGUF 모델 파일 경로
            n_ctx: 컨텍스트 윈도우 크기
            n_gpu_layers: GPU 오프로드 레이어 수 (0이면 CPU only)
        """
        super().__init__()
        self.model_path = model_path or settings.MODEL_PATH
        self.n_ctx = n_ctx or settings.MODEL_N_CTX
        self.n_gpu_layers = (
            n_gpu_layers if n_gpu_layers is not None else settings.MODEL_N_GPU_LAYERS
        )
        self._model: Optional[Llama] = None

    @property
    def is_available(self) -> bool:
        if not LLAMA_AVAILABLE:
            return False
        return Path(self.model_path).exists()

    def load(self) -> bool:
        """모델 로드"""
        if not LLAMA_AVAILABLE:
            self.logger.warning("llama-cpp-python이 설치되지 않았습니다.")
            return False

        if not Path(self.model_path).exists():
            self.logger.warning(f"모델 파일이 없습니다: {self.model_path}")
            return False

        self.logger.info(f"Loading model: {self.model_path}")
        self._model = Llama(
            model_path=self.model_path,
            n_ctx=self.n_ctx,
            n_gpu_layers=self.n_gpu_layers,
            verbose=False,
        )
        self.logger.info("Model loaded successfully")
        return True

    def _generate(self, system_prompt: str, user_text: str, max_tokens: int) -> Any:
        if self._model is None and not self.load():
            raise TransportError(
                "Local LLM is not available",
                details={"provider": self.provider_name, "model_path": self.model_path},
            )
        return self._model.create_chat_completion(
            messages=self._messages(system_prompt, user_text),
            max_tokens=max_tokens,
            temperature=settings.LLM_TEMPERATURE,
            response_format={"type": "json_object"},
        )

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        max_tokens: int,
    ) -> str:
        try:
            output = await asyncio.to_thread(
                self._generate, system_prompt, user_text, max_tokens
            )
        except TransportError:
            raise
        except Exception as e:
            self.logger.error(f"Generation failed: {e}")
            raise TransportError(
                f"Local generation failed: {e}",
                details={"provider": self.provider_name},
            ) from e

        return self._extract_content(output)


# 싱글톤 인스턴스
_runner: Optional[BaseLLMRunner] = None


def create_llm_runner(provider: Optional[str] = None) -> BaseLLMRunner:
    """설정된 provider에 맞는 Runner 생성"""
    provider = (provider or settings.LLM_PROVIDER).lower()

    if provider == "groq":
        return GroqRunner()
    if provider in ("llama_cpp", "llama-cpp", "local"):
        return LlamaCppRunner()
    raise ValueError(f"지원하지 않는 LLM provider: {provider} ('groq' 또는 'llama_cpp')")


def get_llm_runner() -> BaseLLMRunner:
    """LLM Runner 싱글톤 인스턴스 반환"""
    global _runner
    if _runner is None:
        _runner = create_llm_runner()
    return _runner
