"""
테스트용 가짜 협력자
"""

from app.llm import BaseLLMRunner


class FakeRunner(BaseLLMRunner):
    """
    미리 정해둔 응답을 순서대로 돌려주는 LLM Runner

    응답 대신 예외 인스턴스를 넣으면 해당 호출에서 예외를 발생시킵니다.
    응답이 떨어지면 빈 JSON 객체를 돌려줍니다.
    """

    provider_name = "fake"

    def __init__(self, *responses):
        super().__init__()
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    @property
    def is_available(self) -> bool:
        return True

    async def complete(self, system_prompt, user_text, max_tokens):
        self.calls.append((system_prompt, user_text, max_tokens))
        response = self.responses.pop(0) if self.responses else "{}"
        if isinstance(response, Exception):
            raise response
        return response
