from __future__ import annotations

from wonderland.core.http import request_with_retry


class OpenAICompatClient:
    def __init__(self, url: str, model: str, api_key: str = "", timeout_s: float = 45.0) -> None:
        self.url = url
        self.model = model
        self.api_key = api_key
        self.timeout_s = timeout_s

    def chat_completion(
        self,
        system: str,
        user: str,
        temperature: float,
        max_tokens: int,
        response_format: dict | None = None,
    ) -> str:
        payload: dict[str, object] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format is not None:
            payload["response_format"] = response_format

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        response = request_with_retry(
            "POST",
            self.url,
            headers=headers,
            json=payload,
            timeout_override=self.timeout_s,
            retries=0,
        )
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"chat completion body is {type(data).__name__}, expected an object")
        choices = data.get("choices") or []
        if not choices:
            return ""
        first = choices[0] if isinstance(choices, list) else None
        if not isinstance(first, dict):
            raise ValueError("chat completion choices are malformed")
        message = first.get("message") or {}
        if not isinstance(message, dict):
            raise ValueError("chat completion message is malformed")
        return str(message.get("content") or "")
