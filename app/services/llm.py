import logging
from typing import Optional

import httpx

from app.errors import TransportError

log = logging.getLogger(__name__)

GEMINI = "gemini"
CHAT_COMPLETIONS_PROVIDERS = ("openai", "groq", "local")


class LLMClient:
    """
    Text-generation client with two backends:
    - Gemini REST API (models/<model>:generateContent)
    - any OpenAI-compatible /chat/completions server (OpenAI, Groq, Ollama)

    Every failure (network, timeout, HTTP status >= 400, unreadable body)
    raises TransportError. An empty completion is returned as "".
    """

    def __init__(
        self,
        *,
        provider: str,
        base_url: str,
        model: str,
        api_key: str = "",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        provider = (provider or "").strip().lower()
        if provider != GEMINI and provider not in CHAT_COMPLETIONS_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {provider!r}")

        self.provider = provider
        self.base_url = (base_url or "").rstrip("/")
        self.model = model
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> str:
        if not self.base_url:
            raise TransportError(detail="LLM misconfigured: missing base_url.")

        try:
            async with self._client() as client:
                if self.provider == GEMINI:
                    r = await self._post_gemini(
                        client, prompt, system, max_tokens, temperature
                    )
                else:
                    r = await self._post_chat(
                        client, prompt, system, max_tokens, temperature
                    )
        except httpx.HTTPError as e:
            log.warning("LLM request failed (%s): %s", self.provider, e)
            raise TransportError(detail=str(e)) from e

        if r.status_code == 401 or r.status_code == 403:
            log.error("LLM rejected credentials (%s %s)", self.provider, r.status_code)
            raise TransportError(detail=f"Invalid API key ({r.status_code}).")
        if r.status_code >= 400:
            body = (r.text or "")[:500]
            log.error("LLM error (%s %s): %s", self.provider, r.status_code, body)
            raise TransportError(detail=f"LLM error ({r.status_code}): {body}")

        try:
            data = r.json()
        except ValueError as e:
            raise TransportError(detail="LLM returned a non-JSON body.") from e

        if self.provider == GEMINI:
            return _gemini_text(data)
        return _chat_text(data)

    # -----------------------------
    # Gemini
    # -----------------------------
    async def _post_gemini(self, client, prompt, system, max_tokens, temperature):
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        return await client.post(url, headers=headers, json=payload)

    # -----------------------------
    # OpenAI-compatible
    # -----------------------------
    async def _post_chat(self, client, prompt, system, max_tokens, temperature):
        url = f"{self.base_url}/chat/completions"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        return await client.post(url, headers=headers, json=payload)


def _gemini_text(data) -> str:
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = (candidates[0] or {}).get("content") or {}
    parts = content.get("parts") or []
    texts = [str(p["text"]) for p in parts if isinstance(p, dict) and "text" in p]
    return "".join(texts).strip()


def _chat_text(data) -> str:
    if isinstance(data, dict) and data.get("choices"):
        choice0 = data["choices"][0] or {}
        msg = choice0.get("message") or {}
        content = (msg.get("content") or "").strip()
        if content:
            return content

        text = (choice0.get("text") or "").strip()
        if text:
            return text

        return ""

    if isinstance(data, dict) and "message" in data:
        return str(data["message"]).strip()

    if isinstance(data, dict) and "response" in data:
        return str(data["response"]).strip()

    return ""


def make_llm_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> LLMClient:
    import config

    provider = config.LLM_PROVIDER
    if provider == GEMINI:
        return LLMClient(
            provider=GEMINI,
            base_url=config.GEMINI_BASE_URL,
            model=config.GEMINI_MODEL,
            api_key=config.GEMINI_API_KEY,
            timeout=config.LLM_TIMEOUT,
            transport=transport,
        )
    if provider == "groq":
        return LLMClient(
            provider="groq",
            base_url=config.GROQ_BASE_URL,
            model=config.GROQ_MODEL,
            api_key=config.GROQ_API_KEY,
            timeout=config.LLM_TIMEOUT,
            transport=transport,
        )
    if provider == "openai":
        return LLMClient(
            provider="openai",
            base_url=config.OPENAI_API_URL,
            model=config.OPENAI_MODEL,
            api_key=config.OPENAI_API_KEY,
            timeout=config.LLM_TIMEOUT,
            transport=transport,
        )
    return LLMClient(
        provider="local",
        base_url=config.OPENAI_BASE_URL,
        model=config.DEFAULT_MODEL,
        timeout=config.LLM_TIMEOUT,
        transport=transport,
    )
