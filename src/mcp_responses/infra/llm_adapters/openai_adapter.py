from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from openai import AsyncOpenAI

from ...core.domain.exceptions import MalformedResponseError
from ...core.domain.models import ConversationItem, ServiceResponse, TokenUsage, ToolServerConfig
from .codec import as_dict, decode_items, encode_item, encode_server, extract_output_text


class OpenAIResponsesAdapter:
    """OpenAI Responses API adapter (gpt-4, gpt-5-mini, Azure deployments, etc.).

    - Attaches servers as tools=[{"type": "mcp", ...}]
    - Sends extra request fields through `extra_body`, merged raw into the payload
    - Azure OpenAI works through the v1 endpoint passed as `base_url`; `api_key`
      may be an async bearer token provider there (Entra ID)
    """

    def __init__(
        self,
        model: str,
        api_key: Union[str, Callable[[], Awaitable[str]]],
        *,
        base_url: Optional[str] = None,
    ) -> None:
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def create_response(
        self,
        input: Union[str, Sequence[ConversationItem]],  # noqa: A002
        *,
        servers: Sequence[ToolServerConfig] = (),
        extra_request_fields: Optional[Mapping[str, Any]] = None,
    ) -> ServiceResponse:
        payload_input: Union[str, list[dict[str, Any]]]
        if isinstance(input, str):
            payload_input = input
        else:
            payload_input = [encode_item(item) for item in input]

        kwargs: dict[str, Any] = {}
        if servers:
            kwargs["tools"] = [encode_server(server) for server in servers]
            kwargs["tool_choice"] = "auto"
        if extra_request_fields:
            kwargs["extra_body"] = dict(extra_request_fields)

        response = await self._client.responses.create(
            model=self.model,
            input=payload_input,
            store=True,
            **kwargs,
        )

        output = getattr(response, "output", None)
        if output is None:
            raise MalformedResponseError("Response has no output items")
        raw_items = [as_dict(item) for item in output]
        items = decode_items(raw_items)

        text = getattr(response, "output_text", None)
        if not isinstance(text, str):
            text = extract_output_text(raw_items)

        usage = None
        u = getattr(response, "usage", None)
        if u is not None:
            iu = u.input_tokens
            ou = u.output_tokens
            tt = u.total_tokens if u.total_tokens is not None else (iu or 0) + (ou or 0)
            usage = TokenUsage(input_tokens=iu, output_tokens=ou, total_tokens=tt)

        return ServiceResponse(
            items=items,
            output_text=text,
            response_id=getattr(response, "id", None),
            usage=usage,
        )
