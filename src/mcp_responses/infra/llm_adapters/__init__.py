from .codec import decode_item, decode_items, encode_item, encode_server, extract_output_text
from .openai_adapter import OpenAIResponsesAdapter
from .factory import ResponsesClientFactory

__all__ = [
    "decode_item",
    "decode_items",
    "encode_item",
    "encode_server",
    "extract_output_text",
    "OpenAIResponsesAdapter",
    "ResponsesClientFactory",
]
