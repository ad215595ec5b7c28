from .codec import (
    MalformedEnvelopeError,
    decode_action_request,
    decode_message,
    encode_message,
)
from .messages import (
    ActionData,
    ActionRequest,
    ForcePriority,
    IncomingCommand,
    IncomingMessage,
    OutgoingCommand,
)

__all__ = [
    "MalformedEnvelopeError",
    "decode_action_request",
    "decode_message",
    "encode_message",
    "ActionData",
    "ActionRequest",
    "ForcePriority",
    "IncomingCommand",
    "IncomingMessage",
    "OutgoingCommand",
]
