# Record Models
from pairgate.models.chat_message import ChatMessage
from pairgate.models.pairing_code import PairingCode
from pairgate.models.visit import VisitCounter

__all__ = [
    "ChatMessage",
    "PairingCode",
    "VisitCounter",
]
